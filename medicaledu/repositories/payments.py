# medicaledu/repositories/payments.py

from __future__ import annotations

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from medicaledu.core.domain.entities import Payment
from medicaledu.core.domain.enums import PaymentStatus


class PaymentsRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def get_by_id(self, payment_id: UUID) -> Optional[Payment]:
        return self.session.get(Payment, payment_id)

    def list_by_user(self, user_id: UUID, *, status: Optional[PaymentStatus] = None) -> Sequence[Payment]:
        stmt = select(Payment).where(Payment.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Payment.status == status)
        stmt = stmt.order_by(Payment.created_at.desc())
        return list(self.session.execute(stmt).scalars().all())

    def add(self, payment: Payment) -> Payment:
        self.session.add(payment)
        return payment
