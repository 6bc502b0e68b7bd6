# medicaledu/repositories/promo_codes.py

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from medicaledu.core.domain.entities import PromoCode


class PromoCodesRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    def get_by_id(self, promo_code_id) -> Optional[PromoCode]:
        return self.session.get(PromoCode, promo_code_id)

    def get_by_code(self, code: str) -> Optional[PromoCode]:
        normalized = "".join(code.split()).upper()
        stmt = select(PromoCode).where(PromoCode.code == normalized)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_codes(self, *, active_only: bool = False) -> Sequence[PromoCode]:
        stmt = select(PromoCode)
        if active_only:
            stmt = stmt.where(PromoCode.is_active.is_(True))
        stmt = stmt.order_by(PromoCode.code.asc())
        return list(self.session.execute(stmt).scalars().all())

    def add(self, promo_code: PromoCode) -> PromoCode:
        self.session.add(promo_code)
        return promo_code
