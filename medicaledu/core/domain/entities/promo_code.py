# medicaledu/core/domain/entities/promo_code.py

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Boolean, Enum as SQLEnum, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from medicaledu.core.domain.entities.base import Base, EntityMixin, UTCDateTime, ensure_utc, utcnow
from medicaledu.core.domain.enums import DiscountType
from medicaledu.core.domain.exceptions import DomainValidationError, InvalidOperationError
from medicaledu.core.domain.value_objects import Currency, Money, PromoCodeValue


class PromoCode(EntityMixin, Base):
    __tablename__ = "promo_codes"

    code: Mapped[str] = mapped_column(String(20), unique=True, index=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    discount_type: Mapped[DiscountType] = mapped_column(
        SQLEnum(DiscountType, name="discount_type_enum"), nullable=False
    )
    discount_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    max_uses: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    current_uses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    valid_from: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    valid_until: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # Comma-separated course ids; empty means every course.
    applicable_course_ids: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)

    @classmethod
    def create(
        cls,
        *,
        code: str,
        discount_type: DiscountType,
        discount_value: Decimal,
        valid_from: datetime,
        valid_until: datetime,
        currency: str = "USD",
        max_uses: Optional[int] = None,
        description: Optional[str] = None,
        applicable_course_ids: Optional[List[uuid.UUID]] = None,
        created_by: Optional[str] = None,
    ) -> "PromoCode":
        if not code or not code.strip():
            raise DomainValidationError("Code is required.")
        if discount_value is None or discount_value < 0:
            raise DomainValidationError("Discount value cannot be negative.")
        if discount_type == DiscountType.PERCENTAGE and discount_value > 100:
            raise DomainValidationError("Percentage discount cannot exceed 100.")
        valid_from = ensure_utc(valid_from)
        valid_until = ensure_utc(valid_until)
        if valid_until <= valid_from:
            raise DomainValidationError("Valid until must be after valid from.")
        if max_uses is not None and max_uses <= 0:
            raise DomainValidationError("Max uses must be positive if specified.")

        return cls(
            id=uuid.uuid4(),
            code=PromoCodeValue(value=code).value,
            description=description,
            discount_type=discount_type,
            discount_value=Decimal(str(discount_value)),
            currency=Currency(code=currency).code,
            max_uses=max_uses,
            current_uses=0,
            valid_from=valid_from,
            valid_until=valid_until,
            is_active=True,
            applicable_course_ids=",".join(str(i) for i in applicable_course_ids) if applicable_course_ids else None,
            created_at=utcnow(),
            created_by=created_by,
        )

    @property
    def course_ids(self) -> List[uuid.UUID]:
        if not self.applicable_course_ids:
            return []
        return [uuid.UUID(value) for value in self.applicable_course_ids.split(",") if value]

    @property
    def is_exhausted(self) -> bool:
        return self.max_uses is not None and self.current_uses >= self.max_uses

    def is_valid_at(self, now: Optional[datetime] = None) -> bool:
        now = now or utcnow()
        return self.is_active and not self.is_exhausted and self.valid_from <= now <= self.valid_until

    def applies_to(self, course_id: uuid.UUID) -> bool:
        ids = self.course_ids
        return not ids or course_id in ids

    def discount_for(self, amount: Money) -> Money:
        """Discount for ``amount``, never more than the amount itself."""
        if self.discount_type == DiscountType.PERCENTAGE:
            discount = amount.multiply(self.discount_value / Decimal("100"))
        else:
            if amount.currency != self.currency:
                raise InvalidOperationError(
                    f"Promo code currency {self.currency} does not match {amount.currency}."
                )
            discount = Money(amount=min(self.discount_value, amount.amount), currency=amount.currency)
        return discount if discount.amount <= amount.amount else amount

    def redeem(self, now: Optional[datetime] = None, modified_by: Optional[str] = None) -> None:
        if not self.is_active:
            raise InvalidOperationError("Promo code is not active.")
        now = now or utcnow()
        if not (self.valid_from <= now <= self.valid_until):
            raise InvalidOperationError("Promo code is not valid at this time.")
        if self.is_exhausted:
            raise InvalidOperationError("Promo code has reached its maximum number of uses.")
        self.current_uses += 1
        self.touch(modified_by)

    def update_description(self, description: Optional[str]) -> None:
        self.description = description
        self.touch()

    def update_discount_value(self, value: Decimal) -> None:
        if value is None or value < 0:
            raise DomainValidationError("Discount value cannot be negative.")
        self.discount_value = Decimal(str(value))
        self.touch()

    def update_max_uses(self, max_uses: Optional[int]) -> None:
        if max_uses is not None and max_uses <= 0:
            raise DomainValidationError("Max uses must be positive if specified.")
        self.max_uses = max_uses
        self.touch()

    def set_active(self, is_active: bool) -> None:
        self.is_active = is_active
        self.touch()
