# medicaledu/schemas/payments.py
from decimal import Decimal
from typing import Optional

from medicaledu.schemas.base import RequestBody


class PaymentFailureBody(RequestBody):
    reason: str = ""


class RefundBody(RequestBody):
    reason: str = ""
    amount: Optional[Decimal] = None
