# medicaledu/schemas/availability_slots.py
from datetime import datetime
from decimal import Decimal
from typing import Optional

from medicaledu.schemas.base import RequestBody


class SlotUpdateBody(RequestBody):
    start_time_utc: Optional[datetime] = None
    end_time_utc: Optional[datetime] = None
    price: Optional[Decimal] = None
    notes: Optional[str] = None


class SlotRecurrenceBody(RequestBody):
    # Empty or missing cancels the recurrence.
    pattern: Optional[str] = None
