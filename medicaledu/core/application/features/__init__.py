"""
Feature slices.

Importing this package registers every request handler and validator with
the mediator.
"""

from medicaledu.core.application.features.availability_slots import handlers as _slot_handlers  # noqa: F401
from medicaledu.core.application.features.availability_slots import validators as _slot_validators  # noqa: F401
from medicaledu.core.application.features.bookings import handlers as _booking_handlers  # noqa: F401
from medicaledu.core.application.features.bookings import validators as _booking_validators  # noqa: F401
from medicaledu.core.application.features.courses import handlers as _course_handlers  # noqa: F401
from medicaledu.core.application.features.courses import validators as _course_validators  # noqa: F401
from medicaledu.core.application.features.enrollments import handlers as _enrollment_handlers  # noqa: F401
from medicaledu.core.application.features.enrollments import validators as _enrollment_validators  # noqa: F401
from medicaledu.core.application.features.notifications import handlers as _notification_handlers  # noqa: F401
from medicaledu.core.application.features.notifications import validators as _notification_validators  # noqa: F401
from medicaledu.core.application.features.payments import handlers as _payment_handlers  # noqa: F401
from medicaledu.core.application.features.payments import validators as _payment_validators  # noqa: F401
from medicaledu.core.application.features.promo_codes import handlers as _promo_handlers  # noqa: F401
from medicaledu.core.application.features.promo_codes import validators as _promo_validators  # noqa: F401
from medicaledu.core.application.features.ratings import handlers as _rating_handlers  # noqa: F401
from medicaledu.core.application.features.ratings import validators as _rating_validators  # noqa: F401
from medicaledu.core.application.features.users import handlers as _user_handlers  # noqa: F401
from medicaledu.core.application.features.users import validators as _user_validators  # noqa: F401
