"""
Mapped domain entities.

Importing this package registers every table on ``Base.metadata``.
"""

from medicaledu.core.domain.entities.base import AggregateRoot, Base, utcnow
from medicaledu.core.domain.entities.user import User
from medicaledu.core.domain.entities.course import Course, CourseMaterial
from medicaledu.core.domain.entities.availability_slot import AvailabilitySlot
from medicaledu.core.domain.entities.promo_code import PromoCode
from medicaledu.core.domain.entities.booking import Booking
from medicaledu.core.domain.entities.payment import Payment
from medicaledu.core.domain.entities.enrollment import Enrollment
from medicaledu.core.domain.entities.notification import Notification
from medicaledu.core.domain.entities.ratings import CourseRating, InstructorRating
from medicaledu.core.domain.entities.audit_log import AuditLog

__all__ = [
    "AggregateRoot",
    "AuditLog",
    "AvailabilitySlot",
    "Base",
    "Booking",
    "Course",
    "CourseMaterial",
    "CourseRating",
    "Enrollment",
    "InstructorRating",
    "Notification",
    "Payment",
    "PromoCode",
    "User",
    "utcnow",
]
