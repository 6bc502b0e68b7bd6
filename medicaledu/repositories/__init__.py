"""
Data-access layer: one repository per aggregate, all sharing the unit of
work's SQLAlchemy session.
"""

from medicaledu.repositories.availability_slots import AvailabilitySlotsRepository
from medicaledu.repositories.bookings import BookingsRepository
from medicaledu.repositories.courses import CourseSearchCriteria, CoursesRepository
from medicaledu.repositories.enrollments import EnrollmentsRepository
from medicaledu.repositories.notifications import NotificationsRepository
from medicaledu.repositories.payments import PaymentsRepository
from medicaledu.repositories.promo_codes import PromoCodesRepository
from medicaledu.repositories.ratings import RatingsRepository
from medicaledu.repositories.users import UsersRepository

__all__ = [
    "AvailabilitySlotsRepository",
    "BookingsRepository",
    "CourseSearchCriteria",
    "CoursesRepository",
    "EnrollmentsRepository",
    "NotificationsRepository",
    "PaymentsRepository",
    "PromoCodesRepository",
    "RatingsRepository",
    "UsersRepository",
]
