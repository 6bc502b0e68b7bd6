# tests/conftest.py
from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from dependency_injector import providers
from sqlalchemy.pool import StaticPool

from medicaledu.core.application import features  # noqa: F401
from medicaledu.core.application.caching import MemoryCacheService
from medicaledu.core.application.mediator import Mediator
from medicaledu.core.domain.entities import AvailabilitySlot, Base, Course, CourseMaterial, User
from medicaledu.core.domain.entities.base import utcnow
from medicaledu.core.domain.enums import UserRole
from medicaledu.db.session import build_engine, build_session_factory
from medicaledu.db.unit_of_work import UnitOfWork
from medicaledu.shared.config import AppEnv, Settings
from medicaledu.shared.container import Container

STRONG_PASSWORD = "Str0ng!Pass"


@pytest.fixture(scope="function")
def test_settings():
    """Settings isolated from the environment and any local .env file."""
    return Settings(
        _env_file=None,
        APP_ENV=AppEnv.TESTING,
        DB_RETRY_ATTEMPTS=1,
        MAX_FAILED_LOGIN_ATTEMPTS=3,
    )


@pytest.fixture(scope="function")
def engine():
    """A private in-memory SQLite database; StaticPool keeps it alive across sessions."""
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def session(engine):
    db = build_session_factory(engine)()
    yield db
    db.close()


@pytest.fixture(scope="function")
def cache():
    return MemoryCacheService()


@pytest.fixture(scope="function")
def uow(session, test_settings):
    return UnitOfWork(session, retry_attempts=test_settings.DB_RETRY_ATTEMPTS)


@pytest.fixture(scope="function")
def mediator(uow, cache, test_settings):
    """The real pipeline running against the in-memory database."""
    return Mediator(uow, cache, test_settings)


@pytest.fixture(scope="function")
def mock_uow():
    """Returns a mock Unit of Work whose execution strategy just runs the operation."""
    uow = MagicMock(spec=UnitOfWork)

    async def run(operation):
        return await operation()

    uow.execute = AsyncMock(side_effect=run)
    uow.collect_domain_events.return_value = []
    return uow


@pytest.fixture(scope="function")
def mock_cache():
    """Returns a mock cache service."""
    cache = MagicMock(spec=MemoryCacheService)
    cache.try_get.return_value = (False, None)
    cache.get_or_create = AsyncMock()
    return cache


@pytest.fixture(scope="function")
def container(cache, test_settings):
    """
    Sets up the Dependency Injection Container for testing.
    The process-wide cache and the settings are replaced with test instances.
    """
    container = Container()
    container.cache_service.override(providers.Object(cache))
    container.settings.override(providers.Object(test_settings))

    yield container

    container.reset_override()


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------


def make_user(session, name, email, role=UserRole.STUDENT):
    user = User.create(name=name, email=email, password=STRONG_PASSWORD, role=role)
    session.add(user)
    session.commit()
    return user


def make_slot(session, course, start_in=timedelta(days=3), max_participants=2, price=Decimal("80.00")):
    start = utcnow() + start_in
    slot = AvailabilitySlot.create(
        course_id=course.id,
        instructor_id=course.instructor_id,
        start_time_utc=start,
        end_time_utc=start + timedelta(hours=1),
        price=price,
        currency=course.currency,
        max_participants=max_participants,
    )
    course.add_availability_slot(slot)
    session.commit()
    return slot


@pytest.fixture
def instructor(session):
    return make_user(session, "Dr. Ada Grey", "ada.grey@example.com", UserRole.INSTRUCTOR)


@pytest.fixture
def student(session):
    return make_user(session, "Sam Patel", "sam.patel@example.com")


@pytest.fixture
def other_student(session):
    return make_user(session, "Lee Chen", "lee.chen@example.com")


@pytest.fixture
def course(session, instructor):
    """A published course with one material and room for two students."""
    course = Course.create(
        instructor_id=instructor.id,
        title="Cardiac Anatomy",
        description="Chambers, valves and the conduction system.",
        price=Decimal("120.00"),
        currency="USD",
        duration_minutes=90,
        max_students=2,
        category="Anatomy",
    )
    course.add_material(
        CourseMaterial.create(
            title="Lecture notes",
            file_url="https://cdn.example.com/cardiac/notes.pdf",
            file_name="notes.pdf",
            content_type="application/pdf",
            file_size_bytes=2048,
        )
    )
    course.publish()
    session.add(course)
    session.commit()
    return course


@pytest.fixture
def slot(session, course):
    """A bookable slot three days ahead with two seats at 80.00 USD."""
    return make_slot(session, course)


@pytest.fixture
def user_factory(session):
    def factory(name, email, role=UserRole.STUDENT):
        return make_user(session, name, email, role)

    return factory


@pytest.fixture
def slot_factory(session, course):
    def factory(**kwargs):
        return make_slot(session, course, **kwargs)

    return factory
