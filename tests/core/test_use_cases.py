# tests/core/test_use_cases.py
import uuid
from datetime import timedelta
from decimal import Decimal

import pytest

from medicaledu.core.application.caching import CachePrefixes
from medicaledu.core.application.exceptions import RequestValidationError
from medicaledu.core.application.features.availability_slots.requests import (
    CreateAvailabilitySlotCommand,
    DeleteAvailabilitySlotCommand,
    GetAvailableSlotsQuery,
    SetSlotRecurrenceCommand,
    UpdateAvailabilitySlotCommand,
)
from medicaledu.core.application.features.courses.requests import (
    CourseMaterialInput,
    CreateCourseCommand,
    DeactivateCourseCommand,
    GetAllCoursesQuery,
    GetCourseByIdQuery,
    PublishCourseCommand,
    ReorderCourseMaterialsCommand,
    UpdateCourseCommand,
)
from medicaledu.core.application.features.users.requests import (
    AuthenticateUserCommand,
    ChangePasswordCommand,
    ConfirmEmailCommand,
    CreateUserCommand,
    GetAllUsersQuery,
    GetUserByIdQuery,
    RequestPasswordResetCommand,
    ResetPasswordCommand,
    UpdateUserProfileCommand,
)
from medicaledu.core.application.result import ErrorType
from medicaledu.core.domain.entities import AvailabilitySlot, Notification, User, utcnow
from medicaledu.core.domain.enums import NotificationType, SortDirection, UserRole
from medicaledu.core.domain.exceptions import EntityNotFoundError, InvalidOperationError

from tests.conftest import STRONG_PASSWORD


def notifications_for(session, user_id):
    return session.query(Notification).filter(Notification.user_id == user_id).all()


def material(title="Slides", order_index=0):
    return CourseMaterialInput(
        title=title,
        file_url=f"https://cdn.example.com/{title.lower()}.pdf",
        file_name=f"{title.lower()}.pdf",
        content_type="application/pdf",
        file_size_bytes=1024,
        order_index=order_index,
    )


@pytest.mark.asyncio
class TestUserUseCases:

    async def test_register_user(self, mediator, session):
        """
        Scenario: A new student registers.
        Expected: The account exists unconfirmed and a verification notification carries the token.
        """
        # Arrange
        command = CreateUserCommand(name="Nia Obi", email="Nia.Obi@Example.com", password=STRONG_PASSWORD)

        # Act
        result = await mediator.send(command)

        # Assert
        assert result.is_success
        assert result.value.email == "nia.obi@example.com"
        assert result.value.email_confirmed is False

        user = session.get(User, result.value.id)
        notes = notifications_for(session, user.id)
        assert [n.type for n in notes] == [NotificationType.EMAIL_VERIFICATION]
        assert user.email_confirmation_token in notes[0].message

    async def test_duplicate_email_is_a_conflict(self, mediator, student):
        result = await mediator.send(
            CreateUserCommand(name="Someone Else", email="SAM.PATEL@example.com", password=STRONG_PASSWORD)
        )

        assert result.error_type == ErrorType.CONFLICT

    async def test_weak_password_rejected_before_handler(self, mediator, session):
        result = await mediator.send(CreateUserCommand(name="Nia Obi", email="nia@example.com", password="short"))

        assert result.error_type == ErrorType.VALIDATION
        assert session.query(User).count() == 0

    async def test_confirm_email_with_issued_token(self, mediator, session):
        created = await mediator.send(
            CreateUserCommand(name="Nia Obi", email="nia@example.com", password=STRONG_PASSWORD)
        )
        token = session.get(User, created.value.id).email_confirmation_token

        result = await mediator.send(ConfirmEmailCommand(user_id=created.value.id, token=token))

        assert result.is_success
        assert result.value.email_confirmed is True

    async def test_confirm_email_with_wrong_token_rolls_back(self, mediator, student):
        student.generate_email_confirmation_token()

        with pytest.raises(InvalidOperationError):
            await mediator.send(ConfirmEmailCommand(user_id=student.id, token="not-the-token"))

        assert student.email_confirmed is False

    async def test_authenticate_success(self, mediator, student):
        result = await mediator.send(AuthenticateUserCommand(email="sam.patel@example.com", password=STRONG_PASSWORD))

        assert result.is_success
        assert result.value.user_id == student.id
        assert result.value.last_login_at is not None

    async def test_repeated_failures_lock_the_account(self, mediator, session, student):
        """
        Scenario: Three wrong passwords with MAX_FAILED_LOGIN_ATTEMPTS=3, then the right one.
        Expected: Failures are committed, the account locks, and even the right password is refused.
        """
        # Arrange
        wrong = AuthenticateUserCommand(email=student.email, password="Wr0ng!Pass")

        # Act
        for _ in range(3):
            result = await mediator.send(wrong)
            assert result.error_type == ErrorType.UNAUTHORIZED
        locked = await mediator.send(AuthenticateUserCommand(email=student.email, password=STRONG_PASSWORD))

        # Assert
        session.expire_all()
        reloaded = session.get(User, student.id)
        assert reloaded.failed_login_attempts == 3
        assert reloaded.is_locked
        assert locked.errors == ("Account is locked. Try again later.",)

    async def test_unknown_email_gets_generic_answer(self, mediator):
        result = await mediator.send(AuthenticateUserCommand(email="ghost@example.com", password=STRONG_PASSWORD))

        assert result.errors == ("Invalid email or password.",)

    async def test_change_password_requires_current_password(self, mediator, student):
        result = await mediator.send(
            ChangePasswordCommand(user_id=student.id, current_password="Wr0ng!Pass", new_password="N3w!Passw0rd")
        )

        assert result.error_type == ErrorType.UNAUTHORIZED
        assert student.verify_password(STRONG_PASSWORD)

    async def test_password_reset_round_trip(self, mediator, session, student):
        requested = await mediator.send(RequestPasswordResetCommand(email=student.email))
        token = session.get(User, student.id).password_reset_token

        reset = await mediator.send(
            ResetPasswordCommand(email=student.email, token=token, new_password="N3w!Passw0rd")
        )

        assert requested.value is True
        assert reset.is_success
        assert student.verify_password("N3w!Passw0rd")
        types = [n.type for n in notifications_for(session, student.id)]
        assert NotificationType.PASSWORD_RESET in types

    async def test_password_reset_for_unknown_email_reveals_nothing(self, mediator, session):
        result = await mediator.send(RequestPasswordResetCommand(email="ghost@example.com"))

        assert result.is_success
        assert session.query(Notification).count() == 0

    async def test_profile_update(self, mediator, student):
        result = await mediator.send(
            UpdateUserProfileCommand(user_id=student.id, name="Samira Patel", phone_number="+14155550123")
        )

        assert result.value.name == "Samira Patel"
        assert result.value.phone_number == "+14155550123"

    async def test_cached_user_is_refreshed_after_update(self, mediator, cache, student):
        """
        Scenario: A user is read (and cached), then renamed.
        Expected: The rename drops the cached entry so the next read sees the new name.
        """
        # Arrange
        before = await mediator.send(GetUserByIdQuery(user_id=student.id))
        assert f"{CachePrefixes.GET_USER_BY_ID}_{student.id}" in cache

        # Act
        await mediator.send(UpdateUserProfileCommand(user_id=student.id, name="Samira Patel"))
        after = await mediator.send(GetUserByIdQuery(user_id=student.id))

        # Assert
        assert before.name == "Sam Patel"
        assert after.name == "Samira Patel"

    async def test_instructor_rename_refreshes_cached_course(self, mediator, instructor, course):
        before = await mediator.send(GetCourseByIdQuery(course_id=course.id))

        await mediator.send(UpdateUserProfileCommand(user_id=instructor.id, name="Dr. Ada Grey-Mills"))
        after = await mediator.send(GetCourseByIdQuery(course_id=course.id))

        assert before.instructor_name == "Dr. Ada Grey"
        assert after.instructor_name == "Dr. Ada Grey-Mills"

    async def test_list_users_by_role(self, mediator, instructor, student, other_student):
        students = await mediator.send(GetAllUsersQuery(role=UserRole.STUDENT))
        instructors = await mediator.send(GetAllUsersQuery(role=UserRole.INSTRUCTOR))

        assert {u.email for u in students} == {student.email, other_student.email}
        assert [u.id for u in instructors] == [instructor.id]

    async def test_unknown_user_lookup_is_none(self, mediator):
        assert await mediator.send(GetUserByIdQuery(user_id=uuid.uuid4())) is None


@pytest.mark.asyncio
class TestCourseUseCases:

    async def test_create_course_with_materials(self, mediator, session, instructor):
        # Arrange
        command = CreateCourseCommand(
            instructor_id=instructor.id,
            title="Renal Physiology",
            description="Filtration, reabsorption and acid-base balance.",
            category="Physiology",
            price=Decimal("99.50"),
            duration_minutes=120,
            max_students=30,
            materials=[material("Slides"), material("Workbook", 1)],
            is_published=True,
        )

        # Act
        created = await mediator.send(command)

        # Assert
        assert created.material_count == 2
        assert created.is_published is True
        assert created.price == 99.5
        course = await mediator.send(GetCourseByIdQuery(course_id=created.course_id))
        assert course.instructor_name == "Dr. Ada Grey"
        assert [m.title for m in course.materials] == ["Slides", "Workbook"]

    async def test_publishing_without_materials_fails(self, mediator, session, instructor):
        command = CreateCourseCommand(
            instructor_id=instructor.id,
            title="Empty Course",
            description="Nothing here yet.",
            category="Anatomy",
            duration_minutes=30,
            max_students=5,
            is_published=True,
        )

        with pytest.raises(InvalidOperationError):
            await mediator.send(command)

    async def test_unknown_instructor(self, mediator):
        command = CreateCourseCommand(
            instructor_id=uuid.uuid4(),
            title="Orphan",
            description="No instructor.",
            category="Anatomy",
            duration_minutes=30,
            max_students=5,
        )

        with pytest.raises(EntityNotFoundError):
            await mediator.send(command)

    async def test_invalid_course_raises_validation_error(self, mediator, instructor):
        with pytest.raises(RequestValidationError) as excinfo:
            await mediator.send(CreateCourseCommand(instructor_id=instructor.id, price=Decimal("-1")))

        assert "Price: Input should be greater than or equal to 0" in excinfo.value.errors
        assert "Title: String should have at least 1 character" in excinfo.value.errors

    async def test_update_course_refreshes_cached_detail(self, mediator, course):
        before = await mediator.send(GetCourseByIdQuery(course_id=course.id))

        await mediator.send(UpdateCourseCommand(course_id=course.id, title="Cardiac Anatomy II", price=Decimal("150")))
        after = await mediator.send(GetCourseByIdQuery(course_id=course.id))

        assert before.title == "Cardiac Anatomy"
        assert after.title == "Cardiac Anatomy II"
        assert after.price == 150.0

    async def test_replacing_materials_then_unpublishing(self, mediator, course):
        result = await mediator.send(
            UpdateCourseCommand(course_id=course.id, materials=[material("Atlas")], is_published=False)
        )

        assert [m.title for m in result.materials] == ["Atlas"]
        assert result.is_published is False

    async def test_publish_twice_is_rejected(self, mediator, course):
        with pytest.raises(InvalidOperationError):
            await mediator.send(PublishCourseCommand(course_id=course.id))

    async def test_reorder_materials(self, mediator, course):
        added = await mediator.send(
            UpdateCourseCommand(course_id=course.id, materials=[material("First"), material("Second", 1)])
        )
        first, second = [m.id for m in added.materials]

        result = await mediator.send(ReorderCourseMaterialsCommand(course_id=course.id, material_ids=[second, first]))

        assert [m.title for m in result.materials] == ["Second", "First"]

    async def test_catalogue_filters_and_sorts(self, mediator, session, instructor, course):
        # Arrange
        await mediator.send(
            CreateCourseCommand(
                instructor_id=instructor.id,
                title="Neuroanatomy",
                description="Tracts and nuclei.",
                category="Anatomy",
                price=Decimal("60"),
                duration_minutes=60,
                max_students=10,
                materials=[material()],
                is_published=True,
            )
        )
        await mediator.send(
            CreateCourseCommand(
                instructor_id=instructor.id,
                title="Draft Pharmacology",
                description="Not ready.",
                category="Pharmacology",
                duration_minutes=60,
                max_students=10,
            )
        )

        # Act
        page = await mediator.send(
            GetAllCoursesQuery(is_published=True, price_sort_direction=SortDirection.ASC, page_size=10)
        )

        # Assert
        assert page.total_count == 2
        assert [c.title for c in page.courses] == ["Neuroanatomy", "Cardiac Anatomy"]
        assert page.total_pages == 1
        assert page.has_next_page is False

    async def test_catalogue_paging(self, mediator, course):
        page = await mediator.send(GetAllCoursesQuery(page=0, page_size=1))

        assert page.total_count == 1
        assert page.has_previous_page is False
        assert len(page.courses) == 1

    async def test_deactivated_course(self, mediator, course):
        result = await mediator.send(DeactivateCourseCommand(course_id=course.id))

        assert result.is_active is False
        active = await mediator.send(GetAllCoursesQuery(is_active=True))
        assert active.total_count == 0


@pytest.mark.asyncio
class TestAvailabilitySlotUseCases:

    async def test_create_slot_inherits_course_price(self, mediator, course, instructor):
        start = utcnow() + timedelta(days=2)

        slot = await mediator.send(
            CreateAvailabilitySlotCommand(
                course_id=course.id,
                instructor_id=instructor.id,
                start_time_utc=start,
                end_time_utc=start + timedelta(hours=2),
                max_participants=4,
            )
        )

        assert slot.price == 120.0
        assert slot.currency == "USD"
        assert slot.max_participants == 4
        detail = await mediator.send(GetCourseByIdQuery(course_id=course.id))
        assert detail.availability_slot_count == 1

    async def test_end_before_start_is_rejected(self, mediator, course, instructor):
        start = utcnow() + timedelta(days=2)
        with pytest.raises(RequestValidationError):
            await mediator.send(
                CreateAvailabilitySlotCommand(
                    course_id=course.id,
                    instructor_id=instructor.id,
                    start_time_utc=start,
                    end_time_utc=start - timedelta(hours=1),
                )
            )

    async def test_move_and_reprice(self, mediator, slot):
        start = slot.start_time_utc + timedelta(days=1)

        result = await mediator.send(
            UpdateAvailabilitySlotCommand(
                slot_id=slot.id,
                start_time_utc=start,
                end_time_utc=start + timedelta(hours=1),
                price=Decimal("95"),
            )
        )

        assert result.start_time_utc == start
        assert result.price == 95.0

    async def test_single_bound_update_is_rejected(self, mediator, slot):
        original_start = slot.start_time_utc

        with pytest.raises(RequestValidationError) as excinfo:
            await mediator.send(
                UpdateAvailabilitySlotCommand(slot_id=slot.id, start_time_utc=original_start + timedelta(hours=2))
            )

        assert excinfo.value.errors == ["Start and end time must be changed together."]
        assert slot.start_time_utc == original_start

    async def test_slot_with_participants_cannot_move(self, mediator, slot):
        slot.add_participant()
        start = slot.start_time_utc + timedelta(days=1)

        with pytest.raises(InvalidOperationError):
            await mediator.send(
                UpdateAvailabilitySlotCommand(
                    slot_id=slot.id, start_time_utc=start, end_time_utc=start + timedelta(hours=1)
                )
            )

    async def test_recurrence_set_and_cleared(self, mediator, slot):
        recurring = await mediator.send(SetSlotRecurrenceCommand(slot_id=slot.id, pattern="WEEKLY"))
        cleared = await mediator.send(SetSlotRecurrenceCommand(slot_id=slot.id, pattern=""))

        assert recurring.is_recurring is True
        assert cleared.is_recurring is False

    async def test_delete_free_slot(self, mediator, session, slot):
        assert await mediator.send(DeleteAvailabilitySlotCommand(slot_id=slot.id)) is True
        assert session.get(AvailabilitySlot, slot.id) is None

    async def test_delete_unknown_slot(self, mediator):
        with pytest.raises(EntityNotFoundError):
            await mediator.send(DeleteAvailabilitySlotCommand(slot_id=uuid.uuid4()))

    async def test_available_slots_exclude_full_and_past(self, mediator, session, course, slot_factory):
        # Arrange
        open_slot = slot_factory(start_in=timedelta(days=1))
        full_slot = slot_factory(start_in=timedelta(days=2), max_participants=1)
        full_slot.add_participant()
        slot_factory(start_in=timedelta(hours=-2))
        session.commit()

        # Act
        available = await mediator.send(
            GetAvailableSlotsQuery(start=utcnow() - timedelta(days=1), end=utcnow() + timedelta(days=3))
        )

        # Assert
        assert [s.id for s in available] == [open_slot.id]
