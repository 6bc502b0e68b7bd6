# medicaledu/core/domain/entities/course.py

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional, Sequence

from sqlalchemy import (
    Boolean,
    BigInteger,
    Enum as SQLEnum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medicaledu.core.domain.entities.base import AggregateRoot, Base, EntityMixin, UTCDateTime, utcnow
from medicaledu.core.domain.enums import BookingStatus, DifficultyLevel, UserRole
from medicaledu.core.domain.events import EventType
from medicaledu.core.domain.exceptions import DomainValidationError, InvalidOperationError
from medicaledu.core.domain.value_objects import Currency, Money

if TYPE_CHECKING:
    from medicaledu.core.domain.entities.availability_slot import AvailabilitySlot
    from medicaledu.core.domain.entities.enrollment import Enrollment
    from medicaledu.core.domain.entities.ratings import CourseRating
    from medicaledu.core.domain.entities.user import User


# ---------------------------------------------------------------------------
# Course materials
# ---------------------------------------------------------------------------


class CourseMaterial(EntityMixin, Base):
    """A downloadable file attached to a course, ordered by ``sort_order``."""

    __tablename__ = "course_materials"

    course_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("courses.id", ondelete="CASCADE"), index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    file_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(100), nullable=False)
    file_size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_free: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_required: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    course: Mapped["Course"] = relationship("Course", back_populates="materials")

    @classmethod
    def create(
        cls,
        *,
        title: str,
        file_url: str,
        file_name: str,
        content_type: str,
        file_size_bytes: int = 0,
        sort_order: int = 0,
        description: Optional[str] = None,
        is_free: bool = False,
        is_required: bool = True,
    ) -> "CourseMaterial":
        if not title or not title.strip():
            raise DomainValidationError("Title is required.")
        if not file_url or not file_url.strip():
            raise DomainValidationError("File URL is required.")
        if not file_name or not file_name.strip():
            raise DomainValidationError("File name is required.")
        if not content_type or not content_type.strip():
            raise DomainValidationError("Content type is required.")
        if file_size_bytes < 0:
            raise DomainValidationError("File size cannot be negative.")
        if sort_order < 0:
            raise DomainValidationError("Order cannot be negative.")

        return cls(
            id=uuid.uuid4(),
            title=title.strip(),
            description=description,
            file_url=file_url.strip(),
            file_name=file_name.strip(),
            content_type=content_type.strip(),
            file_size_bytes=file_size_bytes,
            sort_order=sort_order,
            is_free=is_free,
            is_required=is_required,
            created_at=utcnow(),
        )

    def update_file(self, file_url: str, file_name: str, content_type: str, file_size_bytes: int) -> None:
        if not file_url or not file_name or not content_type:
            raise DomainValidationError("File URL, file name and content type are required.")
        if file_size_bytes < 0:
            raise DomainValidationError("File size cannot be negative.")
        self.file_url = file_url
        self.file_name = file_name
        self.content_type = content_type
        self.file_size_bytes = file_size_bytes
        self.touch()

    def reorder(self, sort_order: int) -> None:
        if sort_order < 0:
            raise DomainValidationError("Order cannot be negative.")
        self.sort_order = sort_order
        self.touch()


# ---------------------------------------------------------------------------
# Course
# ---------------------------------------------------------------------------


class Course(AggregateRoot, Base):
    """
    A course offered by an instructor.

    Deleting a course is a soft delete: ``deleted_at`` is stamped and the
    course reports ``is_active = False``.
    """

    __tablename__ = "courses"

    instructor_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("users.id"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(2000), nullable=True)
    short_description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    thumbnail_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    video_intro_url: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)
    duration_minutes: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    max_students: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True, index=True)
    difficulty_level: Mapped[Optional[DifficultyLevel]] = mapped_column(
        SQLEnum(DifficultyLevel, name="difficulty_level_enum"), nullable=True
    )
    tags: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    is_published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    published_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)
    deleted_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    # Relationships
    instructor: Mapped["User"] = relationship("User")
    materials: Mapped[List[CourseMaterial]] = relationship(
        CourseMaterial,
        back_populates="course",
        cascade="all, delete-orphan",
        order_by=CourseMaterial.sort_order,
    )
    availability_slots: Mapped[List["AvailabilitySlot"]] = relationship(
        "AvailabilitySlot",
        back_populates="course",
        cascade="all, delete-orphan",
    )
    enrollments: Mapped[List["Enrollment"]] = relationship("Enrollment", back_populates="course")
    ratings: Mapped[List["CourseRating"]] = relationship("CourseRating", back_populates="course")

    # ------------------------------------------------------------------
    # Factory
    # ------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        *,
        instructor_id: uuid.UUID,
        title: str,
        price: Decimal,
        currency: str = "USD",
        description: Optional[str] = None,
        short_description: Optional[str] = None,
        content: Optional[str] = None,
        duration_minutes: Optional[int] = None,
        max_students: Optional[int] = None,
        category: Optional[str] = None,
        difficulty_level: Optional[DifficultyLevel] = None,
        tags: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
        video_intro_url: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> "Course":
        if not instructor_id:
            raise DomainValidationError("Instructor ID is required.")
        cls._check_title(title)
        if price is None or price < 0:
            raise DomainValidationError("Price cannot be negative.")

        course = cls(
            id=uuid.uuid4(),
            instructor_id=instructor_id,
            title=title.strip(),
            description=description,
            short_description=short_description,
            content=content,
            duration_minutes=duration_minutes,
            max_students=max_students,
            category=category,
            difficulty_level=difficulty_level,
            tags=tags,
            thumbnail_url=thumbnail_url.strip() if thumbnail_url else None,
            video_intro_url=video_intro_url,
            price=Decimal(str(price)),
            currency=Currency(code=currency).code,
            is_published=False,
            created_at=utcnow(),
            created_by=created_by,
        )
        course.raise_event(EventType.COURSE_CREATED, instructor_id=str(instructor_id), title=course.title)
        return course

    @staticmethod
    def _check_title(title: Optional[str]) -> None:
        if not title or not title.strip():
            raise DomainValidationError("Title is required.")
        if len(title) > 200:
            raise DomainValidationError("Title cannot exceed 200 characters.")

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def is_active(self) -> bool:
        return self.deleted_at is None

    @property
    def money(self) -> Money:
        return Money(amount=self.price, currency=self.currency)

    @property
    def tag_list(self) -> List[str]:
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]

    def enrollment_count(self) -> int:
        return sum(1 for enrollment in self.enrollments if enrollment.is_active)

    def total_revenue(self) -> Decimal:
        return sum(
            (
                booking.amount
                for slot in self.availability_slots
                for booking in slot.bookings
                if booking.status in (BookingStatus.CONFIRMED, BookingStatus.RESCHEDULED)
            ),
            Decimal("0"),
        )

    def can_be_accessed_by(self, user_id: uuid.UUID, role: UserRole) -> bool:
        if role == UserRole.ADMIN:
            return True
        if role == UserRole.INSTRUCTOR and self.instructor_id == user_id:
            return True
        if role == UserRole.STUDENT and self.is_published:
            return any(e.student_id == user_id and e.is_active for e in self.enrollments)
        return False

    def can_be_booked_by(self, role: UserRole) -> bool:
        now = utcnow()
        return (
            self.is_published
            and role == UserRole.STUDENT
            and any(not s.is_booked and s.start_time_utc > now for s in self.availability_slots)
        )

    # ------------------------------------------------------------------
    # Details
    # ------------------------------------------------------------------

    def update_details(
        self,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        short_description: Optional[str] = None,
        content: Optional[str] = None,
        duration_minutes: Optional[int] = None,
        max_students: Optional[int] = None,
        category: Optional[str] = None,
        difficulty_level: Optional[DifficultyLevel] = None,
        tags: Optional[str] = None,
        video_intro_url: Optional[str] = None,
        modified_by: Optional[str] = None,
    ) -> None:
        if title is not None:
            self._check_title(title)
            self.title = title.strip()
        if description is not None:
            self.description = description
        if short_description is not None:
            self.short_description = short_description
        if content is not None:
            self.content = content
        if duration_minutes is not None:
            self.duration_minutes = duration_minutes
        if max_students is not None:
            self.max_students = max_students
        if category is not None:
            self.category = category
        if difficulty_level is not None:
            self.difficulty_level = difficulty_level
        if tags is not None:
            self.tags = tags
        if video_intro_url is not None:
            self.video_intro_url = video_intro_url
        self.touch(modified_by)
        self.raise_event(EventType.COURSE_UPDATED, title=self.title)

    def update_price(self, new_price: Decimal, currency: Optional[str] = None) -> None:
        if new_price is None or new_price < 0:
            raise DomainValidationError("Price cannot be negative.")
        self.price = Decimal(str(new_price))
        if currency is not None:
            self.currency = Currency(code=currency).code
        self.touch()

    def set_thumbnail(self, url: str) -> None:
        if not url or not url.strip():
            raise DomainValidationError("Thumbnail URL is required.")
        self.thumbnail_url = url.strip()
        self.touch()

    def change_instructor(self, instructor_id: uuid.UUID) -> None:
        if not instructor_id:
            raise DomainValidationError("Instructor ID is required.")
        self.instructor_id = instructor_id
        self.touch()

    # ------------------------------------------------------------------
    # Publication / lifecycle
    # ------------------------------------------------------------------

    def publish(self, published_at: Optional[datetime] = None) -> None:
        if self.is_published:
            raise InvalidOperationError("Already published.")
        if not self.materials:
            raise InvalidOperationError("Cannot publish course without materials")
        self.is_published = True
        self.published_at = published_at or utcnow()
        self.touch()
        self.raise_event(EventType.COURSE_PUBLISHED, title=self.title, instructor_id=str(self.instructor_id))

    def unpublish(self) -> None:
        if not self.is_published:
            raise InvalidOperationError("Not published.")
        self.is_published = False
        self.published_at = None
        self.touch()
        self.raise_event(EventType.COURSE_UNPUBLISHED, title=self.title)

    def activate(self) -> None:
        if self.is_active:
            raise InvalidOperationError("Course is already active.")
        self.deleted_at = None
        self.touch()

    def deactivate(self) -> None:
        if not self.is_active:
            raise InvalidOperationError("Course is already inactive.")
        self.deleted_at = utcnow()
        self.touch()
        self.raise_event(EventType.COURSE_DEACTIVATED)

    # ------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------

    def add_material(self, material: CourseMaterial) -> None:
        if material is None:
            raise DomainValidationError("Material is required.")
        if any(m.id == material.id for m in self.materials):
            raise InvalidOperationError("Material already exists in course")
        self.materials.append(material)
        self.touch()
        self.raise_event(EventType.COURSE_MATERIAL_ADDED, material_id=str(material.id), title=material.title)

    def remove_material(self, material_id: uuid.UUID) -> None:
        material = next((m for m in self.materials if m.id == material_id), None)
        if material is None:
            raise InvalidOperationError("Material not found in course")
        self.materials.remove(material)
        self.touch()
        self.raise_event(EventType.COURSE_MATERIAL_REMOVED, material_id=str(material_id))

    def clear_materials(self) -> None:
        self.materials.clear()
        self.touch()

    def reorder_materials(self, material_ids: Sequence[uuid.UUID]) -> None:
        if material_ids is None or len(material_ids) != len(self.materials):
            raise DomainValidationError("Must provide all material IDs in the correct order")

        by_id = {m.id: m for m in self.materials}
        ordered = []
        for material_id in material_ids:
            material = by_id.get(material_id)
            if material is None:
                raise DomainValidationError(f"Material with ID {material_id} not found in course")
            ordered.append(material)

        for position, material in enumerate(ordered, start=1):
            material.reorder(position)
        self.touch()
        self.raise_event(EventType.COURSE_MATERIALS_REORDERED)

    # ------------------------------------------------------------------
    # Availability slots
    # ------------------------------------------------------------------

    def add_availability_slot(self, slot: "AvailabilitySlot") -> None:
        if slot is None:
            raise DomainValidationError("Availability slot is required.")
        if any(s.id == slot.id for s in self.availability_slots):
            raise InvalidOperationError("Availability slot already exists")
        self.availability_slots.append(slot)
        self.touch()
        self.raise_event(
            EventType.COURSE_SLOT_ADDED,
            slot_id=str(slot.id),
            start_time_utc=slot.start_time_utc.isoformat(),
        )

    def remove_availability_slot(self, slot_id: uuid.UUID) -> None:
        slot = next((s for s in self.availability_slots if s.id == slot_id), None)
        if slot is None:
            raise InvalidOperationError("Availability slot not found")
        if slot.is_booked:
            raise InvalidOperationError("Cannot remove booked availability slot")
        self.availability_slots.remove(slot)
        self.touch()
        self.raise_event(EventType.COURSE_SLOT_REMOVED, slot_id=str(slot_id))
