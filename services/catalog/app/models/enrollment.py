from datetime import datetime, timezone

from sqlalchemy import TIMESTAMP, ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base, TenantScopedMixin

from .enums import (
    CourseEnrollmentType,
    EnrollmentStatus,
    course_enrollment_type_enum,
    enrollment_status_enum,
)


class Enrollment(TenantScopedMixin, Base):
    __tablename__ = "enrollments"

    enrollment_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        nullable=False,
    )
    # Soft reference, students are owned by the identity service
    student_id: Mapped[int] = mapped_column(Integer, nullable=False)
    course_enrollment_type: Mapped[CourseEnrollmentType] = mapped_column(
        course_enrollment_type_enum, nullable=False, default=CourseEnrollmentType.PAID_COURSE
    )
    enrollment_status: Mapped[EnrollmentStatus] = mapped_column(
        enrollment_status_enum, nullable=False, default=EnrollmentStatus.ACTIVE
    )
    enrolled_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        Index("ix_enrollments_student_course", "student_id", "course_id"),
        Index("ix_enrollments_course_id", "course_id"),
    )
