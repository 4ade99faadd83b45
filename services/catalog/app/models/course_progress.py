from datetime import datetime, timezone

from sqlalchemy import TIMESTAMP, Boolean, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base, TenantScopedMixin


class StudentCourseProgress(TenantScopedMixin, Base):
    """Roll-up of one student's progress through a whole course.

    Maintained by the progress pipeline alongside ``video_progresses``.
    """

    __tablename__ = "student_course_progresses"

    student_course_progress_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    student_id: Mapped[int] = mapped_column(Integer, nullable=False)
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        nullable=False,
    )
    overall_progress_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    videos_completed: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_course_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_accessed_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        UniqueConstraint(
            "student_id", "course_id", name="uq_student_course_progresses_student_course"
        ),
    )
