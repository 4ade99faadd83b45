from datetime import datetime

from sqlalchemy import TIMESTAMP, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base, TenantScopedMixin

from .enums import CourseSessionStatus, course_session_status_enum


class CourseSession(TenantScopedMixin, Base):
    """A scheduled, teacher-led run of a course."""

    __tablename__ = "course_sessions"

    course_session_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        nullable=False,
    )
    teacher_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("teachers.teacher_id", ondelete="CASCADE"),
        nullable=False,
    )
    course_session_status: Mapped[CourseSessionStatus] = mapped_column(
        course_session_status_enum, nullable=False, default=CourseSessionStatus.DRAFT
    )
    session_name: Mapped[str] = mapped_column(String(255), nullable=False)
    session_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)
    end_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_course_sessions_course_id_start_date", "course_id", "start_date"),
    )
