from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base, TenantScopedMixin


class Teacher(TenantScopedMixin, Base):
    """Public profile of an instructor as shown on course cards.

    Accounts and credentials live in the identity service.
    """

    __tablename__ = "teachers"

    teacher_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    teacher_qualification: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_picture_url: Mapped[str | None] = mapped_column(String(500), nullable=True)


class TeacherCourse(TenantScopedMixin, Base):
    """Assigns a teacher to a course."""

    __tablename__ = "teacher_courses"

    teacher_course_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
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

    __table_args__ = (
        Index("ix_teacher_courses_course_id", "course_id"),
        Index("ix_teacher_courses_teacher_id", "teacher_id"),
    )
