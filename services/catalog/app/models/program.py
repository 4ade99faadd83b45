from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base, TenantScopedMixin


class Program(TenantScopedMixin, Base):
    __tablename__ = "programs"

    program_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    program_name: Mapped[str] = mapped_column(String(255), nullable=False)
    program_thumbnail_url: Mapped[str | None] = mapped_column(Text, nullable=True)


class Specialization(TenantScopedMixin, Base):
    __tablename__ = "specializations"

    specialization_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    specialization_name: Mapped[str] = mapped_column(String(255), nullable=False)
    specialization_thumbnail_url: Mapped[str | None] = mapped_column(Text, nullable=True)


class SpecializationProgram(TenantScopedMixin, Base):
    """Places a specialization under a program."""

    __tablename__ = "specialization_programs"

    specialization_program_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    specialization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("specializations.specialization_id", ondelete="CASCADE"),
        nullable=False,
    )
    program_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("programs.program_id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_specialization_programs_specialization_id", "specialization_id"),
        Index("ix_specialization_programs_program_id", "program_id"),
    )


class CourseSpecialization(TenantScopedMixin, Base):
    """Places a course under a specialization."""

    __tablename__ = "course_specializations"

    course_specialization_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        nullable=False,
    )
    specialization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("specializations.specialization_id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_course_specializations_course_id", "course_id"),
        Index("ix_course_specializations_specialization_id", "specialization_id"),
    )
