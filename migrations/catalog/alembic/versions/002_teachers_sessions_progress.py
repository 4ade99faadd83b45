"""Teachers, course sessions and course progress

Revision ID: 002_teachers_sessions_progress
Revises: 001_initial_catalog
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "002_teachers_sessions_progress"
down_revision: Union[str, None] = "001_initial_catalog"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _scoped_columns() -> list[sa.Column]:
    return [
        sa.Column("tenant_id", sa.Integer, nullable=False, index=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    course_session_status = sa.Enum("DRAFT", "PUBLISHED", "EXPIRED", name="course_session_status")

    op.create_table(
        "teachers",
        sa.Column("teacher_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("teacher_qualification", sa.Text, nullable=True),
        sa.Column("profile_picture_url", sa.String(500), nullable=True),
        *_scoped_columns(),
    )

    op.create_table(
        "teacher_courses",
        sa.Column("teacher_course_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "teacher_id",
            sa.Integer,
            sa.ForeignKey("teachers.teacher_id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_scoped_columns(),
    )
    op.create_index("ix_teacher_courses_course_id", "teacher_courses", ["course_id"])
    op.create_index("ix_teacher_courses_teacher_id", "teacher_courses", ["teacher_id"])

    op.create_table(
        "course_sessions",
        sa.Column("course_session_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "teacher_id",
            sa.Integer,
            sa.ForeignKey("teachers.teacher_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("course_session_status", course_session_status, nullable=False, server_default="DRAFT"),
        sa.Column("session_name", sa.String(255), nullable=False),
        sa.Column("session_description", sa.Text, nullable=True),
        sa.Column("start_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("end_date", sa.TIMESTAMP(timezone=True), nullable=False),
        *_scoped_columns(),
    )
    op.create_index(
        "ix_course_sessions_course_id_start_date", "course_sessions", ["course_id", "start_date"],
    )

    op.create_table(
        "student_course_progresses",
        sa.Column("student_course_progress_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("student_id", sa.Integer, nullable=False),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("overall_progress_percentage", sa.Integer, nullable=False, server_default="0"),
        sa.Column("videos_completed", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_course_completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("last_accessed_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        *_scoped_columns(),
        sa.UniqueConstraint("student_id", "course_id", name="uq_student_course_progresses_student_course"),
    )


def downgrade() -> None:
    op.drop_table("student_course_progresses")
    op.drop_index("ix_course_sessions_course_id_start_date", table_name="course_sessions")
    op.drop_table("course_sessions")
    op.drop_index("ix_teacher_courses_teacher_id", table_name="teacher_courses")
    op.drop_index("ix_teacher_courses_course_id", table_name="teacher_courses")
    op.drop_table("teacher_courses")
    op.drop_table("teachers")
    sa.Enum(name="course_session_status").drop(op.get_bind(), checkfirst=True)
