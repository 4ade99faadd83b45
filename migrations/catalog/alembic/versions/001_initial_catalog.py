"""Initial catalog tables

Revision ID: 001_initial_catalog
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001_initial_catalog"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _scoped_columns() -> list[sa.Column]:
    """Tenant and soft-delete columns shared by every catalog table."""
    return [
        sa.Column("tenant_id", sa.Integer, nullable=False, index=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("is_deleted", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
    ]


def upgrade() -> None:
    course_status = sa.Enum("DRAFT", "PUBLIC", "ARCHIVED", "SUSPENDED", name="course_status")
    course_type = sa.Enum("FREE", "PAID", name="course_type")
    course_enrollment_type = sa.Enum(
        "PAID_COURSE", "FREE_COURSE", "COURSE_SESSION", name="course_enrollment_type",
    )
    enrollment_status = sa.Enum(
        "PENDING", "ACTIVE", "COMPLETED", "DROPPED", "SUSPENDED", name="enrollment_status",
    )

    op.create_table(
        "courses",
        sa.Column("course_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("course_name", sa.String(255), nullable=False),
        sa.Column("course_description", sa.Text, nullable=True),
        sa.Column("main_thumbnail_url", sa.Text, nullable=True),
        sa.Column("course_status", course_status, nullable=False, server_default="DRAFT"),
        sa.Column("course_type", course_type, nullable=False, server_default="PAID"),
        sa.Column("course_price", sa.Numeric(10, 2), nullable=True),
        sa.Column("course_total_hours", sa.Numeric(6, 2), nullable=True),
        *_scoped_columns(),
        sa.CheckConstraint("course_price IS NULL OR course_price >= 0", name="ck_courses_price_non_negative"),
    )
    op.create_index("ix_courses_tenant_status", "courses", ["tenant_id", "course_status"])
    op.create_index("ix_courses_created_at", "courses", ["created_at"])
    op.create_index("ix_courses_tenant_name", "courses", ["tenant_id", "course_name"])

    op.create_table(
        "programs",
        sa.Column("program_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("program_name", sa.String(255), nullable=False),
        sa.Column("program_thumbnail_url", sa.Text, nullable=True),
        *_scoped_columns(),
    )
    op.create_table(
        "specializations",
        sa.Column("specialization_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("specialization_name", sa.String(255), nullable=False),
        sa.Column("specialization_thumbnail_url", sa.Text, nullable=True),
        *_scoped_columns(),
    )
    op.create_table(
        "specialization_programs",
        sa.Column("specialization_program_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "specialization_id",
            sa.Integer,
            sa.ForeignKey("specializations.specialization_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "program_id",
            sa.Integer,
            sa.ForeignKey("programs.program_id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_scoped_columns(),
    )
    op.create_index(
        "ix_specialization_programs_specialization_id", "specialization_programs", ["specialization_id"],
    )
    op.create_index("ix_specialization_programs_program_id", "specialization_programs", ["program_id"])

    op.create_table(
        "course_specializations",
        sa.Column("course_specialization_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "specialization_id",
            sa.Integer,
            sa.ForeignKey("specializations.specialization_id", ondelete="CASCADE"),
            nullable=False,
        ),
        *_scoped_columns(),
    )
    op.create_index("ix_course_specializations_course_id", "course_specializations", ["course_id"])
    op.create_index(
        "ix_course_specializations_specialization_id", "course_specializations", ["specialization_id"],
    )

    op.create_table(
        "course_modules",
        sa.Column("course_module_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("course_module_name", sa.String(255), nullable=False),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        *_scoped_columns(),
    )
    op.create_index("ix_course_modules_course_id_position", "course_modules", ["course_id", "position"])

    op.create_table(
        "course_topics",
        sa.Column("course_topic_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "module_id",
            sa.Integer,
            sa.ForeignKey("course_modules.course_module_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("course_topic_name", sa.String(255), nullable=False),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        *_scoped_columns(),
    )
    op.create_index("ix_course_topics_module_id_position", "course_topics", ["module_id", "position"])

    op.create_table(
        "course_videos",
        sa.Column("course_video_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "course_topic_id",
            sa.Integer,
            sa.ForeignKey("course_topics.course_topic_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("video_name", sa.String(255), nullable=False),
        sa.Column("video_url", sa.Text, nullable=False, server_default=""),
        sa.Column("thumbnail_url", sa.Text, nullable=True),
        sa.Column("bunny_video_id", sa.String(255), nullable=True),
        sa.Column("duration_seconds", sa.Integer, nullable=True),
        sa.Column("position", sa.Integer, nullable=False, server_default="0"),
        *_scoped_columns(),
    )
    op.create_index("ix_course_videos_topic_id_position", "course_videos", ["course_topic_id", "position"])
    op.create_index("ix_course_videos_course_id", "course_videos", ["course_id"])

    op.create_table(
        "enrollments",
        sa.Column("enrollment_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "course_id",
            sa.Integer,
            sa.ForeignKey("courses.course_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("student_id", sa.Integer, nullable=False),
        sa.Column(
            "course_enrollment_type", course_enrollment_type, nullable=False, server_default="PAID_COURSE",
        ),
        sa.Column("enrollment_status", enrollment_status, nullable=False, server_default="ACTIVE"),
        sa.Column("enrolled_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        *_scoped_columns(),
    )
    op.create_index("ix_enrollments_student_course", "enrollments", ["student_id", "course_id"])
    op.create_index("ix_enrollments_course_id", "enrollments", ["course_id"])

    op.create_table(
        "video_progresses",
        sa.Column("video_progress_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("student_id", sa.Integer, nullable=False),
        sa.Column(
            "course_video_id",
            sa.Integer,
            sa.ForeignKey("course_videos.course_video_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("watch_duration_seconds", sa.Integer, nullable=False, server_default="0"),
        sa.Column("completion_percentage", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_completed", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("last_watched_at", sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        *_scoped_columns(),
        sa.UniqueConstraint("student_id", "course_video_id", name="uq_video_progresses_student_video"),
    )
    op.create_index("ix_video_progresses_course_video_id", "video_progresses", ["course_video_id"])


def downgrade() -> None:
    op.drop_index("ix_video_progresses_course_video_id", table_name="video_progresses")
    op.drop_table("video_progresses")
    op.drop_index("ix_enrollments_course_id", table_name="enrollments")
    op.drop_index("ix_enrollments_student_course", table_name="enrollments")
    op.drop_table("enrollments")
    op.drop_index("ix_course_videos_course_id", table_name="course_videos")
    op.drop_index("ix_course_videos_topic_id_position", table_name="course_videos")
    op.drop_table("course_videos")
    op.drop_index("ix_course_topics_module_id_position", table_name="course_topics")
    op.drop_table("course_topics")
    op.drop_index("ix_course_modules_course_id_position", table_name="course_modules")
    op.drop_table("course_modules")
    op.drop_index("ix_course_specializations_specialization_id", table_name="course_specializations")
    op.drop_index("ix_course_specializations_course_id", table_name="course_specializations")
    op.drop_table("course_specializations")
    op.drop_index("ix_specialization_programs_program_id", table_name="specialization_programs")
    op.drop_index("ix_specialization_programs_specialization_id", table_name="specialization_programs")
    op.drop_table("specialization_programs")
    op.drop_table("specializations")
    op.drop_table("programs")
    op.drop_index("ix_courses_tenant_name", table_name="courses")
    op.drop_index("ix_courses_created_at", table_name="courses")
    op.drop_index("ix_courses_tenant_status", table_name="courses")
    op.drop_table("courses")

    for name in ("enrollment_status", "course_enrollment_type", "course_type", "course_status"):
        sa.Enum(name=name).drop(op.get_bind(), checkfirst=True)
