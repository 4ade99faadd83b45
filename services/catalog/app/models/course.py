from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base, TenantScopedMixin

from .enums import CourseStatus, CourseType, course_status_enum, course_type_enum


class Course(TenantScopedMixin, Base):
    __tablename__ = "courses"

    course_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    course_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    main_thumbnail_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    course_status: Mapped[CourseStatus] = mapped_column(
        course_status_enum, nullable=False, default=CourseStatus.DRAFT
    )
    course_type: Mapped[CourseType] = mapped_column(
        course_type_enum, nullable=False, default=CourseType.PAID
    )
    # NULL and 0 both mean the course costs nothing
    course_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    course_total_hours: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)

    __table_args__ = (
        Index("ix_courses_tenant_status", "tenant_id", "course_status"),
        Index("ix_courses_created_at", "created_at"),
        Index("ix_courses_tenant_name", "tenant_id", "course_name"),
        CheckConstraint(
            "course_price IS NULL OR course_price >= 0", name="ck_courses_price_non_negative"
        ),
    )
