from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base, TenantScopedMixin


class CourseModule(TenantScopedMixin, Base):
    __tablename__ = "course_modules"

    course_module_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        nullable=False,
    )
    course_module_name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Sibling ordering key within the course; not necessarily contiguous
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_course_modules_course_id_position", "course_id", "position"),
    )
