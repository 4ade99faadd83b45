from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base, TenantScopedMixin


class CourseTopic(TenantScopedMixin, Base):
    __tablename__ = "course_topics"

    course_topic_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    module_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("course_modules.course_module_id", ondelete="CASCADE"),
        nullable=False,
    )
    course_topic_name: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_course_topics_module_id_position", "module_id", "position"),
    )
