from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base, TenantScopedMixin


class CourseVideo(TenantScopedMixin, Base):
    __tablename__ = "course_videos"

    course_video_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Denormalized so video pages resolve their course without walking the tree
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.course_id", ondelete="CASCADE"),
        nullable=False,
    )
    course_topic_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("course_topics.course_topic_id", ondelete="CASCADE"),
        nullable=False,
    )
    video_name: Mapped[str] = mapped_column(String(255), nullable=False)
    video_url: Mapped[str] = mapped_column(Text, nullable=False, default="")
    thumbnail_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Provider-side asset id (Bunny Stream); playback tokens are issued elsewhere
    bunny_video_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    duration_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_course_videos_topic_id_position", "course_topic_id", "position"),
        Index("ix_course_videos_course_id", "course_id"),
    )
