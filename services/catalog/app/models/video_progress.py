from datetime import datetime, timezone

from sqlalchemy import TIMESTAMP, Boolean, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base, TenantScopedMixin


class VideoProgress(TenantScopedMixin, Base):
    """Playback progress of one student on one video.

    Written by the playback telemetry pipeline; the catalog only reads it.
    """

    __tablename__ = "video_progresses"

    video_progress_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[int] = mapped_column(Integer, nullable=False)
    course_video_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("course_videos.course_video_id", ondelete="CASCADE"),
        nullable=False,
    )
    watch_duration_seconds: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # 0–100
    completion_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    last_watched_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        UniqueConstraint(
            "student_id", "course_video_id", name="uq_video_progresses_student_video"
        ),
        Index("ix_video_progresses_course_video_id", "course_video_id"),
    )
