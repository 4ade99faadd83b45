"""Next / previous video inside one topic."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.course_video import CourseVideo
from app.scope import VisibilityScope


async def next_video(
    db: AsyncSession, scope: VisibilityScope, video: CourseVideo,
) -> CourseVideo | None:
    """Nearest sibling with a strictly greater position, or None for the last video."""
    result = await db.execute(
        select(CourseVideo)
        .where(
            CourseVideo.course_topic_id == video.course_topic_id,
            CourseVideo.position > video.position,
            scope.visible(CourseVideo),
        )
        .order_by(CourseVideo.position.asc(), CourseVideo.course_video_id.asc())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def previous_video(
    db: AsyncSession, scope: VisibilityScope, video: CourseVideo,
) -> CourseVideo | None:
    """Nearest sibling with a strictly smaller position, or None for the first video.

    Same pick as the unlock predecessor.
    """
    result = await db.execute(
        select(CourseVideo)
        .where(
            CourseVideo.course_topic_id == video.course_topic_id,
            CourseVideo.position < video.position,
            scope.visible(CourseVideo),
        )
        .order_by(CourseVideo.position.desc(), CourseVideo.course_video_id.asc())
        .limit(1)
    )
    return result.scalar_one_or_none()
