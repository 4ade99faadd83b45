"""Course → module → topic → video lookups and batched child counts.

A row is only reachable when it and every ancestor above it is visible in
the viewer's scope; anything else raises the matching not-found error. Child
counts come from one ``GROUP BY`` query per level, never one query per parent.
"""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    CourseNotFoundError,
    ModuleNotFoundError,
    TopicNotFoundError,
    VideoNotFoundError,
)
from app.models.course import Course
from app.models.course_module import CourseModule
from app.models.course_progress import StudentCourseProgress
from app.models.course_session import CourseSession
from app.models.course_topic import CourseTopic
from app.models.course_video import CourseVideo
from app.models.program import (
    CourseSpecialization,
    Program,
    Specialization,
    SpecializationProgram,
)
from app.models.teacher import Teacher, TeacherCourse
from app.models.video_progress import VideoProgress
from app.scope import VisibilityScope


# ---------------------------------------------------------------------------
# Scoped lookups
# ---------------------------------------------------------------------------


async def load_course(db: AsyncSession, scope: VisibilityScope, course_id: int) -> Course:
    course = await db.scalar(
        select(Course).where(Course.course_id == course_id, scope.visible(Course))
    )
    if course is None:
        raise CourseNotFoundError(course_id)
    return course


async def load_module(db: AsyncSession, scope: VisibilityScope, module_id: int) -> CourseModule:
    module = await db.scalar(
        select(CourseModule)
        .join(Course, Course.course_id == CourseModule.course_id)
        .where(
            CourseModule.course_module_id == module_id,
            scope.visible(CourseModule),
            scope.visible(Course),
        )
    )
    if module is None:
        raise ModuleNotFoundError(module_id)
    return module


async def load_topic(db: AsyncSession, scope: VisibilityScope, topic_id: int) -> CourseTopic:
    topic = await db.scalar(
        select(CourseTopic)
        .join(CourseModule, CourseModule.course_module_id == CourseTopic.module_id)
        .join(Course, Course.course_id == CourseModule.course_id)
        .where(
            CourseTopic.course_topic_id == topic_id,
            scope.visible(CourseTopic),
            scope.visible(CourseModule),
            scope.visible(Course),
        )
    )
    if topic is None:
        raise TopicNotFoundError(topic_id)
    return topic


async def load_video(db: AsyncSession, scope: VisibilityScope, video_id: int) -> CourseVideo:
    video = await db.scalar(
        select(CourseVideo)
        .join(CourseTopic, CourseTopic.course_topic_id == CourseVideo.course_topic_id)
        .join(CourseModule, CourseModule.course_module_id == CourseTopic.module_id)
        .join(Course, Course.course_id == CourseModule.course_id)
        .where(
            CourseVideo.course_video_id == video_id,
            scope.visible(CourseVideo),
            scope.visible(CourseTopic),
            scope.visible(CourseModule),
            scope.visible(Course),
        )
    )
    if video is None:
        raise VideoNotFoundError(video_id)
    return video


# ---------------------------------------------------------------------------
# Children, ordered by position
# ---------------------------------------------------------------------------


async def list_modules(db: AsyncSession, scope: VisibilityScope, course_id: int) -> list[CourseModule]:
    result = await db.execute(
        select(CourseModule)
        .where(CourseModule.course_id == course_id, scope.visible(CourseModule))
        .order_by(CourseModule.position.asc(), CourseModule.course_module_id.asc())
    )
    return list(result.scalars().all())


async def list_topics(db: AsyncSession, scope: VisibilityScope, module_id: int) -> list[CourseTopic]:
    result = await db.execute(
        select(CourseTopic)
        .where(CourseTopic.module_id == module_id, scope.visible(CourseTopic))
        .order_by(CourseTopic.position.asc(), CourseTopic.course_topic_id.asc())
    )
    return list(result.scalars().all())


async def list_videos(db: AsyncSession, scope: VisibilityScope, topic_id: int) -> list[CourseVideo]:
    result = await db.execute(
        select(CourseVideo)
        .where(CourseVideo.course_topic_id == topic_id, scope.visible(CourseVideo))
        .order_by(CourseVideo.position.asc(), CourseVideo.course_video_id.asc())
    )
    return list(result.scalars().all())


# ---------------------------------------------------------------------------
# Batched aggregates
# ---------------------------------------------------------------------------


async def count_topics_by_module(
    db: AsyncSession, scope: VisibilityScope, module_ids: Iterable[int],
) -> dict[int, int]:
    ids = sorted(set(module_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(CourseTopic.module_id, func.count(CourseTopic.course_topic_id))
        .where(CourseTopic.module_id.in_(ids), scope.visible(CourseTopic))
        .group_by(CourseTopic.module_id)
    )
    return {module_id: count for module_id, count in result.all()}


async def count_videos_by_module(
    db: AsyncSession, scope: VisibilityScope, module_ids: Iterable[int],
) -> dict[int, int]:
    """Videos reachable through visible topics, per module."""
    ids = sorted(set(module_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(CourseTopic.module_id, func.count(CourseVideo.course_video_id))
        .select_from(CourseVideo)
        .join(CourseTopic, CourseTopic.course_topic_id == CourseVideo.course_topic_id)
        .where(
            CourseTopic.module_id.in_(ids),
            scope.visible(CourseTopic),
            scope.visible(CourseVideo),
        )
        .group_by(CourseTopic.module_id)
    )
    return {module_id: count for module_id, count in result.all()}


async def count_videos_by_topic(
    db: AsyncSession, scope: VisibilityScope, topic_ids: Iterable[int],
) -> dict[int, int]:
    ids = sorted(set(topic_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(CourseVideo.course_topic_id, func.count(CourseVideo.course_video_id))
        .where(CourseVideo.course_topic_id.in_(ids), scope.visible(CourseVideo))
        .group_by(CourseVideo.course_topic_id)
    )
    return {topic_id: count for topic_id, count in result.all()}


# ---------------------------------------------------------------------------
# Related rows for a page of courses
# ---------------------------------------------------------------------------


async def programs_by_course(
    db: AsyncSession, scope: VisibilityScope, course_ids: Iterable[int],
) -> dict[int, Program]:
    """First (lowest id) visible program each course sits under."""
    ids = sorted(set(course_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(CourseSpecialization.course_id, Program)
        .select_from(CourseSpecialization)
        .join(
            Specialization,
            Specialization.specialization_id == CourseSpecialization.specialization_id,
        )
        .join(
            SpecializationProgram,
            SpecializationProgram.specialization_id == Specialization.specialization_id,
        )
        .join(Program, Program.program_id == SpecializationProgram.program_id)
        .where(
            CourseSpecialization.course_id.in_(ids),
            scope.visible(CourseSpecialization),
            scope.visible(Specialization),
            scope.visible(SpecializationProgram),
            scope.visible(Program),
        )
        .order_by(CourseSpecialization.course_id, Program.program_id)
    )
    programs: dict[int, Program] = {}
    for course_id, program in result.all():
        programs.setdefault(course_id, program)
    return programs


async def specializations_by_course(
    db: AsyncSession, scope: VisibilityScope, course_ids: Iterable[int],
) -> dict[int, Specialization]:
    """First (lowest id) visible specialization each course is placed in."""
    ids = sorted(set(course_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(CourseSpecialization.course_id, Specialization)
        .select_from(CourseSpecialization)
        .join(
            Specialization,
            Specialization.specialization_id == CourseSpecialization.specialization_id,
        )
        .where(
            CourseSpecialization.course_id.in_(ids),
            scope.visible(CourseSpecialization),
            scope.visible(Specialization),
        )
        .order_by(CourseSpecialization.course_id, Specialization.specialization_id)
    )
    specializations: dict[int, Specialization] = {}
    for course_id, specialization in result.all():
        specializations.setdefault(course_id, specialization)
    return specializations


async def teachers_by_course(
    db: AsyncSession, scope: VisibilityScope, course_ids: Iterable[int],
) -> dict[int, Teacher]:
    """The earliest-assigned visible teacher of each course."""
    ids = sorted(set(course_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(TeacherCourse.course_id, Teacher)
        .select_from(TeacherCourse)
        .join(Teacher, Teacher.teacher_id == TeacherCourse.teacher_id)
        .where(
            TeacherCourse.course_id.in_(ids),
            scope.visible(TeacherCourse),
            scope.visible(Teacher),
        )
        .order_by(TeacherCourse.course_id, TeacherCourse.teacher_course_id)
    )
    teachers: dict[int, Teacher] = {}
    for course_id, teacher in result.all():
        teachers.setdefault(course_id, teacher)
    return teachers


async def sessions_by_course(
    db: AsyncSession, scope: VisibilityScope, course_ids: Iterable[int],
) -> dict[int, CourseSession]:
    """The earliest-starting visible session of each course."""
    ids = sorted(set(course_ids))
    if not ids:
        return {}
    result = await db.execute(
        select(CourseSession)
        .where(CourseSession.course_id.in_(ids), scope.visible(CourseSession))
        .order_by(
            CourseSession.course_id,
            CourseSession.start_date.asc(),
            CourseSession.course_session_id.asc(),
        )
    )
    sessions: dict[int, CourseSession] = {}
    for session in result.scalars().all():
        sessions.setdefault(session.course_id, session)
    return sessions


async def load_course_progress(
    db: AsyncSession,
    scope: VisibilityScope,
    student_id: int | None,
    course_id: int,
) -> StudentCourseProgress | None:
    if student_id is None:
        return None
    return await db.scalar(
        select(StudentCourseProgress).where(
            StudentCourseProgress.student_id == student_id,
            StudentCourseProgress.course_id == course_id,
            scope.visible(StudentCourseProgress),
        )
    )


async def load_progress(
    db: AsyncSession,
    scope: VisibilityScope,
    student_id: int | None,
    video_ids: Iterable[int],
) -> dict[int, VideoProgress]:
    """The student's live progress rows for ``video_ids``, keyed by video id."""
    ids = sorted(set(video_ids))
    if student_id is None or not ids:
        return {}
    result = await db.execute(
        select(VideoProgress).where(
            VideoProgress.student_id == student_id,
            VideoProgress.course_video_id.in_(ids),
            scope.visible(VideoProgress),
        )
    )
    return {row.course_video_id: row for row in result.scalars().all()}
