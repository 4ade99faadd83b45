"""Catalog service: pure business logic, no FastAPI imports.

Answers the catalog read operations for a viewer: course listing with
purchase status, module and topic statistics, per-video lock/completion
state, course and video detail with navigation. Also creates courses.

Every function scopes by tenant and soft-delete before applying any other
rule. Nothing is cached between calls.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.catalog import hierarchy, navigation
from app.catalog.filters import build_filters, build_ordering, compose_predicate
from app.catalog.formatting import (
    format_decimal_hours,
    format_month_year,
    lecture_title,
    module_stats,
    topic_stats,
)
from app.catalog.purchase import classify_purchase, find_enrolled_course_ids
from app.catalog.schemas import (
    CatalogQuery,
    CourseCatalogItem,
    CourseDetail,
    CreateCourseRequest,
    ModuleSummary,
    TopicSummary,
    VideoDetail,
    VideoState,
)
from app.catalog.unlock import LockState, classify_completion, project_topic, resolve_lock
from app.exceptions import (
    CourseNameConflictError,
    CrossTenantAccessError,
    InsufficientRoleError,
)
from app.models.course import Course
from app.pagination import OffsetPage
from app.scope import resolve_scope
from shared.constants import Role
from shared.models.user import Viewer

logger = logging.getLogger(__name__)

COURSE_CREATOR_ROLES = frozenset({Role.TENANT_ADMIN, Role.SUPER_ADMIN})


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


async def list_courses(
    db: AsyncSession,
    viewer: Viewer,
    query: CatalogQuery,
) -> OffsetPage[CourseCatalogItem]:
    logger.debug(
        "Listing courses tenant=%s student=%s params=%s",
        viewer.tenant_id, viewer.student_id, query.model_dump(exclude_unset=True),
    )
    scope = resolve_scope(viewer)
    # Reject a bad sort before touching the database
    ordering = build_ordering(query.sort_by, query.sort_order)
    predicate = compose_predicate(
        build_filters(query, viewer), scope.visible(Course), scope=scope,
    )

    total = await db.scalar(select(func.count()).select_from(Course).where(predicate)) or 0
    result = await db.execute(
        select(Course)
        .where(predicate)
        .order_by(*ordering)
        .offset(query.offset)
        .limit(query.limit)
    )
    courses = list(result.scalars().all())
    course_ids = [c.course_id for c in courses]

    enrolled = await find_enrolled_course_ids(db, scope, viewer.student_id, course_ids)
    programs = await hierarchy.programs_by_course(db, scope, course_ids)
    teachers = await hierarchy.teachers_by_course(db, scope, course_ids)
    sessions = await hierarchy.sessions_by_course(db, scope, course_ids)

    items = []
    for course in courses:
        purchase = classify_purchase(course.course_price, course.course_id in enrolled)
        program = programs.get(course.course_id)
        teacher = teachers.get(course.course_id)
        session = sessions.get(course.course_id)
        items.append(
            CourseCatalogItem(
                course_id=course.course_id,
                course_name=course.course_name,
                course_description=course.course_description,
                main_thumbnail_url=course.main_thumbnail_url,
                course_status=course.course_status,
                course_type=course.course_type,
                course_price=course.course_price,
                course_total_hours=course.course_total_hours,
                total_hours_display=format_decimal_hours(course.course_total_hours),
                program_id=program.program_id if program else None,
                program_name=program.program_name if program else None,
                teacher_name=teacher.full_name if teacher else None,
                teacher_qualification=teacher.teacher_qualification if teacher else None,
                profile_picture_url=teacher.profile_picture_url if teacher else None,
                start_date=format_month_year(session.start_date) if session else None,
                end_date=format_month_year(session.end_date) if session else None,
                purchase_status=purchase.label,
                is_free=purchase.is_free,
                is_purchased=purchase.is_purchased,
                created_at=course.created_at,
                updated_at=course.updated_at,
            )
        )
    return OffsetPage[CourseCatalogItem](
        items=items, total=total, limit=query.limit, offset=query.offset,
    )


async def get_course_detail(
    db: AsyncSession,
    viewer: Viewer,
    course_id: int,
) -> CourseDetail:
    logger.debug(
        "Getting course detail course_id=%s student=%s tenant=%s",
        course_id, viewer.student_id, viewer.tenant_id,
    )
    scope = resolve_scope(viewer)
    course = await hierarchy.load_course(db, scope, course_id)

    ids = [course.course_id]
    enrolled = await find_enrolled_course_ids(db, scope, viewer.student_id, ids)
    program = (await hierarchy.programs_by_course(db, scope, ids)).get(course.course_id)
    specialization = (await hierarchy.specializations_by_course(db, scope, ids)).get(course.course_id)
    teacher = (await hierarchy.teachers_by_course(db, scope, ids)).get(course.course_id)
    session = (await hierarchy.sessions_by_course(db, scope, ids)).get(course.course_id)
    progress = await hierarchy.load_course_progress(db, scope, viewer.student_id, course.course_id)

    purchase = classify_purchase(course.course_price, course.course_id in enrolled)
    return CourseDetail(
        course_id=course.course_id,
        course_name=course.course_name,
        course_description=course.course_description,
        main_thumbnail_url=course.main_thumbnail_url,
        course_type=course.course_type,
        course_price=course.course_price,
        total_hours_display=format_decimal_hours(course.course_total_hours),
        program_id=program.program_id if program else None,
        program_name=program.program_name if program else None,
        specialization_name=specialization.specialization_name if specialization else None,
        teacher_name=teacher.full_name if teacher else None,
        teacher_qualification=teacher.teacher_qualification if teacher else None,
        profile_picture_url=teacher.profile_picture_url if teacher else None,
        start_date=format_month_year(session.start_date) if session else None,
        end_date=format_month_year(session.end_date) if session else None,
        overall_progress_percentage=progress.overall_progress_percentage if progress else None,
        purchase_status=purchase.label,
        is_free=purchase.is_free,
        is_purchased=purchase.is_purchased,
    )


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------


async def get_course_modules(
    db: AsyncSession,
    viewer: Viewer,
    course_id: int,
) -> list[ModuleSummary]:
    logger.debug("Getting modules course_id=%s tenant=%s", course_id, viewer.tenant_id)
    scope = resolve_scope(viewer)
    await hierarchy.load_course(db, scope, course_id)
    modules = await hierarchy.list_modules(db, scope, course_id)
    module_ids = [m.course_module_id for m in modules]

    topic_counts = await hierarchy.count_topics_by_module(db, scope, module_ids)
    video_counts = await hierarchy.count_videos_by_module(db, scope, module_ids)

    summaries = []
    for module in modules:
        topics = topic_counts.get(module.course_module_id, 0)
        videos = video_counts.get(module.course_module_id, 0)
        summaries.append(
            ModuleSummary(
                course_module_id=module.course_module_id,
                course_id=module.course_id,
                course_module_name=module.course_module_name,
                position=module.position,
                topic_count=topics,
                video_count=videos,
                module_stats=module_stats(topics, videos),
            )
        )
    return summaries


async def get_topics(
    db: AsyncSession,
    viewer: Viewer,
    module_id: int,
) -> list[TopicSummary]:
    logger.debug("Getting topics module_id=%s tenant=%s", module_id, viewer.tenant_id)
    scope = resolve_scope(viewer)
    await hierarchy.load_module(db, scope, module_id)
    topics = await hierarchy.list_topics(db, scope, module_id)
    video_counts = await hierarchy.count_videos_by_topic(
        db, scope, [t.course_topic_id for t in topics],
    )

    return [
        TopicSummary(
            course_topic_id=topic.course_topic_id,
            module_id=topic.module_id,
            course_topic_name=topic.course_topic_name,
            position=topic.position,
            video_count=video_counts.get(topic.course_topic_id, 0),
            overall_video_lectures=topic_stats(video_counts.get(topic.course_topic_id, 0)),
        )
        for topic in topics
    ]


# ---------------------------------------------------------------------------
# Videos
# ---------------------------------------------------------------------------


async def get_videos(
    db: AsyncSession,
    viewer: Viewer,
    topic_id: int,
) -> list[VideoState]:
    logger.debug(
        "Getting videos topic_id=%s student=%s tenant=%s",
        topic_id, viewer.student_id, viewer.tenant_id,
    )
    scope = resolve_scope(viewer)
    await hierarchy.load_topic(db, scope, topic_id)
    videos = await hierarchy.list_videos(db, scope, topic_id)
    progress = await hierarchy.load_progress(
        db, scope, viewer.student_id, [v.course_video_id for v in videos],
    )
    projections = project_topic(videos, progress, viewer.student_id)

    states = []
    for video in videos:
        row = progress.get(video.course_video_id)
        projection = projections[video.course_video_id]
        states.append(
            VideoState(
                course_video_id=video.course_video_id,
                course_topic_id=video.course_topic_id,
                position=video.position,
                video_name=video.video_name,
                duration_seconds=video.duration_seconds or 0,
                is_completed=row.is_completed if row else None,
                completion_percentage=row.completion_percentage if row else None,
                last_watched_at=row.last_watched_at if row else None,
                completion_state=projection.completion_state,
                lock_state=projection.lock_state,
                is_video_locked=projection.is_locked,
            )
        )
    return states


async def get_video_detail(
    db: AsyncSession,
    viewer: Viewer,
    video_id: int,
) -> VideoDetail:
    logger.debug(
        "Getting video detail video_id=%s student=%s tenant=%s",
        video_id, viewer.student_id, viewer.tenant_id,
    )
    scope = resolve_scope(viewer)
    video = await hierarchy.load_video(db, scope, video_id)
    next_ = await navigation.next_video(db, scope, video)
    previous = await navigation.previous_video(db, scope, video)
    teacher = (await hierarchy.teachers_by_course(db, scope, [video.course_id])).get(video.course_id)

    ids = [video.course_video_id] + ([previous.course_video_id] if previous else [])
    progress = await hierarchy.load_progress(db, scope, viewer.student_id, ids)
    # No earlier sibling means this video sits at the lowest position
    lock_state = resolve_lock(
        is_first=previous is None,
        student_id=viewer.student_id,
        predecessor_progress=progress.get(previous.course_video_id) if previous else None,
    )

    return VideoDetail(
        course_video_id=video.course_video_id,
        course_id=video.course_id,
        course_topic_id=video.course_topic_id,
        position=video.position,
        video_name=video.video_name,
        lecture_title=lecture_title(video.position, video.video_name),
        video_url=video.video_url or "",
        thumbnail_url=video.thumbnail_url,
        bunny_video_id=video.bunny_video_id,
        duration_seconds=video.duration_seconds or 0,
        teacher_name=teacher.full_name if teacher else None,
        teacher_qualification=teacher.teacher_qualification if teacher else None,
        profile_picture_url=teacher.profile_picture_url if teacher else None,
        completion_state=classify_completion(progress.get(video.course_video_id)),
        lock_state=lock_state,
        is_video_locked=lock_state is LockState.LOCKED,
        next_course_video_id=next_.course_video_id if next_ else None,
        next_video_name=next_.video_name if next_ else None,
        next_video_duration=next_.duration_seconds if next_ else None,
        previous_course_video_id=previous.course_video_id if previous else None,
        previous_video_name=previous.video_name if previous else None,
        previous_video_duration=previous.duration_seconds if previous else None,
    )


# ---------------------------------------------------------------------------
# Course creation
# ---------------------------------------------------------------------------


async def create_course(
    db: AsyncSession,
    viewer: Viewer,
    body: CreateCourseRequest,
) -> Course:
    if viewer.role not in COURSE_CREATOR_ROLES:
        raise InsufficientRoleError("Only tenant or super admins can create courses")

    tenant_id = body.tenant_id if body.tenant_id is not None else viewer.tenant_id
    if tenant_id is None:
        raise CrossTenantAccessError("No tenant to create the course in")
    if viewer.role != Role.SUPER_ADMIN and tenant_id != viewer.tenant_id:
        raise CrossTenantAccessError(f"Cannot create courses in tenant {tenant_id}")

    logger.debug("Creating course name=%r tenant=%s by user=%s", body.course_name, tenant_id, viewer.user_id)
    duplicate = await db.scalar(
        select(Course.course_id).where(
            Course.tenant_id == tenant_id,
            func.lower(Course.course_name) == body.course_name.lower(),
            Course.is_deleted.is_(False),
        )
    )
    if duplicate is not None:
        raise CourseNameConflictError(body.course_name)

    course = Course(
        tenant_id=tenant_id,
        **body.model_dump(exclude={"tenant_id"}),
    )
    db.add(course)
    await db.flush()
    await db.refresh(course)
    logger.info("Created course %s in tenant %s", course.course_id, tenant_id)
    return course
