"""Catalog router: HTTP layer only.

Course listing, course creation, and the module → topic → video tree with
per-video lock state. Delegates to the controller.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.catalog import controller
from app.catalog.schemas import (
    CatalogQuery,
    CourseDetail,
    CourseListResponse,
    CourseResponse,
    CreateCourseRequest,
    ModuleSummary,
    TopicSummary,
    VideoDetail,
    VideoState,
)
from app.database import get_db
from app.dependencies import get_viewer, get_viewer_required
from shared.models.user import Viewer

router = APIRouter(prefix="/catalog", tags=["Catalog"])


# ======================================================================
# Course endpoints
# ======================================================================


@router.get(
    "/courses",
    response_model=CourseListResponse,
    summary="List / search courses",
    description="Course catalog of the viewer's tenant with purchase status. "
    "Students and anonymous viewers only see PUBLIC courses. "
    "`course_type=PURCHASED` narrows to courses the student is enrolled in.",
)
async def list_courses(
    query: Annotated[CatalogQuery, Query()],
    db: AsyncSession = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> CourseListResponse:
    return await controller.list_courses(db, viewer, query)


@router.post(
    "/courses",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a course (tenant / super admin)",
    description="Course names are unique within a tenant. "
    "Only super admins may create courses in another tenant.",
)
async def create_course(
    body: CreateCourseRequest,
    db: AsyncSession = Depends(get_db),
    viewer: Viewer = Depends(get_viewer_required),
) -> CourseResponse:
    return await controller.create_course(db, viewer, body)


@router.get(
    "/courses/{course_id}",
    response_model=CourseDetail,
    summary="Course detail with teacher, session dates and progress",
    description="Includes the student's overall progress when one is recorded.",
)
async def get_course_detail(
    course_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> CourseDetail:
    return await controller.get_course_detail(db, viewer, course_id)


# ======================================================================
# Content hierarchy
# ======================================================================


@router.get(
    "/courses/{course_id}/modules",
    response_model=list[ModuleSummary],
    summary="Modules of a course with topic / video counts",
)
async def get_course_modules(
    course_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> list[ModuleSummary]:
    return await controller.get_course_modules(db, viewer, course_id)


@router.get(
    "/modules/{module_id}/topics",
    response_model=list[TopicSummary],
    summary="Topics of a module with video counts",
)
async def get_topics(
    module_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> list[TopicSummary]:
    return await controller.get_topics(db, viewer, module_id)


@router.get(
    "/topics/{topic_id}/videos",
    response_model=list[VideoState],
    summary="Videos of a topic with lock / completion state",
    description="The first video of a topic is always unlocked. Every other video "
    "unlocks once the student has completed the video before it. "
    "Anonymous viewers see every video after the first as locked.",
)
async def get_videos(
    topic_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> list[VideoState]:
    return await controller.get_videos(db, viewer, topic_id)


@router.get(
    "/videos/{video_id}",
    response_model=VideoDetail,
    summary="Video detail with next / previous navigation",
)
async def get_video_detail(
    video_id: int = Path(gt=0),
    db: AsyncSession = Depends(get_db),
    viewer: Viewer = Depends(get_viewer),
) -> VideoDetail:
    return await controller.get_video_detail(db, viewer, video_id)
