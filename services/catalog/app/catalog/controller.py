"""Catalog controller: maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.catalog import service
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
from app.exceptions import (
    CatalogNotFoundError,
    CourseNameConflictError,
    CrossTenantAccessError,
    InsufficientRoleError,
    InvalidFilterError,
    InvalidSortFieldError,
)
from shared.models.user import Viewer

logger = logging.getLogger(__name__)


def _handle_domain_error(exc: Exception) -> Exception:
    if isinstance(exc, CatalogNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, CourseNameConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, CrossTenantAccessError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Cross-tenant access is not allowed.")
    if isinstance(exc, InsufficientRoleError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc) or "Insufficient role.")
    if isinstance(exc, (InvalidSortFieldError, InvalidFilterError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    # Not ours: let the error middleware log it and answer 500
    return exc


def _raise(exc: Exception) -> None:
    mapped = _handle_domain_error(exc)
    if mapped is exc:
        raise exc
    logger.info("Catalog request rejected: %s", exc)
    raise mapped from exc


# ---------------------------------------------------------------------------
# Courses
# ---------------------------------------------------------------------------


async def list_courses(db: AsyncSession, viewer: Viewer, query: CatalogQuery) -> CourseListResponse:
    try:
        return await service.list_courses(db, viewer, query)
    except Exception as exc:
        _raise(exc)


async def create_course(db: AsyncSession, viewer: Viewer, body: CreateCourseRequest) -> CourseResponse:
    try:
        course = await service.create_course(db, viewer, body)
        return CourseResponse.model_validate(course)
    except Exception as exc:
        _raise(exc)


async def get_course_detail(db: AsyncSession, viewer: Viewer, course_id: int) -> CourseDetail:
    try:
        return await service.get_course_detail(db, viewer, course_id)
    except Exception as exc:
        _raise(exc)


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------


async def get_course_modules(db: AsyncSession, viewer: Viewer, course_id: int) -> list[ModuleSummary]:
    try:
        return await service.get_course_modules(db, viewer, course_id)
    except Exception as exc:
        _raise(exc)


async def get_topics(db: AsyncSession, viewer: Viewer, module_id: int) -> list[TopicSummary]:
    try:
        return await service.get_topics(db, viewer, module_id)
    except Exception as exc:
        _raise(exc)


async def get_videos(db: AsyncSession, viewer: Viewer, topic_id: int) -> list[VideoState]:
    try:
        return await service.get_videos(db, viewer, topic_id)
    except Exception as exc:
        _raise(exc)


async def get_video_detail(db: AsyncSession, viewer: Viewer, video_id: int) -> VideoDetail:
    try:
        return await service.get_video_detail(db, viewer, video_id)
    except Exception as exc:
        _raise(exc)
