"""Catalog Pydantic V2 schemas.

Covers the listing query, catalog cards, module/topic/video projections and
course creation. Request models are kept separate from response models.
"""

from __future__ import annotations

import enum
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidatorFunctionWrapHandler,
    field_validator,
    model_validator,
)

from app.catalog.unlock import CompletionState, LockState
from app.models.enums import CourseStatus, CourseType
from app.pagination import OffsetPage, OffsetParams


class CourseTypeFilter(str, enum.Enum):
    """``course_type`` values accepted by the listing; PURCHASED means "mine"."""

    FREE = "FREE"
    PAID = "PAID"
    PURCHASED = "PURCHASED"


# ---------------------------------------------------------------------------
# Listing query
# ---------------------------------------------------------------------------

_DATE_ONLY = re.compile(r"\d{4}-\d{2}-\d{2}")
_date_adapter = TypeAdapter(date)
_datetime_adapter = TypeAdapter(datetime)


class CatalogQuery(OffsetParams):
    """Query parameters of the course listing.

    Parameters the caller leaves out add no filter. ``program_id`` and
    ``specialization_id`` take ``-1`` to mean "under any program" /
    "under any specialization".
    """

    search: str | None = Field(
        default=None, max_length=255, description="Substring match on name or description.",
    )
    course_status: CourseStatus | None = Field(
        default=None, description="Only honoured for staff; students always see PUBLIC.",
    )
    course_type: CourseTypeFilter | None = Field(default=None, description="FREE, PAID or PURCHASED.")
    min_hours: Decimal | None = Field(default=None, ge=0, description="Minimum total hours.")
    max_hours: Decimal | None = Field(default=None, ge=0, description="Maximum total hours.")
    program_id: int | None = Field(default=None, description="Program id, or -1 for any program.")
    specialization_id: int | None = Field(
        default=None, description="Specialization id, or -1 for any specialization.",
    )
    created_from: date | datetime | None = None
    created_to: date | datetime | None = None
    updated_from: date | datetime | None = None
    updated_to: date | datetime | None = None
    sort_by: str | None = Field(default=None, description="e.g. createdAt, courseName, coursePrice.")
    sort_order: Literal["asc", "desc"] = "desc"

    @field_validator("program_id", "specialization_id")
    @classmethod
    def any_or_positive(cls, v: int | None) -> int | None:
        if v is not None and v != -1 and v <= 0:
            raise ValueError("must be a positive id or -1 for any")
        return v

    @field_validator("created_from", "created_to", "updated_from", "updated_to", mode="wrap")
    @classmethod
    def date_or_instant(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> date | datetime | None:
        """A bare ``YYYY-MM-DD`` stays a whole-day date; anything else is an exact instant.

        Left to itself the union would read ``2025-01-01T00:00:00Z`` as a date.
        """
        if v is None or isinstance(v, date):
            return v
        if isinstance(v, str):
            raw = v.strip()
            if _DATE_ONLY.fullmatch(raw):
                return _date_adapter.validate_python(raw)
            return _datetime_adapter.validate_python(raw)
        return handler(v)


# ---------------------------------------------------------------------------
# Listing response
# ---------------------------------------------------------------------------


class CourseCatalogItem(BaseModel):
    course_id: int
    course_name: str
    course_description: str | None = None
    main_thumbnail_url: str | None = None
    course_status: CourseStatus
    course_type: CourseType
    course_price: Decimal | None = None
    course_total_hours: Decimal | None = None
    total_hours_display: str | None = Field(default=None, description="e.g. '1 hr 30 min'.")
    program_id: int | None = None
    program_name: str | None = None
    teacher_name: str | None = None
    teacher_qualification: str | None = None
    profile_picture_url: str | None = None
    start_date: str | None = Field(default=None, description="Earliest session start, e.g. 'May 2025'.")
    end_date: str | None = Field(default=None, description="End of that session, e.g. 'August 2025'.")
    purchase_status: str = Field(description="Display hint: Purchased, Free or 'Buy: <price>'.")
    is_free: bool
    is_purchased: bool
    created_at: datetime
    updated_at: datetime


class CourseDetail(BaseModel):
    """Course landing page: who teaches it, when it runs, and where the student stands."""

    course_id: int
    course_name: str
    course_description: str | None = None
    main_thumbnail_url: str | None = None
    course_type: CourseType
    course_price: Decimal | None = None
    total_hours_display: str | None = None
    program_id: int | None = None
    program_name: str | None = None
    specialization_name: str | None = None
    teacher_name: str | None = None
    teacher_qualification: str | None = None
    profile_picture_url: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    overall_progress_percentage: int | None = Field(
        default=None, description="Only for students with recorded progress.",
    )
    purchase_status: str
    is_free: bool
    is_purchased: bool


CourseListResponse = OffsetPage[CourseCatalogItem]


# ---------------------------------------------------------------------------
# Hierarchy responses
# ---------------------------------------------------------------------------


class ModuleSummary(BaseModel):
    course_module_id: int
    course_id: int
    course_module_name: str
    position: int
    topic_count: int
    video_count: int
    module_stats: str


class TopicSummary(BaseModel):
    course_topic_id: int
    module_id: int
    course_topic_name: str
    position: int
    video_count: int
    overall_video_lectures: str


class VideoState(BaseModel):
    course_video_id: int
    course_topic_id: int
    position: int
    video_name: str
    duration_seconds: int
    is_completed: bool | None = None
    completion_percentage: int | None = None
    last_watched_at: datetime | None = None
    completion_state: CompletionState
    lock_state: LockState
    is_video_locked: bool


class VideoDetail(BaseModel):
    course_video_id: int
    course_id: int
    course_topic_id: int
    position: int
    video_name: str
    lecture_title: str
    video_url: str
    thumbnail_url: str | None = None
    bunny_video_id: str | None = None
    duration_seconds: int
    teacher_name: str | None = None
    teacher_qualification: str | None = None
    profile_picture_url: str | None = None
    completion_state: CompletionState
    lock_state: LockState
    is_video_locked: bool
    next_course_video_id: int | None = None
    next_video_name: str | None = None
    next_video_duration: int | None = None
    previous_course_video_id: int | None = None
    previous_video_name: str | None = None
    previous_video_duration: int | None = None


# ---------------------------------------------------------------------------
# Course creation
# ---------------------------------------------------------------------------


class CreateCourseRequest(BaseModel):
    """Request body for creating a course.

    ``tenant_id`` defaults to the caller's tenant. Only a super admin may
    name another tenant.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    course_name: str = Field(min_length=1, max_length=255)
    course_description: str | None = None
    main_thumbnail_url: str | None = None
    course_status: CourseStatus = CourseStatus.DRAFT
    course_type: CourseType = CourseType.PAID
    course_price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    course_total_hours: Decimal | None = Field(default=None, ge=0, max_digits=6, decimal_places=2)
    tenant_id: int | None = Field(default=None, gt=0)

    @model_validator(mode="after")
    def free_course_has_no_price(self) -> CreateCourseRequest:
        if self.course_type == CourseType.FREE and self.course_price:
            raise ValueError("FREE courses cannot carry a price")
        return self


class CourseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    course_id: int
    tenant_id: int
    course_name: str
    course_description: str | None = None
    main_thumbnail_url: str | None = None
    course_status: CourseStatus
    course_type: CourseType
    course_price: Decimal | None = None
    course_total_hours: Decimal | None = None
    created_at: datetime
    updated_at: datetime
