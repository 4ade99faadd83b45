"""Catalog query composer.

Listing parameters become a list of typed filters (:data:`CatalogFilter`).
:func:`merge_filters` combines filters that target the same field and
:func:`compose_predicate` turns the result into one SQLAlchemy predicate on
``Course``. A parameter that was not supplied produces no filter at all.

Merge precedence when two filters hit the same field (everything is a
conjunction):

* ``TextSearch``: every term must match.
* ``EnumMatch``: equal values collapse, different values match nothing.
* ``NumericRange`` / ``DateRange``: bounds intersect; an empty range matches nothing.
* ``SetMembership``: ids intersect per relation; ``ids=None`` ("any") is neutral.
* ``PurchasedBy``: the same student collapses; a different or missing student matches nothing.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Any, Literal

from sqlalchemy import ColumnElement, and_, false, or_, select

from app.catalog.schemas import CatalogQuery, CourseTypeFilter
from app.exceptions import InvalidFilterError, InvalidSortFieldError
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.enums import PURCHASE_ENROLLMENT_TYPES, CourseStatus, CourseType
from app.models.program import (
    CourseSpecialization,
    Program,
    Specialization,
    SpecializationProgram,
)
from app.scope import VisibilityScope
from shared.models.user import Viewer


class Unset(enum.Enum):
    """Marker for a parameter the caller did not send at all."""

    UNSET = "UNSET"

    def __repr__(self) -> str:
        return "UNSET"


UNSET = Unset.UNSET

# Absent (UNSET), explicitly empty (None) or a value.
type Tri[T] = T | None | Unset

# Sentinel the catalog API accepts for "any program" / "any specialization".
ANY_ID = -1

SEARCH_FIELDS = ("course_name", "course_description")

_COLUMNS: dict[str, Any] = {
    "course_name": Course.course_name,
    "course_description": Course.course_description,
    "course_status": Course.course_status,
    "course_type": Course.course_type,
    "course_price": Course.course_price,
    "course_total_hours": Course.course_total_hours,
    "created_at": Course.created_at,
    "updated_at": Course.updated_at,
}


# ---------------------------------------------------------------------------
# Filter kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextSearch:
    term: str
    fields: tuple[str, ...] = SEARCH_FIELDS


@dataclass(frozen=True)
class EnumMatch:
    field: str
    value: enum.Enum


@dataclass(frozen=True)
class NumericRange:
    field: str
    minimum: Decimal | None = None
    maximum: Decimal | None = None


@dataclass(frozen=True)
class DateRange:
    field: str
    start: datetime | None = None
    end: datetime | None = None


@dataclass(frozen=True)
class SetMembership:
    relation: Literal["program", "specialization"]
    ids: frozenset[int] | None = None


@dataclass(frozen=True)
class PurchasedBy:
    student_id: int | None


type CatalogFilter = TextSearch | EnumMatch | NumericRange | DateRange | SetMembership | PurchasedBy


@dataclass
class MergedFilters:
    search_terms: list[str] = field(default_factory=list)
    search_fields: dict[str, tuple[str, ...]] = field(default_factory=dict)
    enums: dict[str, enum.Enum] = field(default_factory=dict)
    numeric: dict[str, tuple[Decimal | None, Decimal | None]] = field(default_factory=dict)
    dates: dict[str, tuple[datetime | None, datetime | None]] = field(default_factory=dict)
    memberships: dict[str, frozenset[int] | None] = field(default_factory=dict)
    purchased_by: Tri[int] = UNSET
    unsatisfiable: bool = False

    @property
    def is_empty(self) -> bool:
        return not (
            self.search_terms
            or self.enums
            or self.numeric
            or self.dates
            or self.memberships
            or self.purchased_by is not UNSET
            or self.unsatisfiable
        )


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def _tighter_min(a: Any, b: Any) -> Any:
    if a is None:
        return b
    if b is None:
        return a
    return max(a, b)


def _tighter_max(a: Any, b: Any) -> Any:
    if a is None:
        return b
    if b is None:
        return a
    return min(a, b)


def _is_empty_range(bounds: tuple[Any, Any]) -> bool:
    low, high = bounds
    return low is not None and high is not None and low > high


def merge_filters(filters: Iterable[CatalogFilter]) -> MergedFilters:
    merged = MergedFilters()
    for item in filters:
        if isinstance(item, TextSearch):
            merged.search_terms.append(item.term)
            merged.search_fields[item.term] = item.fields
        elif isinstance(item, EnumMatch):
            current = merged.enums.get(item.field)
            if current is not None and current != item.value:
                merged.unsatisfiable = True
            merged.enums[item.field] = item.value
        elif isinstance(item, NumericRange):
            low, high = merged.numeric.get(item.field, (None, None))
            merged.numeric[item.field] = (
                _tighter_min(low, item.minimum),
                _tighter_max(high, item.maximum),
            )
        elif isinstance(item, DateRange):
            start, end = merged.dates.get(item.field, (None, None))
            merged.dates[item.field] = (
                _tighter_min(start, item.start),
                _tighter_max(end, item.end),
            )
        elif isinstance(item, SetMembership):
            if item.relation in merged.memberships:
                current_ids = merged.memberships[item.relation]
                if current_ids is None:
                    merged.memberships[item.relation] = item.ids
                elif item.ids is not None:
                    merged.memberships[item.relation] = current_ids & item.ids
            else:
                merged.memberships[item.relation] = item.ids
        elif isinstance(item, PurchasedBy):
            if item.student_id is None:
                merged.unsatisfiable = True
            elif merged.purchased_by is not UNSET and merged.purchased_by != item.student_id:
                merged.unsatisfiable = True
            merged.purchased_by = item.student_id
        else:
            raise TypeError(f"Unknown catalog filter: {item!r}")

    if any(_is_empty_range(b) for b in merged.numeric.values()):
        merged.unsatisfiable = True
    if any(_is_empty_range(b) for b in merged.dates.values()):
        merged.unsatisfiable = True
    if any(ids is not None and not ids for ids in merged.memberships.values()):
        merged.unsatisfiable = True
    return merged


# ---------------------------------------------------------------------------
# Compile
# ---------------------------------------------------------------------------


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _membership_clause(
    memberships: dict[str, frozenset[int] | None],
    scope: VisibilityScope,
) -> ColumnElement[bool]:
    """Course sits under an active specialization that sits under an active program."""
    stmt = (
        select(CourseSpecialization.course_specialization_id)
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
            CourseSpecialization.course_id == Course.course_id,
            scope.visible(CourseSpecialization),
            scope.visible(Specialization),
            scope.visible(SpecializationProgram),
            scope.visible(Program),
        )
    )
    specialization_ids = memberships.get("specialization")
    if specialization_ids:
        stmt = stmt.where(Specialization.specialization_id.in_(sorted(specialization_ids)))
    program_ids = memberships.get("program")
    if program_ids:
        stmt = stmt.where(Program.program_id.in_(sorted(program_ids)))
    return stmt.exists()


def purchased_clause(student_id: int, scope: VisibilityScope) -> ColumnElement[bool]:
    return (
        select(Enrollment.enrollment_id)
        .where(
            Enrollment.course_id == Course.course_id,
            Enrollment.student_id == student_id,
            Enrollment.course_enrollment_type.in_(PURCHASE_ENROLLMENT_TYPES),
            scope.visible(Enrollment),
        )
        .exists()
    )


def compose_predicate(
    filters: Iterable[CatalogFilter],
    base: ColumnElement[bool],
    *,
    scope: VisibilityScope,
) -> ColumnElement[bool]:
    """``base`` AND every merged filter. With no filters the result is ``base``."""
    merged = merge_filters(filters)
    if merged.is_empty:
        return base
    if merged.unsatisfiable:
        return and_(base, false())

    clauses: list[ColumnElement[bool]] = [base]
    for term in merged.search_terms:
        pattern = f"%{_escape_like(term)}%"
        clauses.append(
            or_(*(
                _COLUMNS[name].ilike(pattern, escape="\\")
                for name in merged.search_fields[term]
            ))
        )
    for name, value in merged.enums.items():
        clauses.append(_COLUMNS[name] == value)
    for name, (low, high) in [*merged.numeric.items(), *merged.dates.items()]:
        column = _COLUMNS[name]
        if low is not None:
            clauses.append(column >= low)
        if high is not None:
            clauses.append(column <= high)
    if merged.memberships:
        clauses.append(_membership_clause(merged.memberships, scope))
    if isinstance(merged.purchased_by, int):
        clauses.append(purchased_clause(merged.purchased_by, scope))
    return and_(*clauses)


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------

SORT_FIELDS: dict[str, Any] = {
    "courseId": Course.course_id,
    "courseName": Course.course_name,
    "createdAt": Course.created_at,
    "updatedAt": Course.updated_at,
    "courseStatus": Course.course_status,
    "courseType": Course.course_type,
    "coursePrice": Course.course_price,
    "courseTotalHours": Course.course_total_hours,
}
SORT_FIELDS.update({column.key: column for column in list(SORT_FIELDS.values())})


def build_ordering(sort_by: str | None, sort_order: Literal["asc", "desc"] = "desc") -> list[Any]:
    """Order-by clauses for a caller-supplied sort, newest first by default."""
    if sort_by is None:
        column = Course.created_at
    else:
        column = SORT_FIELDS.get(sort_by)
        if column is None:
            raise InvalidSortFieldError(sort_by)
    descending = sort_order == "desc"
    ordering = [column.desc() if descending else column.asc()]
    if column is not Course.course_id:
        ordering.append(Course.course_id.desc() if descending else Course.course_id.asc())
    return ordering


# ---------------------------------------------------------------------------
# Raw input → filters
# ---------------------------------------------------------------------------


def _given(query: CatalogQuery, name: str) -> Tri[Any]:
    if name not in query.model_fields_set:
        return UNSET
    return getattr(query, name)


def _utc(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _lower_bound(value: date | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return _utc(value)
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _upper_bound(value: date | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return _utc(value)
    # A bare date includes the whole day
    return datetime.combine(value, time.max, tzinfo=timezone.utc)


def _membership(relation: Literal["program", "specialization"], value: Tri[int]) -> SetMembership | None:
    if value is UNSET:
        return None
    if value is None or value == ANY_ID:
        return SetMembership(relation, None)
    return SetMembership(relation, frozenset({value}))


def build_filters(query: CatalogQuery, viewer: Viewer) -> list[CatalogFilter]:
    """Translate listing parameters into filters; absent or blank params add nothing."""
    filters: list[CatalogFilter] = []

    search = _given(query, "search")
    if isinstance(search, str) and search.strip():
        filters.append(TextSearch(search.strip()))

    status = _given(query, "course_status")
    if isinstance(status, CourseStatus):
        filters.append(EnumMatch("course_status", status))
    if not viewer.is_staff:
        filters.append(EnumMatch("course_status", CourseStatus.PUBLIC))

    course_type = _given(query, "course_type")
    if course_type is not UNSET and course_type is not None:
        if course_type is CourseTypeFilter.PURCHASED:
            filters.append(PurchasedBy(viewer.student_id))
        else:
            filters.append(EnumMatch("course_type", CourseType(course_type.value)))

    min_hours = _given(query, "min_hours")
    max_hours = _given(query, "max_hours")
    low = min_hours if isinstance(min_hours, Decimal) else None
    high = max_hours if isinstance(max_hours, Decimal) else None
    if low is not None or high is not None:
        if low is not None and high is not None and low > high:
            raise InvalidFilterError("min_hours must not exceed max_hours")
        filters.append(NumericRange("course_total_hours", low, high))

    for column, start_name, end_name in (
        ("created_at", "created_from", "created_to"),
        ("updated_at", "updated_from", "updated_to"),
    ):
        start = _given(query, start_name)
        end = _given(query, end_name)
        start_at = _lower_bound(None if start is UNSET else start)
        end_at = _upper_bound(None if end is UNSET else end)
        if start_at is None and end_at is None:
            continue
        if start_at is not None and end_at is not None and start_at > end_at:
            raise InvalidFilterError(f"{start_name} must not be after {end_name}")
        filters.append(DateRange(column, start_at, end_at))

    for relation, name in (("program", "program_id"), ("specialization", "specialization_id")):
        membership = _membership(relation, _given(query, name))
        if membership is not None:
            filters.append(membership)

    return filters
