"""Enrollment & purchase status of a course relative to an optional student."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enrollment import Enrollment
from app.scope import VisibilityScope

PURCHASED = "Purchased"
FREE = "Free"


@dataclass(frozen=True)
class PurchaseStatus:
    # Display hint only; callers decide on the two booleans.
    label: str
    is_free: bool
    is_purchased: bool


def is_free_price(price: Decimal | None) -> bool:
    return price is None or price == 0


def format_price(price: Decimal) -> str:
    """``Decimal('50.00')`` -> ``'50'``, ``Decimal('49.50')`` -> ``'49.5'``."""
    return format(price.normalize(), "f")


def classify_purchase(price: Decimal | None, enrolled: bool) -> PurchaseStatus:
    free = is_free_price(price)
    if enrolled:
        label = PURCHASED
    elif free:
        label = FREE
    else:
        label = f"Buy: {format_price(price)}"
    return PurchaseStatus(label=label, is_free=free, is_purchased=enrolled)


async def find_enrolled_course_ids(
    db: AsyncSession,
    scope: VisibilityScope,
    student_id: int | None,
    course_ids: Iterable[int],
) -> set[int]:
    """Courses among ``course_ids`` the student holds a live enrollment in.

    One query for the whole page. Any enrollment type counts.
    """
    ids = sorted(set(course_ids))
    if student_id is None or not ids:
        return set()
    result = await db.execute(
        select(Enrollment.course_id)
        .where(
            Enrollment.student_id == student_id,
            Enrollment.course_id.in_(ids),
            scope.visible(Enrollment),
        )
        .distinct()
    )
    return set(result.scalars().all())
