from decimal import Decimal

import pytest

from app.catalog.purchase import classify_purchase, find_enrolled_course_ids
from app.scope import VisibilityScope
from conftest import OTHER_TENANT, TENANT


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def test_zero_price_without_enrollment_is_free() -> None:
    status = classify_purchase(Decimal("0"), enrolled=False)
    assert status.label == "Free"
    assert status.is_free is True
    assert status.is_purchased is False


def test_missing_price_is_free() -> None:
    assert classify_purchase(None, enrolled=False).label == "Free"


def test_priced_course_is_buyable() -> None:
    status = classify_purchase(Decimal("50.00"), enrolled=False)
    assert status.label == "Buy: 50"
    assert status.is_free is False
    assert status.is_purchased is False


def test_fractional_price_keeps_significant_digits() -> None:
    assert classify_purchase(Decimal("49.50"), enrolled=False).label == "Buy: 49.5"


def test_enrolled_priced_course_is_purchased() -> None:
    status = classify_purchase(Decimal("50"), enrolled=True)
    assert status.label == "Purchased"
    assert status.is_purchased is True
    assert status.is_free is False


def test_free_and_purchased_are_independent() -> None:
    status = classify_purchase(Decimal("0"), enrolled=True)
    assert status.label == "Purchased"
    assert status.is_free is True
    assert status.is_purchased is True


# ---------------------------------------------------------------------------
# Enrollment lookup
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_enrolled_ids_for_a_page(db_session, factory) -> None:
    first = await factory.course("A")
    second = await factory.course("B")
    third = await factory.course("C")
    await factory.enrollment(first, student_id=7)
    await factory.enrollment(third, student_id=7)
    await factory.enrollment(second, student_id=8)

    enrolled = await find_enrolled_course_ids(
        db_session,
        VisibilityScope(TENANT),
        7,
        [first.course_id, second.course_id, third.course_id],
    )
    assert enrolled == {first.course_id, third.course_id}


@pytest.mark.asyncio
async def test_no_student_means_nothing_enrolled(db_session, factory) -> None:
    course = await factory.course()
    await factory.enrollment(course, student_id=7)
    assert await find_enrolled_course_ids(db_session, VisibilityScope(TENANT), None, [course.course_id]) == set()


@pytest.mark.asyncio
async def test_deleted_inactive_and_foreign_enrollments_do_not_count(db_session, factory) -> None:
    course = await factory.course()
    await factory.enrollment(course, student_id=7, is_deleted=True)
    await factory.enrollment(course, student_id=7, is_active=False)
    await factory.enrollment(course, student_id=7, tenant_id=OTHER_TENANT)

    enrolled = await find_enrolled_course_ids(db_session, VisibilityScope(TENANT), 7, [course.course_id])
    assert enrolled == set()
