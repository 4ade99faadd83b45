from decimal import Decimal

import pytest
from httpx import AsyncClient

from app.models.enums import CourseStatus
from conftest import OTHER_TENANT, TENANT, auth_headers
from shared.constants import Role

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/catalog"
TENANT_HEADER = {"X-Tenant-ID": str(TENANT)}


async def test_health(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "catalog"


async def test_request_id_echoed(async_client: AsyncClient) -> None:
    response = await async_client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


async def test_anonymous_listing_uses_tenant_header(async_client: AsyncClient, factory) -> None:
    await factory.course("Ours", course_price=Decimal("50"))
    await factory.course("Theirs", tenant_id=OTHER_TENANT)

    response = await async_client.get(f"{BASE}/courses", headers=TENANT_HEADER)

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    item = data["items"][0]
    assert item["course_name"] == "Ours"
    assert item["purchase_status"] == "Buy: 50"
    assert item["is_free"] is False
    assert item["is_purchased"] is False


async def test_anonymous_without_tenant_sees_nothing(async_client: AsyncClient, factory) -> None:
    await factory.course("Ours")
    response = await async_client.get(f"{BASE}/courses")
    assert response.status_code == 200
    assert response.json()["items"] == []


async def test_student_token_resolves_purchase(async_client: AsyncClient, factory) -> None:
    course = await factory.course("Mine", course_price=Decimal("50"))
    await factory.enrollment(course, student_id=7)

    response = await async_client.get(
        f"{BASE}/courses",
        params={"course_type": "PURCHASED"},
        headers=auth_headers(7, Role.STUDENT),
    )

    assert response.status_code == 200
    items = response.json()["items"]
    assert [i["course_name"] for i in items] == ["Mine"]
    assert items[0]["purchase_status"] == "Purchased"


async def test_listing_filters_from_query_string(async_client: AsyncClient, factory) -> None:
    await factory.course("ECG Basics", course_total_hours=Decimal("3"))
    await factory.course("ECG Advanced", course_total_hours=Decimal("12"))
    await factory.course("Anatomy", course_total_hours=Decimal("3"))

    response = await async_client.get(
        f"{BASE}/courses",
        params={"search": "ecg", "max_hours": "5", "sort_by": "courseName", "sort_order": "asc"},
        headers=TENANT_HEADER,
    )

    assert response.status_code == 200
    assert [i["course_name"] for i in response.json()["items"]] == ["ECG Basics"]


async def test_unknown_sort_field_is_400(async_client: AsyncClient) -> None:
    response = await async_client.get(f"{BASE}/courses", params={"sort_by": "nope"}, headers=TENANT_HEADER)
    assert response.status_code == 400
    assert "nope" in response.json()["detail"]


async def test_inverted_hours_is_400(async_client: AsyncClient) -> None:
    response = await async_client.get(
        f"{BASE}/courses", params={"min_hours": "5", "max_hours": "1"}, headers=TENANT_HEADER,
    )
    assert response.status_code == 400


@pytest.mark.parametrize("params", [{"limit": "0"}, {"limit": "101"}, {"offset": "-1"}, {"program_id": "0"}])
async def test_bad_query_values_are_422(async_client: AsyncClient, params) -> None:
    response = await async_client.get(f"{BASE}/courses", params=params, headers=TENANT_HEADER)
    assert response.status_code == 422


async def test_tenant_header_mismatch_is_403(async_client: AsyncClient) -> None:
    response = await async_client.get(
        f"{BASE}/courses",
        headers={**auth_headers(7, Role.STUDENT, tenant_id=TENANT), "X-Tenant-ID": str(OTHER_TENANT)},
    )
    assert response.status_code == 403


async def test_super_admin_narrows_with_tenant_header(async_client: AsyncClient, factory) -> None:
    await factory.course("Ours")
    await factory.course("Theirs", tenant_id=OTHER_TENANT)

    response = await async_client.get(
        f"{BASE}/courses",
        headers={**auth_headers(1, Role.SUPER_ADMIN, tenant_id=None), "X-Tenant-ID": str(OTHER_TENANT)},
    )

    assert response.status_code == 200
    assert [i["course_name"] for i in response.json()["items"]] == ["Theirs"]


async def test_invalid_token_is_treated_as_anonymous(async_client: AsyncClient, factory) -> None:
    await factory.course("Draft", course_status=CourseStatus.DRAFT)
    response = await async_client.get(
        f"{BASE}/courses",
        headers={"Authorization": "Bearer not-a-jwt", **TENANT_HEADER},
    )
    assert response.status_code == 200
    assert response.json()["items"] == []


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------


async def test_modules_topics_videos_flow(async_client: AsyncClient, factory) -> None:
    course = await factory.course()
    module = await factory.module(course)
    topic = await factory.topic(module)
    first = await factory.video(topic, 1)
    second = await factory.video(topic, 2)
    await factory.progress(first, student_id=7, completion_percentage=100, is_completed=True)
    headers = auth_headers(7, Role.STUDENT)

    modules = await async_client.get(f"{BASE}/courses/{course.course_id}/modules", headers=headers)
    assert modules.status_code == 200
    assert modules.json()[0]["module_stats"] == "1 Topics | 2 Video Lectures"

    topics = await async_client.get(f"{BASE}/modules/{module.course_module_id}/topics", headers=headers)
    assert topics.status_code == 200
    assert topics.json()[0]["overall_video_lectures"] == "2 Video Lectures"

    videos = await async_client.get(f"{BASE}/topics/{topic.course_topic_id}/videos", headers=headers)
    assert videos.status_code == 200
    body = videos.json()
    assert [v["is_video_locked"] for v in body] == [False, False]
    assert body[0]["completion_state"] == "COMPLETED"
    assert body[1]["lock_state"] == "UNLOCKED"

    detail = await async_client.get(f"{BASE}/videos/{second.course_video_id}", headers=headers)
    assert detail.status_code == 200
    assert detail.json()["lecture_title"] == "Lecture:2 Video 2"
    assert detail.json()["previous_course_video_id"] == first.course_video_id
    assert detail.json()["next_course_video_id"] is None


async def test_anonymous_videos_locked_after_first(async_client: AsyncClient, factory) -> None:
    course = await factory.course()
    module = await factory.module(course)
    topic = await factory.topic(module)
    for position in (1, 2, 3):
        await factory.video(topic, position)

    response = await async_client.get(f"{BASE}/topics/{topic.course_topic_id}/videos", headers=TENANT_HEADER)
    assert [v["is_video_locked"] for v in response.json()] == [False, True, True]


async def test_course_detail(async_client: AsyncClient, factory) -> None:
    course = await factory.course("Cardio", course_price=Decimal("50"))
    await factory.teacher(course, "Dr. Asha Rao")
    await factory.course_progress(course, student_id=7, overall_progress_percentage=60)

    response = await async_client.get(f"{BASE}/courses/{course.course_id}", headers=auth_headers(7, Role.STUDENT))

    assert response.status_code == 200
    data = response.json()
    assert data["teacher_name"] == "Dr. Asha Rao"
    assert data["overall_progress_percentage"] == 60
    assert data["purchase_status"] == "Buy: 50"


async def test_foreign_course_detail_is_404(async_client: AsyncClient, factory) -> None:
    course = await factory.course(tenant_id=OTHER_TENANT)
    response = await async_client.get(f"{BASE}/courses/{course.course_id}", headers=TENANT_HEADER)
    assert response.status_code == 404


@pytest.mark.parametrize(
    "path",
    ["/courses/999", "/courses/999/modules", "/modules/999/topics", "/topics/999/videos", "/videos/999"],
)
async def test_missing_rows_are_404(async_client: AsyncClient, path: str) -> None:
    response = await async_client.get(f"{BASE}{path}", headers=TENANT_HEADER)
    assert response.status_code == 404


async def test_foreign_course_is_404(async_client: AsyncClient, factory) -> None:
    course = await factory.course(tenant_id=OTHER_TENANT)
    response = await async_client.get(f"{BASE}/courses/{course.course_id}/modules", headers=TENANT_HEADER)
    assert response.status_code == 404


async def test_foreign_module_topics_are_404(async_client: AsyncClient, factory) -> None:
    course = await factory.course(tenant_id=OTHER_TENANT)
    module = await factory.module(course)
    response = await async_client.get(
        f"{BASE}/modules/{module.course_module_id}/topics", headers=auth_headers(7, Role.STUDENT),
    )
    assert response.status_code == 404


async def test_foreign_video_detail_is_404(async_client: AsyncClient, factory) -> None:
    course = await factory.course(tenant_id=OTHER_TENANT)
    module = await factory.module(course)
    topic = await factory.topic(module)
    video = await factory.video(topic, 1)
    response = await async_client.get(
        f"{BASE}/videos/{video.course_video_id}", headers=auth_headers(7, Role.STUDENT),
    )
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Course creation
# ---------------------------------------------------------------------------


async def test_create_course(async_client: AsyncClient) -> None:
    response = await async_client.post(
        f"{BASE}/courses",
        json={"course_name": "Neurology 101", "course_price": "25.00"},
        headers=auth_headers(1, Role.TENANT_ADMIN),
    )
    assert response.status_code == 201
    data = response.json()
    assert data["course_name"] == "Neurology 101"
    assert data["tenant_id"] == TENANT
    assert data["course_status"] == "DRAFT"


async def test_create_duplicate_course_is_409(async_client: AsyncClient, factory) -> None:
    await factory.course("Neurology 101")
    response = await async_client.post(
        f"{BASE}/courses",
        json={"course_name": "Neurology 101"},
        headers=auth_headers(1, Role.TENANT_ADMIN),
    )
    assert response.status_code == 409


async def test_create_course_in_other_tenant_is_403(async_client: AsyncClient) -> None:
    response = await async_client.post(
        f"{BASE}/courses",
        json={"course_name": "Elsewhere", "tenant_id": OTHER_TENANT},
        headers=auth_headers(1, Role.TENANT_ADMIN),
    )
    assert response.status_code == 403


async def test_student_cannot_create_course(async_client: AsyncClient) -> None:
    response = await async_client.post(
        f"{BASE}/courses", json={"course_name": "Mine"}, headers=auth_headers(7, Role.STUDENT),
    )
    assert response.status_code == 403


async def test_anonymous_cannot_create_course(async_client: AsyncClient) -> None:
    response = await async_client.post(f"{BASE}/courses", json={"course_name": "Mine"}, headers=TENANT_HEADER)
    assert response.status_code == 401


async def test_free_course_with_price_is_422(async_client: AsyncClient) -> None:
    response = await async_client.post(
        f"{BASE}/courses",
        json={"course_name": "Odd", "course_type": "FREE", "course_price": "10"},
        headers=auth_headers(1, Role.TENANT_ADMIN),
    )
    assert response.status_code == 422
