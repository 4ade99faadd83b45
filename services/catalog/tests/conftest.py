import os
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import get_db
from app.main import app
from app.models import (
    Course,
    CourseModule,
    CourseSession,
    CourseSpecialization,
    CourseTopic,
    CourseVideo,
    Enrollment,
    Program,
    Specialization,
    SpecializationProgram,
    StudentCourseProgress,
    Teacher,
    TeacherCourse,
    VideoProgress,
)
from app.models.enums import CourseEnrollmentType, CourseStatus, CourseType
from shared.auth.config import get_auth_settings
from shared.constants import Role
from shared.database.postgres import Base
from shared.models.user import Viewer

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

TENANT = 1
OTHER_TENANT = 2


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory db
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_kwargs(TEST_DATABASE_URL))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.pop(get_db, None)


# ---------------------------------------------------------------------------
# Principals
# ---------------------------------------------------------------------------


def student(student_id: int = 100, tenant_id: int = TENANT) -> Viewer:
    return Viewer(user_id=student_id, role=Role.STUDENT, tenant_id=tenant_id, student_id=student_id)


def anonymous(tenant_id: int | None = TENANT) -> Viewer:
    return Viewer(tenant_id=tenant_id)


def staff(role: Role = Role.TENANT_ADMIN, tenant_id: int = TENANT, user_id: int = 1) -> Viewer:
    return Viewer(user_id=user_id, role=role, tenant_id=tenant_id)


def super_admin(tenant_id: int | None = None) -> Viewer:
    return Viewer(user_id=9, role=Role.SUPER_ADMIN, tenant_id=tenant_id, cross_tenant=True)


def make_token(sub: int, role: Role, tenant_id: int | None = TENANT, **claims) -> str:
    settings = get_auth_settings()
    payload = {
        "sub": str(sub),
        "role": role.value,
        "iss": settings.issuer,
        "aud": settings.audience,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        **claims,
    }
    if tenant_id is not None:
        payload["tenant_id"] = tenant_id
    return jwt.encode(payload, settings.secret, algorithm=settings.algorithm)


def auth_headers(sub: int, role: Role, tenant_id: int | None = TENANT, **claims) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(sub, role, tenant_id, **claims)}"}


# ---------------------------------------------------------------------------
# Row factory
# ---------------------------------------------------------------------------


class CatalogFactory:
    """Inserts catalog rows with sensible defaults and flushes for ids."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _add(self, row):
        self.session.add(row)
        await self.session.flush()
        return row

    async def course(self, name: str = "Cardiology Basics", **kw) -> Course:
        kw.setdefault("tenant_id", TENANT)
        kw.setdefault("course_status", CourseStatus.PUBLIC)
        kw.setdefault("course_type", CourseType.PAID)
        return await self._add(Course(course_name=name, **kw))

    async def module(self, course: Course, position: int = 1, **kw) -> CourseModule:
        kw.setdefault("tenant_id", course.tenant_id)
        kw.setdefault("course_module_name", f"Module {position}")
        return await self._add(
            CourseModule(course_id=course.course_id, position=position, **kw)
        )

    async def topic(self, module: CourseModule, position: int = 1, **kw) -> CourseTopic:
        kw.setdefault("tenant_id", module.tenant_id)
        kw.setdefault("course_topic_name", f"Topic {position}")
        return await self._add(
            CourseTopic(module_id=module.course_module_id, position=position, **kw)
        )

    async def video(self, topic: CourseTopic, position: int, name: str | None = None, **kw) -> CourseVideo:
        module = await self.session.get(CourseModule, topic.module_id)
        kw.setdefault("tenant_id", topic.tenant_id)
        kw.setdefault("duration_seconds", 600)
        kw.setdefault("video_url", f"https://video.example/{position}")
        return await self._add(
            CourseVideo(
                course_id=module.course_id,
                course_topic_id=topic.course_topic_id,
                video_name=name or f"Video {position}",
                position=position,
                **kw,
            )
        )

    async def enrollment(self, course: Course, student_id: int, **kw) -> Enrollment:
        kw.setdefault("tenant_id", course.tenant_id)
        kw.setdefault("course_enrollment_type", CourseEnrollmentType.PAID_COURSE)
        return await self._add(
            Enrollment(course_id=course.course_id, student_id=student_id, **kw)
        )

    async def progress(
        self,
        video: CourseVideo,
        student_id: int,
        completion_percentage: int = 0,
        is_completed: bool = False,
        **kw,
    ) -> VideoProgress:
        kw.setdefault("tenant_id", video.tenant_id)
        return await self._add(
            VideoProgress(
                course_video_id=video.course_video_id,
                student_id=student_id,
                completion_percentage=completion_percentage,
                is_completed=is_completed,
                **kw,
            )
        )

    async def teacher(self, course: Course, full_name: str = "Dr. Asha Rao", **kw) -> Teacher:
        """Create a teacher and assign them to ``course``."""
        kw.setdefault("tenant_id", course.tenant_id)
        teacher = await self._add(Teacher(full_name=full_name, **kw))
        await self._add(
            TeacherCourse(
                tenant_id=course.tenant_id,
                course_id=course.course_id,
                teacher_id=teacher.teacher_id,
            )
        )
        return teacher

    async def course_session(
        self, course: Course, teacher: Teacher, start_date: datetime, end_date: datetime, **kw,
    ) -> CourseSession:
        kw.setdefault("tenant_id", course.tenant_id)
        kw.setdefault("session_name", f"Batch {start_date:%b %Y}")
        return await self._add(
            CourseSession(
                course_id=course.course_id,
                teacher_id=teacher.teacher_id,
                start_date=start_date,
                end_date=end_date,
                **kw,
            )
        )

    async def course_progress(
        self, course: Course, student_id: int, overall_progress_percentage: int, **kw,
    ) -> StudentCourseProgress:
        kw.setdefault("tenant_id", course.tenant_id)
        return await self._add(
            StudentCourseProgress(
                course_id=course.course_id,
                student_id=student_id,
                overall_progress_percentage=overall_progress_percentage,
                **kw,
            )
        )

    async def program_chain(
        self,
        course: Course,
        program: Program | None = None,
        specialization: Specialization | None = None,
    ) -> tuple[Program, Specialization]:
        """Place ``course`` under a specialization that sits under a program."""
        tenant_id = course.tenant_id
        if program is None:
            program = await self._add(Program(tenant_id=tenant_id, program_name="MBBS"))
        if specialization is None:
            specialization = await self._add(
                Specialization(tenant_id=tenant_id, specialization_name="Cardiology")
            )
            await self._add(
                SpecializationProgram(
                    tenant_id=tenant_id,
                    specialization_id=specialization.specialization_id,
                    program_id=program.program_id,
                )
            )
        await self._add(
            CourseSpecialization(
                tenant_id=tenant_id,
                course_id=course.course_id,
                specialization_id=specialization.specialization_id,
            )
        )
        return program, specialization


@pytest.fixture
def factory(db_session: AsyncSession) -> CatalogFactory:
    return CatalogFactory(db_session)

