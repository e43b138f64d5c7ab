"""
Pytest fixtures for testing.
"""
import os
import shutil
import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Import database module BEFORE app to allow override
import placement_portal.database
from placement_portal.database import Base
import placement_portal.services.storage
# Import ALL models so Base.metadata knows about all tables
from placement_portal.models import (
    User,
    UserRole,
    College,
    StudentProfile,
    ProfileStatus,
    CompanyProfile,
    Job,
    JobCollegeTarget,
    TargetApprovalStatus,
    Application,
    ApplicationStatus,
)
from placement_portal.services.security import hash_password, create_session_token

# Now import app (after we can override database)
from placement_portal.main import app as fastapi_app


# Test database URL (use in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "correct-horse-battery"
# bcrypt is slow on purpose; hash once per session
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)

# Override storage directory for tests
TEST_STORAGE_DIR = Path(tempfile.gettempdir()) / "test_placement_storage"
placement_portal.services.storage.STORAGE_ROOT = TEST_STORAGE_DIR


@pytest.fixture(scope="session", autouse=True)
def cleanup_test_storage():
    """Clean up test storage directory before and after test session."""
    if TEST_STORAGE_DIR.exists():
        shutil.rmtree(TEST_STORAGE_DIR)
    TEST_STORAGE_DIR.mkdir(parents=True, exist_ok=True)

    yield

    if TEST_STORAGE_DIR.exists():
        shutil.rmtree(TEST_STORAGE_DIR)


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database for each test.
    Ensures cleanup happens even if test fails.
    """
    # StaticPool keeps one connection alive so every session sees the same
    # in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Replace the app's engine and sessionmaker so get_db() uses the test database
    original_engine = placement_portal.database.engine
    original_sessionmaker = placement_portal.database.AsyncSessionLocal

    placement_portal.database.engine = test_engine
    placement_portal.database.AsyncSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    async_session = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    session = async_session()

    try:
        yield session
    finally:
        try:
            await session.close()
        except Exception as e:
            print(f"Warning: Failed to close session: {e}")

        try:
            async with test_engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)
        except Exception as e:
            print(f"Warning: Failed to drop tables: {e}")

        await test_engine.dispose()

        placement_portal.database.engine = original_engine
        placement_portal.database.AsyncSessionLocal = original_sessionmaker


@pytest_asyncio.fixture
async def async_client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing endpoints.

    The db fixture already replaced the app's engine with the test engine,
    so all endpoints will automatically use the test database.
    """
    transport = ASGITransport(app=fastapi_app)

    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True  # Follow 307 redirects for trailing slashes
    ) as client:
        yield client


def auth_headers(user: User) -> dict:
    """Bearer header acting as the given user."""
    token = create_session_token(str(user.id), user.role.value)
    return {"Authorization": f"Bearer {token}"}


async def make_user(db: AsyncSession, email: str, role: UserRole, college: College = None, full_name: str = None) -> User:
    user = User(
        email=email,
        password_hash=TEST_PASSWORD_HASH,
        role=role,
        full_name=full_name,
        college_id=college.id if college is not None and role == UserRole.ADMIN else None,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def make_job(
    db: AsyncSession,
    company: User,
    colleges=(),
    approved=True,
    min_cgpa: float = 0.0,
    title: str = "Backend Engineer",
    **fields,
) -> Job:
    """Published job targeted at colleges; targets approved unless approved=False."""
    job = Job(
        company_id=company.id,
        title=title,
        company_name="Acme Corp",
        min_cgpa=min_cgpa,
        **fields,
    )
    db.add(job)
    await db.flush()
    for college in colleges:
        db.add(JobCollegeTarget(
            job_id=job.id,
            college_id=college.id,
            approval_status=(TargetApprovalStatus.APPROVED if approved else TargetApprovalStatus.PENDING).value,
        ))
    await db.commit()
    await db.refresh(job)
    return job


async def make_application(
    db: AsyncSession,
    student: User,
    job: Job,
    status: ApplicationStatus = ApplicationStatus.PENDING,
) -> Application:
    application = Application(student_id=student.id, job_id=job.id, status=status.value)
    db.add(application)
    await db.commit()
    await db.refresh(application)
    return application


@pytest_asyncio.fixture
async def college(db: AsyncSession) -> College:
    college = College(name="Northfield Institute of Technology", location="Pune")
    db.add(college)
    await db.commit()
    await db.refresh(college)
    return college


@pytest_asyncio.fixture
async def other_college(db: AsyncSession) -> College:
    college = College(name="Riverside College of Engineering", location="Chennai")
    db.add(college)
    await db.commit()
    await db.refresh(college)
    return college


@pytest_asyncio.fixture
async def student(db: AsyncSession) -> User:
    return await make_user(db, "student@example.com", UserRole.STUDENT, full_name="Priya Sharma")


@pytest_asyncio.fixture
async def student_profile(db: AsyncSession, student: User, college: College) -> StudentProfile:
    """Student with a complete profile: CGPA 8.0 and a resume on file."""
    profile = StudentProfile(
        user_id=student.id,
        college_id=college.id,
        full_name="Priya Sharma",
        roll_number="CS2021-042",
        branch="Computer Science",
        cgpa=8.0,
        graduation_year=2025,
        skills=["python", "sql"],
        resume_url="/storage/resumes/resume.pdf",
        status=ProfileStatus.PENDING.value,
    )
    db.add(profile)
    await db.commit()
    await db.refresh(profile)
    return profile


@pytest_asyncio.fixture
async def company(db: AsyncSession) -> User:
    user = await make_user(db, "hr@acme.example.com", UserRole.COMPANY, full_name="Acme HR")
    db.add(CompanyProfile(user_id=user.id, company_name="Acme Corp", industry="Software"))
    await db.commit()
    return user


@pytest_asyncio.fixture
async def other_company(db: AsyncSession) -> User:
    user = await make_user(db, "jobs@globex.example.com", UserRole.COMPANY)
    db.add(CompanyProfile(user_id=user.id, company_name="Globex"))
    await db.commit()
    return user


@pytest_asyncio.fixture
async def admin(db: AsyncSession, college: College) -> User:
    return await make_user(db, "cell@northfield.example.edu", UserRole.ADMIN, college=college, full_name="Placement Cell")


@pytest_asyncio.fixture
async def other_admin(db: AsyncSession, other_college: College) -> User:
    return await make_user(db, "cell@riverside.example.edu", UserRole.ADMIN, college=other_college)


@pytest.fixture
def past() -> datetime:
    return datetime.utcnow() - timedelta(days=1)


@pytest.fixture
def future() -> datetime:
    return datetime.utcnow() + timedelta(days=7)
