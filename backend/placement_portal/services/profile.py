"""Profile management business logic."""
import asyncio
from datetime import datetime
from typing import Optional

from fastapi import UploadFile
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.models.application import Application
from placement_portal.models.college import College
from placement_portal.models.company_profile import CompanyProfile
from placement_portal.models.student_profile import StudentProfile, ProfileStatus
from placement_portal.models.user import User
from placement_portal.services import storage


async def get_student_profile(db: AsyncSession, user_id) -> Optional[StudentProfile]:
    result = await db.execute(
        select(StudentProfile).where(StudentProfile.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def get_company_profile(db: AsyncSession, user_id) -> Optional[CompanyProfile]:
    result = await db.execute(
        select(CompanyProfile).where(CompanyProfile.user_id == user_id)
    )
    return result.scalar_one_or_none()


class CollegeLockedError(Exception):
    """Raised when a student with applications tries to change college"""
    pass


async def upsert_student_profile(user: User, update_data: dict, db: AsyncSession) -> StudentProfile:
    """
    Create the student's profile on first save, update it afterwards.

    Changing college sends the profile back to the new placement cell for
    review, and is refused once the student has applied anywhere.

    Raises:
        ValueError: If college_id refers to an unknown college
        CollegeLockedError: If the college changes after applications exist
    """
    if update_data.get("college_id") is not None:
        college = await db.get(College, update_data["college_id"])
        if not college:
            raise ValueError(f"College {update_data['college_id']} not found")

    profile = await get_student_profile(db, user.id)
    if profile is None:
        profile = StudentProfile(
            user_id=user.id,
            full_name=user.full_name,
            status=ProfileStatus.PENDING.value,
            skills=[],
        )
        db.add(profile)
    elif "college_id" in update_data and update_data["college_id"] != profile.college_id:
        result = await db.execute(
            select(func.count(Application.id)).where(Application.student_id == user.id)
        )
        if result.scalar_one() > 0:
            raise CollegeLockedError("College cannot be changed after applying to jobs")
        profile.status = ProfileStatus.PENDING.value

    for field, value in update_data.items():
        if field == "skills" and value is not None:
            value = [skill.strip() for skill in value if skill and skill.strip()]
        setattr(profile, field, value)

    profile.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(profile)
    return profile


async def upsert_company_profile(user: User, update_data: dict, db: AsyncSession) -> CompanyProfile:
    """Create the company's profile on first save, update it afterwards."""
    profile = await get_company_profile(db, user.id)
    if profile is None:
        profile = CompanyProfile(user_id=user.id)
        db.add(profile)

    for field, value in update_data.items():
        # Pydantic already validated the URL
        if field == "website" and value is not None:
            value = str(value)
        setattr(profile, field, value)

    profile.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(profile)
    return profile


async def attach_student_files(
    user: User,
    db: AsyncSession,
    resume: Optional[UploadFile] = None,
    avatar: Optional[UploadFile] = None,
) -> StudentProfile:
    """
    Upload resume and/or avatar, then store their URLs on the profile.

    Both uploads run concurrently and must both succeed before the profile
    row is written.

    Raises:
        StorageError: If either file is rejected
    """
    uploads = {}
    if resume is not None:
        uploads["resume_url"] = storage.upload_file(storage.RESUME_BUCKET, user.id, "resume", resume)
    if avatar is not None:
        uploads["avatar_url"] = storage.upload_file(storage.AVATAR_BUCKET, user.id, "avatar", avatar)

    results = await asyncio.gather(*uploads.values(), return_exceptions=True)
    errors = [r for r in results if isinstance(r, Exception)]
    if errors:
        # Remove whichever object did get stored
        for field, result in zip(uploads.keys(), results):
            if isinstance(result, Exception):
                continue
            bucket = storage.RESUME_BUCKET if field == "resume_url" else storage.AVATAR_BUCKET
            path = storage.path_from_public_url(bucket, result)
            if path:
                storage.delete(bucket, path)
        raise errors[0]

    return await upsert_student_profile(user, dict(zip(uploads.keys(), results)), db)


async def attach_company_logo(user: User, db: AsyncSession, logo: UploadFile) -> CompanyProfile:
    """Upload a company logo and store its URL, removing the previous logo object."""
    logo_url = await storage.upload_file(storage.LOGO_BUCKET, user.id, "logo", logo)

    previous = await get_company_profile(db, user.id)
    old_path = None
    if previous and previous.logo_url:
        old_path = storage.path_from_public_url(storage.LOGO_BUCKET, previous.logo_url)

    profile = await upsert_company_profile(user, {"logo_url": logo_url}, db)

    if old_path:
        storage.delete(storage.LOGO_BUCKET, old_path)
    return profile


class ProfileAlreadyDecidedError(Exception):
    """Raised when the placement cell reviews a profile that is no longer pending"""
    pass


async def decide_student_profile(db: AsyncSession, user_id, college_id, approved: bool) -> StudentProfile:
    """
    Approve or reject a pending student profile of the given college.

    Raises:
        ValueError: If no profile exists for the student in that college
        ProfileAlreadyDecidedError: If the profile is not pending
    """
    profile = await get_student_profile(db, user_id)
    if not profile or profile.college_id != college_id:
        raise ValueError(f"Student profile for user {user_id} not found")

    if profile.status != ProfileStatus.PENDING.value:
        raise ProfileAlreadyDecidedError(f"Student profile already {profile.status}")

    profile.status = ProfileStatus.APPROVED.value if approved else ProfileStatus.REJECTED.value
    profile.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(profile)
    return profile
