"""
Profile management endpoints.

Provides endpoints for:
- Student academic profile, resume and avatar
- Company profile and logo
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.database import get_db
from placement_portal.models.user import User
from placement_portal.api.auth import require_student, require_company
from placement_portal.schemas.profile import (
    StudentProfileUpdate,
    StudentProfileResponse,
    CompanyProfileUpdate,
    CompanyProfileResponse,
)
from placement_portal.services.profile import (
    get_student_profile,
    get_company_profile,
    upsert_student_profile,
    upsert_company_profile,
    attach_student_files,
    attach_company_logo,
    CollegeLockedError,
)
from placement_portal.services.storage import StorageError

logger = logging.getLogger(__name__)
router = APIRouter()


# Student endpoints
@router.get("/profile/student", response_model=StudentProfileResponse)
async def get_own_student_profile(
    current_user: User = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """Get current student's profile."""
    profile = await get_student_profile(db, current_user.id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not created yet")
    return profile


@router.put("/profile/student", response_model=StudentProfileResponse)
async def update_student_profile(
    profile_data: StudentProfileUpdate,
    current_user: User = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """Create or update the student profile (partial update)."""
    try:
        update_data = profile_data.model_dump(exclude_unset=True)
        profile = await upsert_student_profile(current_user, update_data, db)
        logger.info(f"Student profile saved for user {current_user.email}")
        return profile
    except CollegeLockedError as e:
        await db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        await db.rollback()
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        await db.rollback()
        logger.error(f"Error saving profile: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update profile")


@router.post("/profile/student/files", response_model=StudentProfileResponse)
async def upload_student_files(
    resume: Optional[UploadFile] = File(None),
    avatar: Optional[UploadFile] = File(None),
    current_user: User = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """
    Upload resume (PDF/DOC/DOCX) and/or avatar image.

    Replaces the stored URLs. Maximum file size: 5MB each.
    """
    if resume is None and avatar is None:
        raise HTTPException(status_code=400, detail="No file provided")

    try:
        profile = await attach_student_files(current_user, db, resume=resume, avatar=avatar)
        logger.info(f"Files uploaded for user {current_user.email}")
        return profile
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        await db.rollback()
        logger.error(f"Error uploading files: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to upload files")


# Company endpoints
@router.get("/profile/company", response_model=CompanyProfileResponse)
async def get_own_company_profile(
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    """Get current company's profile."""
    profile = await get_company_profile(db, current_user.id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not created yet")
    return profile


@router.put("/profile/company", response_model=CompanyProfileResponse)
async def update_company_profile(
    profile_data: CompanyProfileUpdate,
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    """Create or update the company profile (partial update)."""
    try:
        update_data = profile_data.model_dump(exclude_unset=True)
        profile = await upsert_company_profile(current_user, update_data, db)
        logger.info(f"Company profile saved for user {current_user.email}")
        return profile
    except Exception as e:
        await db.rollback()
        logger.error(f"Error saving company profile: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update profile")


@router.post("/profile/company/logo", response_model=CompanyProfileResponse)
async def upload_company_logo(
    logo: UploadFile = File(...),
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    """Upload company logo (PNG/JPG/GIF/WEBP, max 5MB)."""
    try:
        profile = await attach_company_logo(current_user, db, logo)
        logger.info(f"Logo uploaded for company {current_user.email}")
        return profile
    except StorageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        await db.rollback()
        logger.error(f"Error uploading logo: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to upload logo")
