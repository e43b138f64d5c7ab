"""
College endpoints.
"""
import logging
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from placement_portal.database import get_db
from placement_portal.models.college import College
from placement_portal.models.user import User
from placement_portal.api.auth import get_current_user, require_admin, build_auth_response
from placement_portal.schemas.auth import AuthResponse
from placement_portal.schemas.college import CollegeResponse

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=List[CollegeResponse])
async def list_colleges(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    result = await db.execute(select(College).order_by(College.name.asc()))
    return result.scalars().all()


@router.get("/{college_id}", response_model=CollegeResponse)
async def get_college(
    college_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    college = await db.get(College, college_id)
    if not college:
        raise HTTPException(status_code=404, detail="College not found")
    return college


@router.post("/{college_id}/assign", response_model=AuthResponse)
async def assign_college(
    college_id: UUID,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Attach the signed-in admin to the placement cell of a college.

    Only an admin without a college may self-assign; re-assigning to the
    same college is a no-op.
    """
    college = await db.get(College, college_id)
    if not college:
        raise HTTPException(status_code=404, detail="College not found")

    if current_user.college_id is not None and current_user.college_id != college.id:
        logger.warning(
            f"Admin {current_user.email} tried to move from college {current_user.college_id} to {college.id}"
        )
        raise HTTPException(status_code=409, detail="Admin is already assigned to another college")

    current_user.college_id = college.id
    await db.commit()
    await db.refresh(current_user)

    logger.info(f"Admin {current_user.email} assigned to college {college.name}")

    return build_auth_response(current_user, None)
