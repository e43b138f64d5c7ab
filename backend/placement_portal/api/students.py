"""
Student management endpoints for placement cells.
"""
import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from placement_portal.database import get_db
from placement_portal.models.student_profile import StudentProfile, ProfileStatus
from placement_portal.models.user import User
from placement_portal.api.auth import require_admin
from placement_portal.api.targets import admin_college_id
from placement_portal.schemas.profile import StudentDecision, StudentProfileResponse, StudentListResponse
from placement_portal.services.profile import decide_student_profile, ProfileAlreadyDecidedError

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/", response_model=StudentListResponse)
async def list_students(
    status: Optional[ProfileStatus] = Query(None, description="Filter by review status"),
    search: Optional[str] = Query(None, description="Match in name or roll number"),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Student profiles of the admin's college with counts per review status."""
    college_id = admin_college_id(current_user)

    query = select(StudentProfile).where(StudentProfile.college_id == college_id)
    if status:
        query = query.where(StudentProfile.status == status.value)
    if search:
        query = query.where(or_(
            StudentProfile.full_name.ilike(f"%{search}%"),
            StudentProfile.roll_number.ilike(f"%{search}%"),
        ))

    result = await db.execute(query.order_by(StudentProfile.created_at.desc()))
    students = result.scalars().all()

    counts_result = await db.execute(
        select(StudentProfile.status, func.count(StudentProfile.id))
        .where(StudentProfile.college_id == college_id)
        .group_by(StudentProfile.status)
    )
    counts = {s.value: 0 for s in ProfileStatus}
    counts.update({row[0]: row[1] for row in counts_result.all()})

    return StudentListResponse(
        students=[StudentProfileResponse.model_validate(s) for s in students],
        counts=counts,
    )


@router.post("/{user_id}/decision", response_model=StudentProfileResponse)
async def decide_student(
    user_id: UUID,
    decision: StudentDecision,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Approve or reject a pending student profile.

    Returns:
        200: Decision recorded
        404: No profile for this student in the admin's college
        409: Profile already approved or rejected
    """
    college_id = admin_college_id(current_user)

    try:
        profile = await decide_student_profile(db, user_id, college_id, decision.approved)
    except ProfileAlreadyDecidedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    logger.info(f"Admin {current_user.email} set student {user_id} profile to {profile.status}")

    return profile
