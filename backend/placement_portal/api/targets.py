"""
Job targeting endpoints for placement cells.
Admins decide which jobs targeted at their college are shown to students.
"""
import logging
from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from placement_portal.database import get_db
from placement_portal.models.job import Job
from placement_portal.models.job_college_target import JobCollegeTarget, TargetApprovalStatus
from placement_portal.models.user import User
from placement_portal.api.auth import require_admin
from placement_portal.schemas.job import TargetDecision, TargetResponse
from placement_portal.services.targeting import set_target_approval

logger = logging.getLogger(__name__)
router = APIRouter()


def admin_college_id(admin: User):
    """College of the admin, or 409 when the admin has not picked one yet."""
    if not admin.college_id:
        raise HTTPException(
            status_code=409,
            detail="Admin account is not assigned to a college"
        )
    return admin.college_id


def _target_response(target: JobCollegeTarget, job: Job) -> TargetResponse:
    return TargetResponse(
        id=target.id,
        job_id=target.job_id,
        college_id=target.college_id,
        approval_status=target.approval_status,
        job_title=job.title,
        company_name=job.company_name,
        min_cgpa=job.min_cgpa,
        created_at=target.created_at,
        updated_at=target.updated_at,
    )


@router.get("/", response_model=list[TargetResponse])
async def list_targets(
    approval_status: Optional[TargetApprovalStatus] = Query(None, description="Filter by decision"),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Jobs targeted at the admin's college, newest first."""
    college_id = admin_college_id(current_user)

    query = (
        select(JobCollegeTarget, Job)
        .join(Job, Job.id == JobCollegeTarget.job_id)
        .where(JobCollegeTarget.college_id == college_id)
    )
    if approval_status:
        query = query.where(JobCollegeTarget.approval_status == approval_status.value)

    result = await db.execute(query.order_by(JobCollegeTarget.created_at.desc()))
    return [_target_response(target, job) for target, job in result.all()]


@router.post("/{job_id}/decision", response_model=TargetResponse)
async def decide_target(
    job_id: UUID,
    decision: TargetDecision,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Approve or reject a job for the admin's college.

    Only approved jobs appear on the job board of the college's students.
    """
    college_id = admin_college_id(current_user)

    try:
        target = await set_target_approval(db, job_id, college_id, decision.approval_status)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    job = await db.get(Job, job_id)

    logger.info(f"Admin {current_user.email} set job {job_id} to {decision.approval_status.value} for college {college_id}")

    return _target_response(target, job)
