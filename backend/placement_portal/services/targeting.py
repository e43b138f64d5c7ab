"""
Job-college targeting and eligibility.

A job is shown to a college's students only when a target row for that
college exists with approval_status = approved and the job is published.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_, or_

from placement_portal.models.college import College
from placement_portal.models.job import Job, JobStatus
from placement_portal.models.job_college_target import JobCollegeTarget, TargetApprovalStatus

logger = logging.getLogger(__name__)

ELIGIBLE = "Eligible"
NOT_ELIGIBLE = "Not Eligible"


def eligibility(cgpa: Optional[float], min_cgpa: Optional[float]) -> Optional[str]:
    """
    Informational CGPA check between a student and a job.

    Inclusive at the boundary. Returns None when the student has no CGPA on
    record, so callers can hide the badge.
    """
    if cgpa is None:
        return None
    # Compare at two decimals so 7.5 stored as 7.4999... still passes
    if round(cgpa, 2) >= round(min_cgpa or 0.0, 2):
        return ELIGIBLE
    return NOT_ELIGIBLE


async def get_target_college_ids(db: AsyncSession, job_id) -> list:
    result = await db.execute(
        select(JobCollegeTarget.college_id)
        .where(JobCollegeTarget.job_id == job_id)
        .order_by(JobCollegeTarget.created_at.asc())
    )
    return list(result.scalars().all())


async def sync_job_targets(db: AsyncSession, job_id, college_ids: Iterable) -> list[JobCollegeTarget]:
    """
    Make the job's target rows match college_ids.

    New colleges get a pending row, colleges no longer listed are removed,
    and colleges kept from before retain their approval status. Everything
    is committed together.

    Raises:
        ValueError: If any college id does not exist
    """
    desired = {cid for cid in college_ids}

    if desired:
        known = await db.execute(select(College.id).where(College.id.in_(desired)))
        missing = desired - set(known.scalars().all())
        if missing:
            raise ValueError(f"Unknown college ids: {', '.join(sorted(str(m) for m in missing))}")

    result = await db.execute(
        select(JobCollegeTarget).where(JobCollegeTarget.job_id == job_id)
    )
    existing = {target.college_id: target for target in result.scalars().all()}

    removed = [target for cid, target in existing.items() if cid not in desired]
    added = [cid for cid in desired if cid not in existing]

    for target in removed:
        await db.delete(target)

    for cid in added:
        db.add(JobCollegeTarget(
            job_id=job_id,
            college_id=cid,
            approval_status=TargetApprovalStatus.PENDING.value,
        ))

    await db.commit()

    logger.info(
        f"Synced targets for job {job_id}: +{len(added)} -{len(removed)} "
        f"kept {len(existing) - len(removed)}"
    )

    result = await db.execute(
        select(JobCollegeTarget).where(JobCollegeTarget.job_id == job_id)
    )
    return list(result.scalars().all())


async def set_target_approval(
    db: AsyncSession,
    job_id,
    college_id,
    approval_status: TargetApprovalStatus,
) -> JobCollegeTarget:
    """
    Record a placement cell decision for one (job, college) pair.

    Raises:
        ValueError: If the job is not targeted at the college
    """
    result = await db.execute(
        select(JobCollegeTarget).where(
            JobCollegeTarget.job_id == job_id,
            JobCollegeTarget.college_id == college_id,
        )
    )
    target = result.scalar_one_or_none()

    if not target:
        raise ValueError(f"Job {job_id} is not targeted at college {college_id}")

    old_status = target.approval_status
    target.approval_status = approval_status.value
    target.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(target)

    logger.info(f"Target job={job_id} college={college_id}: {old_status} → {approval_status.value}")

    return target


def visible_jobs_query(
    college_id,
    search: Optional[str] = None,
    job_type: Optional[str] = None,
    location: Optional[str] = None,
    min_cgpa: Optional[float] = None,
):
    """Build the SELECT for published jobs approved for a college."""
    query = (
        select(Job)
        .join(JobCollegeTarget, JobCollegeTarget.job_id == Job.id)
        .where(
            JobCollegeTarget.college_id == college_id,
            JobCollegeTarget.approval_status == TargetApprovalStatus.APPROVED.value,
            Job.status == JobStatus.PUBLISHED.value,
        )
    )

    filters = []
    if search:
        filters.append(or_(
            Job.title.ilike(f"%{search}%"),
            Job.description.ilike(f"%{search}%"),
        ))
    if job_type:
        filters.append(Job.job_type == job_type)
    if location:
        filters.append(Job.location.ilike(f"%{location}%"))
    if min_cgpa is not None:
        # Jobs the given CGPA clears
        filters.append(Job.min_cgpa <= min_cgpa)

    if filters:
        query = query.where(and_(*filters))

    return query.order_by(Job.created_at.desc())


async def is_job_visible_to_college(db: AsyncSession, job: Job, college_id) -> bool:
    if college_id is None or job.status != JobStatus.PUBLISHED.value:
        return False
    result = await db.execute(
        select(JobCollegeTarget.id).where(
            JobCollegeTarget.job_id == job.id,
            JobCollegeTarget.college_id == college_id,
            JobCollegeTarget.approval_status == TargetApprovalStatus.APPROVED.value,
        )
    )
    return result.first() is not None
