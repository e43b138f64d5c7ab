"""Job posting business logic."""
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from placement_portal.models.application import Application
from placement_portal.models.interview import Interview
from placement_portal.models.job import Job
from placement_portal.models.job_college_target import JobCollegeTarget
from placement_portal.models.student_profile import StudentProfile
from placement_portal.models.user import User
from placement_portal.schemas.job import JobResponse
from placement_portal.services.profile import get_company_profile
from placement_portal.services.targeting import eligibility, get_target_college_ids, sync_job_targets

logger = logging.getLogger(__name__)


class JobHasApplicationsError(Exception):
    """Raised when deleting a job that students have applied to"""

    def __init__(self, count: int):
        super().__init__(f"Job has {count} applications")
        self.count = count


async def build_job_response(
    db: AsyncSession,
    job: Job,
    student: Optional[StudentProfile] = None,
    with_targets: bool = True,
    application_count: Optional[int] = None,
) -> JobResponse:
    """Build JobResponse from a Job row, adding per-viewer details."""
    response = JobResponse.model_validate(job)
    response.deadline_passed = job.is_deadline_passed()
    response.application_count = application_count

    if with_targets:
        response.college_ids = await get_target_college_ids(db, job.id)

    if student is not None:
        response.eligibility = eligibility(student.cgpa, job.min_cgpa)
        result = await db.execute(
            select(Application.status).where(
                Application.student_id == student.user_id,
                Application.job_id == job.id,
            )
        )
        response.application_status = result.scalar_one_or_none()

    return response


async def get_job(db: AsyncSession, job_id) -> Job:
    result = await db.execute(select(Job).where(Job.id == job_id))
    job = result.scalar_one_or_none()
    if not job:
        raise ValueError(f"Job {job_id} not found")
    return job


async def create_job(db: AsyncSession, company: User, job_data: dict, college_ids: list) -> Job:
    """
    Create a job for the company and target it at the given colleges.

    Raises:
        ValueError: If a college id is unknown
    """
    profile = await get_company_profile(db, company.id)

    job = Job(
        company_id=company.id,
        company_name=profile.company_name if profile else None,
        **job_data,
    )
    db.add(job)
    await db.flush()

    # Validates colleges and commits the job together with its targets
    await sync_job_targets(db, job.id, college_ids)
    await db.refresh(job)

    logger.info(f"Created job {job.id}: {job.title} at {job.company_name} targeting {len(college_ids)} colleges")
    return job


async def update_job(db: AsyncSession, job: Job, update_data: dict, college_ids: Optional[list] = None) -> Job:
    """
    Apply a partial update; when college_ids is given, re-sync targets.

    Raises:
        ValueError: If a college id is unknown
    """
    for field, value in update_data.items():
        setattr(job, field, value)
    job.updated_at = datetime.utcnow()

    if college_ids is not None:
        await sync_job_targets(db, job.id, college_ids)
    else:
        await db.commit()

    await db.refresh(job)
    logger.info(f"Updated job {job.id} fields={sorted(update_data)} retargeted={college_ids is not None}")
    return job


async def count_applications(db: AsyncSession, job_id) -> int:
    result = await db.execute(
        select(func.count(Application.id)).where(Application.job_id == job_id)
    )
    return result.scalar_one()


async def delete_job(db: AsyncSession, job: Job, force: bool = False) -> None:
    """
    Delete a job and its targets.

    Raises:
        JobHasApplicationsError: If applications exist and force is False
    """
    count = await count_applications(db, job.id)
    if count and not force:
        raise JobHasApplicationsError(count)

    if count:
        application_ids = select(Application.id).where(Application.job_id == job.id)
        await db.execute(delete(Interview).where(Interview.application_id.in_(application_ids)))
        await db.execute(delete(Application).where(Application.job_id == job.id))
        logger.warning(f"Force deleting job {job.id} and {count} applications")

    await db.execute(delete(JobCollegeTarget).where(JobCollegeTarget.job_id == job.id))
    await db.delete(job)
    await db.commit()

    logger.info(f"Deleted job {job.id}")
