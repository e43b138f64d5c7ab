"""
Application submission and role-scoped listings.

Status changes after submission live in state_machine.py.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from placement_portal.models.application import Application, ApplicationStatus
from placement_portal.models.job import Job
from placement_portal.models.student_profile import StudentProfile
from placement_portal.models.user import User
from placement_portal.schemas.application import ApplicationResponse
from placement_portal.services.profile import get_student_profile
from placement_portal.services.targeting import is_job_visible_to_college

logger = logging.getLogger(__name__)

# Companies only ever see applications the placement cell has let through
COMPANY_VISIBLE_STATUSES = [
    ApplicationStatus.CELL_APPROVED.value,
    ApplicationStatus.COMPANY_APPROVED.value,
    ApplicationStatus.COMPANY_REJECTED.value,
]


class ApplicationError(Exception):
    """Raised when a student cannot apply to a job"""

    def __init__(self, message: str, status_code: int = 409):
        super().__init__(message)
        self.status_code = status_code


def build_application_response(
    application: Application,
    job: Optional[Job],
    student: Optional[StudentProfile],
) -> ApplicationResponse:
    return ApplicationResponse(
        id=application.id,
        student_id=application.student_id,
        job_id=application.job_id,
        status=application.status,
        placement_cell_notes=application.placement_cell_notes,
        company_notes=application.company_notes,
        submitted_at=application.submitted_at,
        updated_at=application.updated_at,
        job_title=job.title if job else None,
        company_name=job.company_name if job else None,
        job_location=job.location if job else None,
        job_type=job.job_type if job else None,
        student_name=student.full_name if student else None,
        roll_number=student.roll_number if student else None,
        branch=student.branch if student else None,
        cgpa=student.cgpa if student else None,
        resume_url=student.resume_url if student else None,
    )


def application_listing_query():
    """SELECT of (Application, Job, StudentProfile) rows, newest first."""
    return (
        select(Application, Job, StudentProfile)
        .join(Job, Job.id == Application.job_id)
        .outerjoin(StudentProfile, StudentProfile.user_id == Application.student_id)
        .order_by(Application.submitted_at.desc())
    )


async def fetch_applications(db: AsyncSession, query) -> list[ApplicationResponse]:
    result = await db.execute(query)
    return [build_application_response(app, job, student) for app, job, student in result.all()]


async def apply_to_job(db: AsyncSession, student: User, job_id) -> Application:
    """
    Submit an application for the student.

    Raises:
        ApplicationError: 400 when the profile or resume is missing, 404 when
            the job is not visible to the student's college, 409 when the
            deadline passed or the student already applied
    """
    profile = await get_student_profile(db, student.id)
    if not profile:
        raise ApplicationError("Complete your profile before applying", status_code=400)
    if not profile.resume_url:
        raise ApplicationError("Upload your resume before applying", status_code=400)

    job = await db.get(Job, job_id)
    if not job or not await is_job_visible_to_college(db, job, profile.college_id):
        raise ApplicationError(f"Job {job_id} not found", status_code=404)

    if job.is_deadline_passed():
        raise ApplicationError(f"Application deadline passed on {job.application_deadline}")

    existing = await db.execute(
        select(Application.id).where(
            Application.student_id == student.id,
            Application.job_id == job.id,
        )
    )
    if existing.first() is not None:
        raise ApplicationError("Already applied to this job")

    now = datetime.utcnow()
    application = Application(
        student_id=student.id,
        job_id=job.id,
        status=ApplicationStatus.PENDING.value,
        submitted_at=now,
        updated_at=now,
    )
    db.add(application)
    await db.commit()
    await db.refresh(application)

    logger.info(f"Student {student.email} applied to job {job.id} ({job.title})")

    return application


async def count_by_status(db: AsyncSession, query_filters: Iterable) -> dict[str, int]:
    """Application counts grouped by status for the given WHERE clauses."""
    query = select(Application.status, func.count(Application.id)).join(Job, Job.id == Application.job_id)
    result = await db.execute(query.where(*query_filters).group_by(Application.status))
    return {status: count for status, count in result.all()}
