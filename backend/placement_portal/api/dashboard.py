"""
Dashboard endpoints: per-role summary counts for the landing pages.
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from placement_portal.database import get_db
from placement_portal.models.application import Application
from placement_portal.models.college import College
from placement_portal.models.job import Job, JobStatus
from placement_portal.models.job_college_target import JobCollegeTarget, TargetApprovalStatus
from placement_portal.models.student_profile import StudentProfile, ProfileStatus
from placement_portal.models.user import User
from placement_portal.api.auth import require_student, require_company, require_admin
from placement_portal.schemas.dashboard import StudentDashboard, CompanyDashboard, AdminDashboard
from placement_portal.schemas.interview import InterviewStats
from placement_portal.services.applications import (
    COMPANY_VISIBLE_STATUSES,
    application_listing_query,
    count_by_status,
    fetch_applications,
)
from placement_portal.services.interviews import interview_stats
from placement_portal.services.jobs import build_job_response
from placement_portal.services.profile import get_student_profile
from placement_portal.services.targeting import visible_jobs_query

logger = logging.getLogger(__name__)
router = APIRouter()

RECENT_LIMIT = 5


async def _count(db: AsyncSession, query) -> int:
    result = await db.execute(select(func.count()).select_from(query.subquery()))
    return result.scalar_one()


@router.get("/student", response_model=StudentDashboard)
async def student_dashboard(
    current_user: User = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    profile = await get_student_profile(db, current_user.id)

    applications_by_status = await count_by_status(db, [Application.student_id == current_user.id])
    recent_applications = await fetch_applications(
        db,
        application_listing_query()
        .where(Application.student_id == current_user.id)
        .limit(RECENT_LIMIT),
    )

    if not profile:
        return StudentDashboard(
            profile_complete=False,
            applications_by_status=applications_by_status,
            recent_applications=recent_applications,
        )

    available_jobs = 0
    recent_jobs = []
    if profile.college_id:
        query = visible_jobs_query(profile.college_id)
        available_jobs = await _count(db, query)
        result = await db.execute(query.limit(RECENT_LIMIT))
        recent_jobs = [
            await build_job_response(db, job, student=profile, with_targets=False)
            for job in result.scalars().all()
        ]

    return StudentDashboard(
        profile_complete=bool(profile.college_id and profile.roll_number and profile.cgpa is not None),
        profile_status=profile.status,
        cgpa=profile.cgpa,
        resume_uploaded=bool(profile.resume_url),
        available_jobs=available_jobs,
        recent_jobs=recent_jobs,
        applications_by_status=applications_by_status,
        recent_applications=recent_applications,
    )


@router.get("/company", response_model=CompanyDashboard)
async def company_dashboard(
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    jobs = select(Job.id).where(Job.company_id == current_user.id)
    total_jobs = await _count(db, jobs)
    published_jobs = await _count(db, jobs.where(Job.status == JobStatus.PUBLISHED.value))

    applications_by_status = await count_by_status(db, [
        Job.company_id == current_user.id,
        Application.status.in_(COMPANY_VISIBLE_STATUSES),
    ])

    return CompanyDashboard(
        total_jobs=total_jobs,
        published_jobs=published_jobs,
        applications_by_status=applications_by_status,
        interviews=InterviewStats(**await interview_stats(db, current_user)),
    )


@router.get("/admin", response_model=AdminDashboard)
async def admin_dashboard(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Placement cell summary; all zeros until the admin is assigned a college."""
    college_id = current_user.college_id
    if not college_id:
        return AdminDashboard()

    college = await db.get(College, college_id)

    targets = select(JobCollegeTarget.id).where(JobCollegeTarget.college_id == college_id)
    students = select(StudentProfile.id).where(StudentProfile.college_id == college_id)
    applications = (
        select(Application.id)
        .join(StudentProfile, StudentProfile.user_id == Application.student_id)
        .where(StudentProfile.college_id == college_id)
    )

    recent_applications = await fetch_applications(
        db,
        application_listing_query()
        .where(StudentProfile.college_id == college_id)
        .limit(RECENT_LIMIT),
    )

    return AdminDashboard(
        college_id=str(college_id),
        college_name=college.name if college else None,
        targeted_jobs=await _count(db, targets),
        applications=await _count(db, applications),
        students=await _count(db, students),
        pending_students=await _count(db, students.where(StudentProfile.status == ProfileStatus.PENDING.value)),
        pending_targets=await _count(
            db, targets.where(JobCollegeTarget.approval_status == TargetApprovalStatus.PENDING.value)
        ),
        recent_applications=recent_applications,
    )
