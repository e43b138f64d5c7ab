"""
Jobs API endpoints.
Handles job posting CRUD and the student job board.
"""
import logging
from typing import Optional, List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from placement_portal.database import get_db
from placement_portal.models.application import Application
from placement_portal.models.job import Job, JobStatus, JobType
from placement_portal.models.user import User
from placement_portal.api.auth import get_current_user, require_student, require_company, require_admin
from placement_portal.schemas.job import JobCreate, JobUpdate, JobResponse
from placement_portal.services.jobs import (
    build_job_response,
    get_job,
    create_job as create_job_record,
    update_job as update_job_record,
    delete_job as delete_job_record,
    JobHasApplicationsError,
)
from placement_portal.services.profile import get_student_profile
from placement_portal.services.targeting import visible_jobs_query, is_job_visible_to_college, ELIGIBLE

# Configure logger
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=JobResponse, status_code=201)
async def create_job(
    job: JobCreate,
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a new job posting.

    One pending target row is created per selected college; the job shows
    up for a college's students once its placement cell approves it.
    """
    job_data = job.model_dump(exclude={"college_ids"})
    job_data["job_type"] = job.job_type.value
    job_data["status"] = job.status.value

    try:
        new_job = await create_job_record(db, current_user, job_data, job.college_ids)
    except ValueError as e:
        await db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    return await build_job_response(db, new_job, application_count=0)


@router.get("/mine", response_model=List[JobResponse])
async def list_company_jobs(
    status: Optional[JobStatus] = Query(None, description="Filter by job status"),
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    """List the company's own jobs with application counts, newest first."""
    counts = (
        select(Application.job_id, func.count(Application.id).label("applications"))
        .group_by(Application.job_id)
        .subquery()
    )
    query = (
        select(Job, counts.c.applications)
        .outerjoin(counts, counts.c.job_id == Job.id)
        .where(Job.company_id == current_user.id)
    )
    if status:
        query = query.where(Job.status == status.value)

    result = await db.execute(query.order_by(Job.created_at.desc()))

    return [
        await build_job_response(db, job, application_count=applications or 0)
        for job, applications in result.all()
    ]


@router.get("/available", response_model=List[JobResponse])
async def list_available_jobs(
    search: Optional[str] = Query(None, description="Match in title or description"),
    job_type: Optional[JobType] = Query(None, description="Filter by job type"),
    location: Optional[str] = Query(None, description="Filter by location (partial match)"),
    min_cgpa: Optional[float] = Query(None, ge=0, le=10, description="Only jobs whose minimum CGPA is at most this"),
    eligible_only: bool = Query(False, description="Hide jobs the student's CGPA does not clear"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """
    Job board for the signed-in student.

    Only published jobs approved for the student's college are listed. Each
    job carries an eligibility badge; it is informational and does not block
    applying.
    """
    profile = await get_student_profile(db, current_user.id)
    if not profile or not profile.college_id:
        return []

    query = visible_jobs_query(
        profile.college_id,
        search=search,
        job_type=job_type.value if job_type else None,
        location=location,
        min_cgpa=min_cgpa,
    )
    if eligible_only and profile.cgpa is not None:
        query = query.where(Job.min_cgpa <= profile.cgpa)

    result = await db.execute(query.offset(skip).limit(limit))
    jobs = result.scalars().all()

    responses = [
        await build_job_response(db, job, student=profile, with_targets=False)
        for job in jobs
    ]
    if eligible_only:
        responses = [job for job in responses if job.eligibility == ELIGIBLE]

    logger.info(f"Listed {len(responses)} jobs for student {current_user.email} (search={search}, job_type={job_type})")

    return responses


@router.get("/all", response_model=List[JobResponse])
async def list_all_jobs(
    status: Optional[JobStatus] = Query(None, description="Filter by job status"),
    company: Optional[str] = Query(None, description="Filter by company name (partial match)"),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Admin job management listing, newest first."""
    query = select(Job)
    if status:
        query = query.where(Job.status == status.value)
    if company:
        query = query.where(Job.company_name.ilike(f"%{company}%"))

    result = await db.execute(query.order_by(Job.created_at.desc()).offset(skip).limit(limit))
    return [await build_job_response(db, job) for job in result.scalars().all()]


@router.get("/{job_id}", response_model=JobResponse)
async def get_job_details(
    job_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Get a specific job posting by ID.

    Students only see jobs visible to their college; companies only their own.
    """
    try:
        job = await get_job(db, job_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Job not found")

    if current_user.is_company():
        if job.company_id != current_user.id:
            raise HTTPException(status_code=404, detail="Job not found")
        return await build_job_response(db, job)

    if current_user.is_student():
        profile = await get_student_profile(db, current_user.id)
        visible = profile is not None and await is_job_visible_to_college(db, job, profile.college_id)
        if not visible:
            # Already-applied students keep access even if the job closes
            applied = profile is not None and (await db.execute(
                select(Application.id).where(
                    Application.student_id == current_user.id,
                    Application.job_id == job.id,
                )
            )).first() is not None
            if not applied:
                raise HTTPException(status_code=404, detail="Job not found")
        return await build_job_response(db, job, student=profile, with_targets=False)

    return await build_job_response(db, job)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: UUID,
    job_update: JobUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a job posting (partial). Allowed for the owning company and admins.

    When college_ids is sent, targets are re-synced: new colleges start as
    pending, removed colleges are dropped, kept colleges keep their decision.
    """
    try:
        job = await get_job(db, job_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Job not found")

    if not (current_user.is_admin() or job.company_id == current_user.id):
        raise HTTPException(status_code=404, detail="Job not found")

    update_data = job_update.model_dump(exclude_unset=True, exclude={"college_ids"})
    for field in ("job_type", "status"):
        if update_data.get(field) is not None:
            update_data[field] = update_data[field].value

    college_ids = job_update.college_ids if "college_ids" in job_update.model_fields_set else None

    try:
        job = await update_job_record(db, job, update_data, college_ids)
    except ValueError as e:
        await db.rollback()
        raise HTTPException(status_code=400, detail=str(e))

    return await build_job_response(db, job)


@router.delete("/{job_id}", status_code=204)
async def delete_job(
    job_id: UUID,
    force: bool = Query(False, description="Admins only: also delete applications and interviews"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a job posting.

    By default, refuses if students have applied (safe mode). Admins may pass
    ?force=true to cascade delete applications and interviews (removes
    placement history). Companies should close jobs instead.
    """
    try:
        job = await get_job(db, job_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Job not found")

    if not (current_user.is_admin() or job.company_id == current_user.id):
        raise HTTPException(status_code=404, detail="Job not found")

    try:
        await delete_job_record(db, job, force=force and current_user.is_admin())
    except JobHasApplicationsError as e:
        raise HTTPException(
            status_code=409,
            detail=f"Cannot delete job with {e.count} applications. Close it instead"
                   + (" or use ?force=true (not recommended)." if current_user.is_admin() else ".")
        )

    return None
