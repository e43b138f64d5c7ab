"""
Applications API endpoints.

Students apply; the placement cell of the student's college decides first,
then the hiring company. Every status change goes through the state machine.
"""
import logging
from typing import Optional, List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from placement_portal.database import get_db
from placement_portal.models.application import Application, ApplicationStatus
from placement_portal.models.job import Job
from placement_portal.models.student_profile import StudentProfile
from placement_portal.models.user import User, UserRole
from placement_portal.api.auth import require_student, require_company, require_admin
from placement_portal.api.targets import admin_college_id
from placement_portal.schemas.application import ApplicationCreate, ApplicationDecision, ApplicationResponse
from placement_portal.services.applications import (
    ApplicationError,
    COMPANY_VISIBLE_STATUSES,
    apply_to_job,
    application_listing_query,
    fetch_applications,
)
from placement_portal.services.state_machine import (
    transition_application,
    InvalidTransitionError,
    ActorNotAllowedError,
    StaleStatusError,
)

logger = logging.getLogger(__name__)
router = APIRouter()


async def _single_application(db: AsyncSession, application_id) -> ApplicationResponse:
    rows = await fetch_applications(db, application_listing_query().where(Application.id == application_id))
    return rows[0]


async def _decide(
    db: AsyncSession,
    application_id: UUID,
    decision: ApplicationDecision,
    actor: UserRole,
    approve_status: ApplicationStatus,
    reject_status: ApplicationStatus,
) -> ApplicationResponse:
    to_status = approve_status if decision.decision == "approve" else reject_status
    try:
        await transition_application(
            db,
            application_id,
            to_status,
            actor,
            notes=decision.notes,
            expected_status=decision.expected_status,
        )
    except ActorNotAllowedError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except (InvalidTransitionError, StaleStatusError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return await _single_application(db, application_id)


@router.post("/", response_model=ApplicationResponse, status_code=201)
async def create_application(
    payload: ApplicationCreate,
    current_user: User = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """
    Apply to a job visible to the student's college.

    Requires an uploaded resume. A student can apply to a job only once.
    """
    try:
        application = await apply_to_job(db, current_user, payload.job_id)
    except ApplicationError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

    return await _single_application(db, application.id)


@router.get("/mine", response_model=List[ApplicationResponse])
async def list_my_applications(
    status: Optional[ApplicationStatus] = Query(None, description="Filter by status"),
    current_user: User = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """The student's own applications, newest first."""
    query = application_listing_query().where(Application.student_id == current_user.id)
    if status:
        query = query.where(Application.status == status.value)
    return await fetch_applications(db, query)


@router.get("/college", response_model=List[ApplicationResponse])
async def list_college_applications(
    status: Optional[ApplicationStatus] = Query(None, description="Filter by status"),
    job_id: Optional[UUID] = Query(None, description="Filter by job"),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Applications from students of the admin's college."""
    college_id = admin_college_id(current_user)

    query = application_listing_query().where(StudentProfile.college_id == college_id)
    if status:
        query = query.where(Application.status == status.value)
    if job_id:
        query = query.where(Application.job_id == job_id)
    return await fetch_applications(db, query)


@router.get("/company", response_model=List[ApplicationResponse])
async def list_company_applications(
    status: Optional[ApplicationStatus] = Query(None, description="Filter by status"),
    job_id: Optional[UUID] = Query(None, description="Filter by job"),
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    """
    Applications to the company's jobs that passed the placement cell.

    Pending and cell-rejected applications are never shown to companies.
    """
    if status and status.value not in COMPANY_VISIBLE_STATUSES:
        return []

    query = application_listing_query().where(
        Job.company_id == current_user.id,
        Application.status.in_(COMPANY_VISIBLE_STATUSES),
    )
    if status:
        query = query.where(Application.status == status.value)
    if job_id:
        query = query.where(Application.job_id == job_id)
    return await fetch_applications(db, query)


@router.post("/{application_id}/cell-decision", response_model=ApplicationResponse)
async def cell_decision(
    application_id: UUID,
    decision: ApplicationDecision,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Placement cell approves or rejects a pending application from its college."""
    college_id = admin_college_id(current_user)

    result = await db.execute(
        select(Application.id)
        .join(StudentProfile, StudentProfile.user_id == Application.student_id)
        .where(Application.id == application_id, StudentProfile.college_id == college_id)
    )
    if result.first() is None:
        raise HTTPException(status_code=404, detail="Application not found")

    response = await _decide(
        db, application_id, decision, UserRole.ADMIN,
        ApplicationStatus.CELL_APPROVED, ApplicationStatus.CELL_REJECTED,
    )
    logger.info(f"Admin {current_user.email} set application {application_id} to {response.status}")
    return response


@router.post("/{application_id}/company-decision", response_model=ApplicationResponse)
async def company_decision(
    application_id: UUID,
    decision: ApplicationDecision,
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    """Company approves or rejects an application the placement cell let through."""
    result = await db.execute(
        select(Application.id)
        .join(Job, Job.id == Application.job_id)
        .where(Application.id == application_id, Job.company_id == current_user.id)
    )
    if result.first() is None:
        raise HTTPException(status_code=404, detail="Application not found")

    response = await _decide(
        db, application_id, decision, UserRole.COMPANY,
        ApplicationStatus.COMPANY_APPROVED, ApplicationStatus.COMPANY_REJECTED,
    )
    logger.info(f"Company {current_user.email} set application {application_id} to {response.status}")
    return response
