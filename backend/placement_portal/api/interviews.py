"""
Interview endpoints.

Companies schedule one interview per company-approved application and record
the outcome once the interview has taken place. Students see their own.
"""
import logging
from typing import Optional, List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from placement_portal.database import get_db
from placement_portal.models.application import Application
from placement_portal.models.interview import Interview
from placement_portal.models.job import Job
from placement_portal.models.student_profile import StudentProfile
from placement_portal.models.user import User
from placement_portal.api.auth import require_student, require_company
from placement_portal.schemas.application import ApplicationResponse
from placement_portal.schemas.interview import (
    InterviewCreate,
    InterviewResultUpdate,
    InterviewResponse,
    InterviewStats,
)
from placement_portal.services.interviews import (
    InterviewError,
    schedule_interview,
    record_result,
    pending_applications,
    interview_stats,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _interview_query():
    return (
        select(Interview, Job, StudentProfile)
        .join(Application, Application.id == Interview.application_id)
        .join(Job, Job.id == Application.job_id)
        .outerjoin(StudentProfile, StudentProfile.user_id == Application.student_id)
        .order_by(Interview.interview_date.asc())
    )


def _interview_response(interview: Interview, job: Optional[Job], student: Optional[StudentProfile]) -> InterviewResponse:
    response = InterviewResponse.model_validate(interview)
    response.job_title = job.title if job else None
    response.company_name = job.company_name if job else None
    response.student_name = student.full_name if student else None
    response.can_record_result = interview.result is None and interview.has_taken_place()
    return response


async def _fetch_interviews(db: AsyncSession, query) -> list[InterviewResponse]:
    result = await db.execute(query)
    return [_interview_response(interview, job, student) for interview, job, student in result.all()]


async def _single_interview(db: AsyncSession, interview_id) -> InterviewResponse:
    rows = await _fetch_interviews(db, _interview_query().where(Interview.id == interview_id))
    return rows[0]


@router.post("/", response_model=InterviewResponse, status_code=201)
async def create_interview(
    payload: InterviewCreate,
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    """
    Schedule an interview for a company-approved application.

    Returns:
        201: Interview scheduled
        404: Application not found among the company's jobs
        409: Application not company_approved, or already has an interview
    """
    try:
        interview = await schedule_interview(
            db,
            current_user,
            payload.application_id,
            payload.interview_date,
            payload.interview_time,
            interview_type=payload.interview_type,
            location=payload.location,
            meeting_link=payload.meeting_link,
            notes=payload.notes,
        )
    except InterviewError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return await _single_interview(db, interview.id)


@router.get("/company", response_model=List[InterviewResponse])
async def list_company_interviews(
    awaiting_result: bool = Query(False, description="Only interviews without a recorded result"),
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    """Interviews for the company's jobs, soonest first."""
    query = _interview_query().where(Job.company_id == current_user.id)
    if awaiting_result:
        query = query.where(Interview.result.is_(None))
    return await _fetch_interviews(db, query)


@router.get("/pending", response_model=List[ApplicationResponse])
async def list_pending_applications(
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    """Company-approved applications that still need an interview slot."""
    return await pending_applications(db, current_user)


@router.get("/stats", response_model=InterviewStats)
async def get_interview_stats(
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    return InterviewStats(**await interview_stats(db, current_user))


@router.get("/mine", response_model=List[InterviewResponse])
async def list_my_interviews(
    current_user: User = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """The student's interviews, soonest first."""
    query = _interview_query().where(Application.student_id == current_user.id)
    rows = await _fetch_interviews(db, query)
    # Results are recorded by the company only
    for row in rows:
        row.can_record_result = False
    return rows


@router.post("/{interview_id}/result", response_model=InterviewResponse)
async def set_interview_result(
    interview_id: UUID,
    payload: InterviewResultUpdate,
    current_user: User = Depends(require_company),
    db: AsyncSession = Depends(get_db)
):
    """
    Record selected / not_selected for an interview that has taken place.

    Re-sending the recorded result is accepted unchanged; a different result
    is refused with 409.
    """
    try:
        await record_result(db, current_user, interview_id, payload.result)
    except InterviewError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return await _single_interview(db, interview_id)
