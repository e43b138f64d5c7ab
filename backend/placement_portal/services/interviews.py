"""
Interview scheduling for company-approved applications.
"""
import logging
from datetime import datetime, date, time, timezone
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from placement_portal.models.application import Application, ApplicationStatus
from placement_portal.models.interview import Interview, InterviewType, InterviewResult
from placement_portal.models.job import Job
from placement_portal.models.user import User
from placement_portal.schemas.application import ApplicationResponse
from placement_portal.services.applications import application_listing_query, fetch_applications

logger = logging.getLogger(__name__)


class InterviewError(Exception):
    """Raised when an interview action conflicts with the application or interview state"""
    pass


def combine_naive_utc(interview_date: date, interview_time: time) -> datetime:
    # Offset-aware times are shifted to UTC; naive ones are taken as UTC
    scheduled = datetime.combine(interview_date, interview_time)
    if scheduled.tzinfo is not None:
        scheduled = scheduled.astimezone(timezone.utc).replace(tzinfo=None)
    return scheduled


async def get_company_application(db: AsyncSession, company: User, application_id) -> Application:
    """
    Fetch an application for one of the company's jobs.

    Raises:
        ValueError: If not found or the job belongs to another company
    """
    result = await db.execute(
        select(Application)
        .join(Job, Job.id == Application.job_id)
        .where(Application.id == application_id, Job.company_id == company.id)
    )
    application = result.scalar_one_or_none()
    if not application:
        raise ValueError(f"Application {application_id} not found")
    return application


async def schedule_interview(
    db: AsyncSession,
    company: User,
    application_id,
    interview_date: date,
    interview_time: time,
    interview_type: InterviewType = InterviewType.TECHNICAL,
    location: Optional[str] = None,
    meeting_link: Optional[str] = None,
    notes: Optional[str] = None,
) -> Interview:
    """
    Schedule the interview for a company-approved application.

    Raises:
        ValueError: If the application is not one of the company's
        InterviewError: If the application is not company_approved or
            already has an interview
    """
    application = await get_company_application(db, company, application_id)

    if application.status != ApplicationStatus.COMPANY_APPROVED.value:
        raise InterviewError(
            f"Application must be in {ApplicationStatus.COMPANY_APPROVED.value} status, "
            f"currently {application.status}"
        )

    existing = await db.execute(
        select(Interview.id).where(Interview.application_id == application.id)
    )
    if existing.first() is not None:
        raise InterviewError(f"Interview already scheduled for application {application_id}")

    interview = Interview(
        application_id=application.id,
        interview_date=combine_naive_utc(interview_date, interview_time),
        interview_type=interview_type.value,
        location=location or None,
        meeting_link=meeting_link or None,
        notes=notes or None,
    )
    db.add(interview)
    await db.commit()
    await db.refresh(interview)

    logger.info(f"Scheduled {interview.interview_type} interview {interview.id} for application {application_id} at {interview.interview_date}")

    return interview


async def get_company_interview(db: AsyncSession, company: User, interview_id) -> Interview:
    result = await db.execute(
        select(Interview)
        .join(Application, Application.id == Interview.application_id)
        .join(Job, Job.id == Application.job_id)
        .where(Interview.id == interview_id, Job.company_id == company.id)
    )
    interview = result.scalar_one_or_none()
    if not interview:
        raise ValueError(f"Interview {interview_id} not found")
    return interview


async def record_result(
    db: AsyncSession,
    company: User,
    interview_id,
    outcome: InterviewResult,
) -> Interview:
    """
    Record the outcome of an interview that has already taken place.

    Submitting the same outcome twice is a no-op.

    Raises:
        ValueError: If the interview is not one of the company's
        InterviewError: If the interview is still in the future or a
            different outcome was already recorded
    """
    interview = await get_company_interview(db, company, interview_id)

    if not interview.has_taken_place():
        raise InterviewError(
            f"Interview {interview_id} is scheduled for {interview.interview_date}; "
            f"results can be recorded after it takes place"
        )

    if interview.result == outcome.value:
        return interview

    if interview.result is not None:
        raise InterviewError(f"Interview {interview_id} already has result {interview.result}")

    interview.result = outcome.value
    interview.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(interview)

    logger.info(f"Interview {interview_id} result recorded: {outcome.value}")

    return interview


def _company_approved_without_interview(company: User):
    return (
        select(Application)
        .join(Job, Job.id == Application.job_id)
        .outerjoin(Interview, Interview.application_id == Application.id)
        .where(
            Job.company_id == company.id,
            Application.status == ApplicationStatus.COMPANY_APPROVED.value,
            Interview.id.is_(None),
        )
    )


async def pending_applications(db: AsyncSession, company: User) -> list[ApplicationResponse]:
    """Company-approved applications still waiting for an interview slot."""
    query = (
        application_listing_query()
        .outerjoin(Interview, Interview.application_id == Application.id)
        .where(
            Job.company_id == company.id,
            Application.status == ApplicationStatus.COMPANY_APPROVED.value,
            Interview.id.is_(None),
        )
    )
    return await fetch_applications(db, query)


async def interview_stats(db: AsyncSession, company: User) -> dict:
    """Counts for the company interview board."""
    waiting = await db.execute(
        select(func.count()).select_from(_company_approved_without_interview(company).subquery())
    )
    approved_without_interview = waiting.scalar_one()

    result = await db.execute(
        select(Interview.result, func.count(Interview.id))
        .join(Application, Application.id == Interview.application_id)
        .join(Job, Job.id == Application.job_id)
        .where(Job.company_id == company.id)
        .group_by(Interview.result)
    )
    by_result = {row[0]: row[1] for row in result.all()}
    scheduled = sum(by_result.values())

    return {
        "approved_without_interview": approved_without_interview,
        "scheduled": scheduled,
        "awaiting_result": by_result.get(None, 0),
        "selected": by_result.get(InterviewResult.SELECTED.value, 0),
        "rejected": by_result.get(InterviewResult.NOT_SELECTED.value, 0),
        "total_approved": approved_without_interview + scheduled,
    }
