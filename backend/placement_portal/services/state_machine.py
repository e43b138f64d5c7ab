"""
State machine for job applications.
ALL application status changes must go through this module.
"""
import logging
from datetime import datetime
from typing import Optional, Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from placement_portal.models.application import Application, ApplicationStatus
from placement_portal.models.user import UserRole

# Configure logger
logger = logging.getLogger(__name__)


# Define allowed status transitions
ALLOWED_TRANSITIONS: Dict[ApplicationStatus, list[ApplicationStatus]] = {
    ApplicationStatus.PENDING: [
        ApplicationStatus.CELL_APPROVED,
        ApplicationStatus.CELL_REJECTED,
    ],
    ApplicationStatus.CELL_APPROVED: [
        ApplicationStatus.COMPANY_APPROVED,
        ApplicationStatus.COMPANY_REJECTED,
    ],
    ApplicationStatus.CELL_REJECTED: [],  # Terminal state
    ApplicationStatus.COMPANY_APPROVED: [],  # Terminal here; the interview takes over
    ApplicationStatus.COMPANY_REJECTED: [],  # Terminal state
}

# Which role may move an application INTO a given status
TRANSITION_ACTORS: Dict[ApplicationStatus, UserRole] = {
    ApplicationStatus.CELL_APPROVED: UserRole.ADMIN,
    ApplicationStatus.CELL_REJECTED: UserRole.ADMIN,
    ApplicationStatus.COMPANY_APPROVED: UserRole.COMPANY,
    ApplicationStatus.COMPANY_REJECTED: UserRole.COMPANY,
}


class InvalidTransitionError(Exception):
    """Raised when an invalid status transition is attempted"""
    pass


class ActorNotAllowedError(Exception):
    """Raised when a role tries to make a decision that belongs to another role"""
    pass


class StaleStatusError(ValueError):
    """Raised when the application moved on since the caller last read it"""
    pass


def can_transition(from_status: ApplicationStatus, to_status: ApplicationStatus) -> bool:
    """Check if a transition is allowed without touching the database"""
    return to_status in ALLOWED_TRANSITIONS.get(from_status, [])


def can_act(actor: UserRole, to_status: ApplicationStatus) -> bool:
    return TRANSITION_ACTORS.get(to_status) == actor


async def transition_application(
    db: AsyncSession,
    application_id,
    to_status: ApplicationStatus,
    actor: UserRole,
    notes: Optional[str] = None,
    expected_status: Optional[ApplicationStatus] = None,
) -> Application:
    """
    Move an application to a new status with validation.

    Args:
        db: Database session
        application_id: ID of the application
        to_status: Target status
        actor: Role of the user making the decision
        notes: Free-text notes; stored as placement cell notes for admins,
            company notes for companies
        expected_status: Status the caller last saw. None skips the check.

    Returns:
        Updated Application

    Raises:
        ValueError: If the application is not found
        StaleStatusError: If expected_status doesn't match the current status
        ActorNotAllowedError: If the role may not make this decision
        InvalidTransitionError: If the transition is not allowed
    """
    result = await db.execute(
        select(Application).where(Application.id == application_id)
    )
    application = result.scalar_one_or_none()

    if not application:
        raise ValueError(f"Application {application_id} not found")

    current_status = ApplicationStatus(application.status)

    # Reject stale decisions: another reviewer may have moved the row since it was read
    if expected_status is not None and current_status != expected_status:
        raise StaleStatusError(
            f"Application {application_id} is in status {current_status.value}, "
            f"expected {expected_status.value}"
        )

    if not can_act(actor, to_status):
        raise ActorNotAllowedError(
            f"Role {actor.value} cannot set application status to {to_status.value}"
        )

    if not can_transition(current_status, to_status):
        raise InvalidTransitionError(
            f"Invalid transition from {current_status.value} to {to_status.value}"
        )

    application.status = to_status.value
    application.updated_at = datetime.utcnow()

    if notes is not None:
        if actor == UserRole.ADMIN:
            application.placement_cell_notes = notes
        else:
            application.company_notes = notes

    await db.commit()
    await db.refresh(application)

    log_data = {
        "application_id": str(application_id),
        "from_status": current_status.value,
        "to_status": to_status.value,
        "actor": actor.value,
    }
    logger.info(f"Application status transition: {current_status.value} → {to_status.value}", extra=log_data)

    return application
