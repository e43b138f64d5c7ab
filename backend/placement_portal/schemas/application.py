"""Application-related Pydantic schemas."""
from datetime import datetime
from typing import Literal, Optional
from uuid import UUID
from pydantic import BaseModel

from placement_portal.models.application import ApplicationStatus


class ApplicationCreate(BaseModel):
    job_id: UUID


class ApplicationDecision(BaseModel):
    """
    Reviewer decision.

    expected_status, when sent, must match the current status or the
    decision is refused with 409.
    """
    decision: Literal["approve", "reject"]
    notes: Optional[str] = None
    expected_status: Optional[ApplicationStatus] = None


class ApplicationResponse(BaseModel):
    """Application joined with job and student details."""
    id: UUID
    student_id: UUID
    job_id: UUID
    status: str
    placement_cell_notes: Optional[str] = None
    company_notes: Optional[str] = None
    submitted_at: datetime
    updated_at: datetime

    # Job
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    job_location: Optional[str] = None
    job_type: Optional[str] = None

    # Student
    student_name: Optional[str] = None
    roll_number: Optional[str] = None
    branch: Optional[str] = None
    cgpa: Optional[float] = None
    resume_url: Optional[str] = None
