"""Interview-related Pydantic schemas."""
from datetime import datetime, date, time
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict

from placement_portal.models.interview import InterviewType, InterviewResult


class InterviewCreate(BaseModel):
    """Schema for scheduling an interview."""
    application_id: UUID
    interview_date: date
    interview_time: time
    interview_type: InterviewType = InterviewType.TECHNICAL
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None


class InterviewResultUpdate(BaseModel):
    result: InterviewResult


class InterviewResponse(BaseModel):
    id: UUID
    application_id: UUID
    interview_date: datetime
    interview_type: str
    location: Optional[str] = None
    meeting_link: Optional[str] = None
    notes: Optional[str] = None
    result: Optional[str] = None
    created_at: datetime

    # Joined details for listings
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    student_name: Optional[str] = None
    can_record_result: bool = False

    model_config = ConfigDict(from_attributes=True)


class InterviewStats(BaseModel):
    approved_without_interview: int
    scheduled: int
    awaiting_result: int
    selected: int
    rejected: int
    total_approved: int
