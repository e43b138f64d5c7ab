"""Job-related Pydantic schemas."""
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator

from placement_portal.models.job import JobStatus, JobType
from placement_portal.models.job_college_target import TargetApprovalStatus


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Timestamps are stored as naive UTC
    if value is not None and value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class JobBase(BaseModel):
    """Base schema with common job posting fields."""
    title: str
    position: Optional[str] = None
    location: Optional[str] = None
    job_type: JobType = JobType.FULL_TIME
    description: Optional[str] = None
    requirements: list[str] = []
    min_cgpa: float = Field(default=0.0, ge=0, le=10)
    stipend: Optional[str] = None
    eligibility_criteria: Optional[str] = None
    application_deadline: Optional[datetime] = None
    status: JobStatus = JobStatus.PUBLISHED

    @field_validator("application_deadline")
    @classmethod
    def normalize_deadline(cls, value):
        return _to_naive_utc(value)


class JobCreate(JobBase):
    """Schema for creating a new job posting."""
    college_ids: list[UUID] = []


class JobUpdate(BaseModel):
    """Partial update. college_ids, when present, replaces the target set."""
    title: Optional[str] = None
    position: Optional[str] = None
    location: Optional[str] = None
    job_type: Optional[JobType] = None
    description: Optional[str] = None
    requirements: Optional[list[str]] = None
    min_cgpa: Optional[float] = Field(default=None, ge=0, le=10)
    stipend: Optional[str] = None
    eligibility_criteria: Optional[str] = None
    application_deadline: Optional[datetime] = None
    status: Optional[JobStatus] = None
    college_ids: Optional[list[UUID]] = None

    @field_validator("application_deadline")
    @classmethod
    def normalize_deadline(cls, value):
        return _to_naive_utc(value)

    @field_validator("title", "job_type", "min_cgpa", "status", "requirements", "college_ids")
    @classmethod
    def not_null(cls, value, info):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class JobResponse(BaseModel):
    """Schema for job posting response."""
    id: UUID
    company_id: UUID
    title: str
    position: Optional[str] = None
    company_name: Optional[str] = None
    location: Optional[str] = None
    job_type: str
    description: Optional[str] = None
    requirements: list[str] = []
    min_cgpa: float
    stipend: Optional[str] = None
    eligibility_criteria: Optional[str] = None
    application_deadline: Optional[datetime] = None
    status: str
    created_at: datetime
    updated_at: datetime

    # Filled in per request
    college_ids: list[UUID] = []
    eligibility: Optional[str] = None
    application_status: Optional[str] = None
    application_count: Optional[int] = None
    deadline_passed: bool = False

    model_config = ConfigDict(from_attributes=True)


class TargetDecision(BaseModel):
    """Placement cell decision on a job targeted at its college."""
    approval_status: TargetApprovalStatus


class TargetResponse(BaseModel):
    id: UUID
    job_id: UUID
    college_id: UUID
    approval_status: str
    job_title: Optional[str] = None
    company_name: Optional[str] = None
    min_cgpa: Optional[float] = None
    created_at: datetime
    updated_at: datetime
