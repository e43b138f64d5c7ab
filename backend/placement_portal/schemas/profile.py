"""Profile-related Pydantic schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, HttpUrl


class StudentProfileUpdate(BaseModel):
    """Request body for creating or updating a student profile (partial)."""
    full_name: Optional[str] = None
    roll_number: Optional[str] = None
    branch: Optional[str] = None
    cgpa: Optional[float] = Field(default=None, ge=0, le=10)
    graduation_year: Optional[int] = Field(default=None, ge=1950, le=2100)
    phone: Optional[str] = None
    skills: Optional[list[str]] = None
    college_id: Optional[UUID] = None


class StudentProfileResponse(BaseModel):
    """Response with a student's profile."""
    id: UUID
    user_id: UUID
    college_id: Optional[UUID] = None

    # Academic details
    full_name: Optional[str] = None
    roll_number: Optional[str] = None
    branch: Optional[str] = None
    cgpa: Optional[float] = None
    graduation_year: Optional[int] = None
    phone: Optional[str] = None
    skills: list[str] = []

    # Uploaded files
    resume_url: Optional[str] = None
    avatar_url: Optional[str] = None

    status: str

    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CompanyProfileUpdate(BaseModel):
    """Request body for creating or updating a company profile (partial)."""
    company_name: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    website: Optional[HttpUrl] = None
    description: Optional[str] = None


class CompanyProfileResponse(BaseModel):
    id: UUID
    user_id: UUID
    company_name: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class StudentDecision(BaseModel):
    """Placement cell decision on a student profile."""
    approved: bool


class StudentListResponse(BaseModel):
    """Student profiles of one college with per-status counts."""
    students: list[StudentProfileResponse]
    counts: dict[str, int] = {}
