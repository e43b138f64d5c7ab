"""Dashboard Pydantic schemas."""
from typing import Optional
from pydantic import BaseModel

from placement_portal.schemas.application import ApplicationResponse
from placement_portal.schemas.interview import InterviewStats
from placement_portal.schemas.job import JobResponse


class StudentDashboard(BaseModel):
    profile_complete: bool
    profile_status: Optional[str] = None
    cgpa: Optional[float] = None
    resume_uploaded: bool = False
    available_jobs: int = 0
    recent_jobs: list[JobResponse] = []
    applications_by_status: dict[str, int] = {}
    recent_applications: list[ApplicationResponse] = []


class CompanyDashboard(BaseModel):
    total_jobs: int
    published_jobs: int
    applications_by_status: dict[str, int] = {}
    interviews: InterviewStats


class AdminDashboard(BaseModel):
    college_id: Optional[str] = None
    college_name: Optional[str] = None
    targeted_jobs: int = 0
    applications: int = 0
    students: int = 0
    pending_students: int = 0
    pending_targets: int = 0
    recent_applications: list[ApplicationResponse] = []
