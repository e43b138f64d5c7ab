"""Database models"""
from placement_portal.models.user import User, UserRole
from placement_portal.models.college import College
from placement_portal.models.student_profile import StudentProfile, ProfileStatus
from placement_portal.models.company_profile import CompanyProfile
from placement_portal.models.job import Job, JobStatus, JobType
from placement_portal.models.job_college_target import JobCollegeTarget, TargetApprovalStatus
from placement_portal.models.application import Application, ApplicationStatus
from placement_portal.models.interview import Interview, InterviewType, InterviewResult

__all__ = [
    "User",
    "UserRole",
    "College",
    "StudentProfile",
    "ProfileStatus",
    "CompanyProfile",
    "Job",
    "JobStatus",
    "JobType",
    "JobCollegeTarget",
    "TargetApprovalStatus",
    "Application",
    "ApplicationStatus",
    "Interview",
    "InterviewType",
    "InterviewResult",
]
