from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Text, Float, DateTime, ForeignKey, Index
import uuid

from placement_portal.database import Base
from placement_portal.database_types import GUID, StringList


class JobStatus(str, Enum):
    """Lifecycle of a job posting"""
    DRAFT = "draft"
    PUBLISHED = "published"
    CLOSED = "closed"


class JobType(str, Enum):
    FULL_TIME = "Full-time"
    PART_TIME = "Part-time"
    INTERNSHIP = "Internship"
    CONTRACT = "Contract"


class Job(Base):
    __tablename__ = "jobs"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    company_id = Column(GUID, ForeignKey("users.id"), nullable=False, index=True)

    # Posting details
    title = Column(String, nullable=False)
    position = Column(String, nullable=True)
    company_name = Column(String, nullable=True)  # Display name, copied from the company profile
    location = Column(String, nullable=True)
    job_type = Column(String, nullable=False, default=JobType.FULL_TIME.value)
    description = Column(Text, nullable=True)
    requirements = Column(StringList, nullable=True, default=list)

    # Eligibility
    min_cgpa = Column(Float, nullable=False, default=0.0)
    eligibility_criteria = Column(Text, nullable=True)

    stipend = Column(String, nullable=True)
    application_deadline = Column(DateTime, nullable=True)

    status = Column(String, nullable=False, default=JobStatus.PUBLISHED.value)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_jobs_status_created', 'status', 'created_at'),
    )

    def is_deadline_passed(self) -> bool:
        if self.application_deadline is None:
            return False
        return datetime.utcnow() > self.application_deadline
