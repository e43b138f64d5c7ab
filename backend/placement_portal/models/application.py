from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Index, UniqueConstraint
import uuid

from placement_portal.database import Base
from placement_portal.database_types import GUID


class ApplicationStatus(str, Enum):
    """Valid states for job applications"""
    PENDING = "pending"
    CELL_APPROVED = "cell_approved"
    CELL_REJECTED = "cell_rejected"
    COMPANY_APPROVED = "company_approved"
    COMPANY_REJECTED = "company_rejected"


class Application(Base):
    __tablename__ = "applications"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    student_id = Column(GUID, ForeignKey("users.id"), nullable=False)
    job_id = Column(GUID, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)

    # State machine
    status = Column(String, nullable=False, default=ApplicationStatus.PENDING.value)

    # Reviewer notes, one per stage
    placement_cell_notes = Column(Text, nullable=True)
    company_notes = Column(Text, nullable=True)

    # Timestamps
    submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        # One application per student per job
        UniqueConstraint('student_id', 'job_id', name='uq_student_job'),

        Index('idx_applications_job_status', 'job_id', 'status'),
        Index('idx_applications_student', 'student_id', 'submitted_at'),
    )
