from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Index
import uuid

from placement_portal.database import Base
from placement_portal.database_types import GUID


class TargetApprovalStatus(str, Enum):
    """Placement cell decision on showing a job to its students"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class JobCollegeTarget(Base):
    __tablename__ = "job_college_targets"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    job_id = Column(GUID, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    college_id = Column(GUID, ForeignKey("colleges.id"), nullable=False, index=True)

    approval_status = Column(String, nullable=False, default=TargetApprovalStatus.PENDING.value)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint('job_id', 'college_id', name='uq_job_college'),

        # Student job listing: approved targets for one college
        Index('idx_targets_college_status', 'college_id', 'approval_status'),
    )
