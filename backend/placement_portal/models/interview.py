from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
import uuid

from placement_portal.database import Base
from placement_portal.database_types import GUID


class InterviewType(str, Enum):
    TECHNICAL = "technical"
    HR = "hr"
    OTHER = "other"


class InterviewResult(str, Enum):
    SELECTED = "selected"
    NOT_SELECTED = "not_selected"


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    # At most one interview per application
    application_id = Column(
        GUID, ForeignKey("applications.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )

    interview_date = Column(DateTime, nullable=False)
    interview_type = Column(String, nullable=False, default=InterviewType.TECHNICAL.value)
    location = Column(String, nullable=True)
    meeting_link = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)

    # NULL until the interview has happened and the company records an outcome
    result = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def has_taken_place(self) -> bool:
        return self.interview_date <= datetime.utcnow()
