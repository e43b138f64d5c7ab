from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, Integer, Float, DateTime, ForeignKey
import uuid

from placement_portal.database import Base
from placement_portal.database_types import GUID, StringList


class ProfileStatus(str, Enum):
    """Placement cell review status of a student profile"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class StudentProfile(Base):
    __tablename__ = "student_profiles"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)
    college_id = Column(GUID, ForeignKey("colleges.id"), nullable=True, index=True)

    # Academic details
    full_name = Column(String(255), nullable=True)
    roll_number = Column(String(50), nullable=True)
    branch = Column(String(100), nullable=True)
    cgpa = Column(Float, nullable=True)
    graduation_year = Column(Integer, nullable=True)
    phone = Column(String(20), nullable=True)
    skills = Column(StringList, nullable=True, default=list)

    # Public URLs handed out by object storage
    resume_url = Column(String(500), nullable=True)
    avatar_url = Column(String(500), nullable=True)

    status = Column(String, nullable=False, default=ProfileStatus.PENDING.value, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
