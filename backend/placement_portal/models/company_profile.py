"""Company profile model."""
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, ForeignKey
import uuid

from placement_portal.database import Base
from placement_portal.database_types import GUID


class CompanyProfile(Base):
    __tablename__ = "company_profiles"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    company_name = Column(String, nullable=True, index=True)
    industry = Column(String, nullable=True)
    location = Column(String, nullable=True)
    website = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)
    logo_url = Column(String(500), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
