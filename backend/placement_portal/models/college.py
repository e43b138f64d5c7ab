"""College reference data."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime
import uuid

from placement_portal.database import Base
from placement_portal.database_types import GUID


class College(Base):
    __tablename__ = "colleges"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, unique=True, index=True)
    location = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
