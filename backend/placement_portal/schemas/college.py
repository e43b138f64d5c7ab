"""College-related Pydantic schemas."""
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict


class CollegeResponse(BaseModel):
    id: UUID
    name: str
    location: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
