"""Authentication-related Pydantic schemas."""
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from placement_portal.models.user import UserRole

# bcrypt only hashes the first 72 bytes
MAX_PASSWORD_BYTES = 72


class RegisterRequest(BaseModel):
    """Sign-up form."""
    email: EmailStr
    password: str = Field(min_length=8)
    confirm_password: str
    role: UserRole = UserRole.STUDENT
    full_name: Optional[str] = None
    college_id: Optional[UUID] = None  # Placement cell admins only

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value):
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    """Response after successful sign-up or sign-in."""
    access_token: Optional[str] = None
    token_type: str = "bearer"
    user_id: str
    email: str
    full_name: str | None
    role: str
    college_id: Optional[str] = None
