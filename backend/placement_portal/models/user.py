from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Enum as SQLEnum
import uuid
import enum

from placement_portal.database import Base
from placement_portal.database_types import GUID


class UserRole(str, enum.Enum):
    """User role for role-based access control (RBAC)."""
    STUDENT = "student"  # Applies to jobs, manages own profile
    COMPANY = "company"  # Posts jobs, reviews cell-approved applications, schedules interviews
    ADMIN = "admin"  # Placement cell staff for one college


class User(Base):
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)

    # Role is fixed at signup
    role = Column(
        SQLEnum(
            UserRole,
            name="user_role",
            create_type=True,
            values_callable=lambda roles: [role.value for role in roles],
        ),
        nullable=False,
        default=UserRole.STUDENT,
        index=True
    )

    # Placement cell admins belong to exactly one college
    college_id = Column(GUID, ForeignKey("colleges.id"), nullable=True, index=True)

    full_name = Column(String(255), nullable=True)

    # Security & audit fields
    last_login_at = Column(DateTime, nullable=True)
    last_login_ip = Column(String(45), nullable=True)  # IPv4 or IPv6
    failed_login_attempts = Column(Integer, default=0, nullable=False)
    account_locked_until = Column(DateTime, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def is_company(self) -> bool:
        return self.role == UserRole.COMPANY

    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT

    def is_account_locked(self) -> bool:
        """Check if account is currently locked due to failed login attempts."""
        if not self.account_locked_until:
            return False
        return datetime.utcnow() < self.account_locked_until
