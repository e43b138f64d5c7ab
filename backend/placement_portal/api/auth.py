"""
Authentication endpoints and dependencies.

Security features:
- bcrypt password hashes
- Signed session token in an httpOnly cookie (Bearer header also accepted)
- Account lockout after 5 failed attempts (30 min cooldown)
- IP address logging for audit trail
- Role-based access control (student / company / admin)
"""
import logging
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Header, Request, Response, Cookie
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from placement_portal.config import settings
from placement_portal.database import get_db
from placement_portal.models.college import College
from placement_portal.models.user import User, UserRole
from placement_portal.schemas.auth import RegisterRequest, LoginRequest, AuthResponse
from placement_portal.services.security import (
    hash_password,
    verify_password,
    create_session_token,
    decode_session_token,
)

logger = logging.getLogger(__name__)
router = APIRouter()

# Security constants
MAX_FAILED_ATTEMPTS = 5
ACCOUNT_LOCK_MINUTES = 30
SESSION_COOKIE = "auth_token"


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request.

    Checks X-Forwarded-For header (for proxies/load balancers) first,
    falls back to direct client IP.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _set_session_cookie(response: Response, token: str) -> None:
    # In production, set secure=True for HTTPS-only
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,  # Prevents JavaScript access (XSS protection)
        samesite="lax",  # CSRF protection
        max_age=settings.session_ttl_minutes * 60,
        secure=False,
    )


def build_auth_response(user: User, token: Optional[str]) -> AuthResponse:
    return AuthResponse(
        access_token=token,
        user_id=str(user.id),
        email=user.email,
        full_name=user.full_name,
        role=user.role.value,
        college_id=str(user.college_id) if user.college_id else None,
    )


# Authentication Dependencies
async def get_current_user(
    auth_token: str = Cookie(None),
    authorization: str = Header(None),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Dependency to get the current authenticated user.

    Reads the session token from an `Authorization: Bearer` header when one
    is sent (API clients), otherwise from the httpOnly session cookie.

    Raises:
        HTTPException 401: If no token, token invalid/expired or user not found
        HTTPException 403: If account is locked
    """
    token = auth_token
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()

    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_session_token(token)
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    try:
        user_id = UUID(payload["sub"])
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    result = await db.execute(
        select(User).where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(status_code=401, detail="Invalid token. User not found.")

    if user.is_account_locked():
        raise HTTPException(
            status_code=403,
            detail=f"Account temporarily locked due to multiple failed login attempts. Try again after {user.account_locked_until.isoformat()}"
        )

    return user


def require_role(role: UserRole):
    """Build a dependency that only lets users with the given role through."""
    async def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role != role:
            logger.warning(
                f"User {current_user.email} (role={current_user.role.value}) "
                f"attempted to access {role.value} endpoint"
            )
            raise HTTPException(
                status_code=403,
                detail=f"{role.value.capitalize()} access required. You do not have permission to access this resource."
            )
        return current_user
    return dependency


require_student = require_role(UserRole.STUDENT)
require_company = require_role(UserRole.COMPANY)
require_admin = require_role(UserRole.ADMIN)


# Endpoints
@router.post("/register", response_model=AuthResponse, status_code=201)
async def register(
    register_request: RegisterRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Create an account and sign in.

    Returns:
        201: Account created, session cookie set
        400: Unknown college
        409: Email already registered
    """
    result = await db.execute(
        select(User).where(User.email == register_request.email)
    )
    if result.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Email already registered")

    college_id = None
    if register_request.role == UserRole.ADMIN and register_request.college_id:
        college = await db.get(College, register_request.college_id)
        if not college:
            raise HTTPException(status_code=400, detail="Unknown college")
        college_id = college.id

    try:
        user = User(
            email=register_request.email,
            password_hash=hash_password(register_request.password),
            role=register_request.role,
            full_name=register_request.full_name,
            college_id=college_id,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
    except Exception as e:
        await db.rollback()
        logger.error(f"Error registering user: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail="Registration failed. Please try again.")

    logger.info(f"Registered {user.role.value} account: {user.email}")

    token = create_session_token(str(user.id), user.role.value)
    _set_session_cookie(response, token)
    return build_auth_response(user, token)


@router.post("/login", response_model=AuthResponse)
async def login(
    login_request: LoginRequest,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Sign in with email and password.

    Returns:
        200: Authenticated, session cookie set
        401: Wrong email or password
        403: Account locked due to failed attempts
    """
    result = await db.execute(
        select(User).where(User.email == login_request.email)
    )
    user = result.scalar_one_or_none()

    if not user:
        logger.warning(f"Login attempt for unknown email from IP: {get_client_ip(request)}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if user.is_account_locked():
        logger.warning(
            f"Login attempt on locked account: {user.email} from IP: {get_client_ip(request)}"
        )
        raise HTTPException(
            status_code=403,
            detail=f"Account temporarily locked. Try again after {user.account_locked_until.isoformat()}"
        )

    if not verify_password(login_request.password, user.password_hash):
        user.failed_login_attempts += 1

        # Lock account after too many failed attempts
        if user.failed_login_attempts >= MAX_FAILED_ATTEMPTS:
            user.account_locked_until = datetime.utcnow() + timedelta(minutes=ACCOUNT_LOCK_MINUTES)
            logger.warning(
                f"Account locked due to {MAX_FAILED_ATTEMPTS} failed attempts: {user.email}"
            )

        await db.commit()
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user.last_login_at = datetime.utcnow()
    user.last_login_ip = get_client_ip(request)
    user.failed_login_attempts = 0
    user.account_locked_until = None
    await db.commit()

    logger.info(f"Successful login: {user.email} from IP: {user.last_login_ip}")

    token = create_session_token(str(user.id), user.role.value)
    _set_session_cookie(response, token)
    return build_auth_response(user, token)


@router.get("/me", response_model=AuthResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Identity and role of the signed-in user."""
    return build_auth_response(current_user, None)


@router.post("/logout")
async def logout(
    response: Response,
    current_user: User = Depends(get_current_user)
):
    """Clear the session cookie."""
    response.delete_cookie(
        key=SESSION_COOKIE,
        httponly=True,
        samesite="lax"
    )

    logger.info(f"User logged out: {current_user.email}")

    return {"message": "Successfully logged out"}
