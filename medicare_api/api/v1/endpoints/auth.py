from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from uuid import UUID
import logging
from medicare_api.core.exceptions import UnauthenticatedError, UnauthorizedError
from medicare_api.core.security import create_access_token, verify_password, verify_token
from medicare_api.database import get_session
from medicare_api.models import User, UserRole, UserStatus
from medicare_api.schemas.common import envelope
from medicare_api.schemas.user import LoginRequest, TokenResponse, UserResponse

logger = logging.getLogger(__name__)
router = APIRouter()

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_session)
) -> User:
    """Resolve the bearer token to an active user."""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Authentication required")

    payload = verify_token(credentials.credentials)
    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError:
        raise UnauthenticatedError("Could not validate credentials", "Token subject is not a user id")

    user = await db.get(User, user_id)
    if user is None or user.status != UserStatus.ACTIVE:
        raise UnauthenticatedError("Could not validate credentials", "User not found or not active")
    return user


def require_roles(*roles: UserRole):
    """Dependency factory: the current user must hold one of ``roles``."""
    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            logger.warning(f"Access denied for {current_user.email} ({current_user.role.value})")
            raise UnauthorizedError("Access denied")
        return current_user
    return checker


require_admin = require_roles(UserRole.ADMIN)


@router.post("/login")
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_session)):
    """Exchange email and password for a bearer token."""
    user = (
        await db.execute(select(User).where(User.email == credentials.email.strip().lower()))
    ).scalar_one_or_none()
    if user is None or not verify_password(credentials.password, user.hashed_password):
        raise UnauthenticatedError("Invalid email or password")
    if user.status != UserStatus.ACTIVE:
        raise UnauthenticatedError(f"Account is {user.status.value}")

    token = create_access_token({"sub": str(user.id), "role": user.role.value})
    logger.info(f"User logged in: {user.email}")
    return envelope(data=TokenResponse(access_token=token, user=UserResponse.model_validate(user)))


@router.get("/me")
async def me(current_user: User = Depends(get_current_user)):
    return envelope(data=UserResponse.model_validate(current_user))
