from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from typing import Optional
from uuid import UUID
import logging
from medicare_api.core.config import settings
from medicare_api.database import get_session, get_session_factory
from medicare_api.models import User, UserRole
from medicare_api.schemas.admin import ActivityEntry, LinkResponse, SystemAnalytics
from medicare_api.schemas.common import Pagination, envelope
from medicare_api.schemas.user import UserResponse, UserStatusUpdate
from medicare_api.services.admin import admin_service
from medicare_api.api.v1.endpoints.auth import require_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/users")
async def get_all_users(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    role: Optional[UserRole] = None,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin)
):
    """Get all users with pagination and role filtering."""
    users, total = await admin_service.list_users(db, page, limit, role)
    return envelope(
        data=[UserResponse.model_validate(u) for u in users],
        pagination=Pagination.build(page, limit, total),
    )


@router.patch("/users/{user_id}/status")
async def update_user_status(
    user_id: UUID,
    body: UserStatusUpdate,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin)
):
    """Enable or disable a user account."""
    user = await admin_service.update_user_status(db, user_id, body.status, current_user)
    return envelope(
        data=UserResponse.model_validate(user),
        message=f"User status updated to {user.status.value}",
    )


@router.get("/analytics")
async def get_system_analytics(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    current_user: User = Depends(require_admin)
):
    """System-wide counts."""
    analytics = await admin_service.system_analytics(session_factory)
    return envelope(data=SystemAnalytics.model_validate(analytics))


@router.get("/links")
async def get_all_links(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin)
):
    """Get all caretaker-patient links with user details."""
    links, total = await admin_service.list_links(db, page, limit)
    return envelope(
        data=[LinkResponse.model_validate(link) for link in links],
        pagination=Pagination.build(page, limit, total),
    )


@router.get("/activity")
async def get_recent_activity(
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin)
):
    activities = await admin_service.recent_activity(db)
    return envelope(data=[ActivityEntry.model_validate(a) for a in activities])
