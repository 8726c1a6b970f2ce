"""
Admin reporting: user management, system analytics, caretaker links and the
recent-activity feed.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from medicare_api.core.config import settings
from medicare_api.core.exceptions import NotFoundError, ValidationError
from medicare_api.core.tasks import gather_or_cancel
from medicare_api.models import Donation, Dose, Link, Medication, User, UserRole, UserStatus
from medicare_api.models.base import utcnow

logger = logging.getLogger(__name__)


async def _count(session_factory: async_sessionmaker[AsyncSession], model) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(model)) or 0


async def _role_counts(session_factory: async_sessionmaker[AsyncSession]) -> Dict[str, int]:
    async with session_factory() as session:
        rows = (await session.execute(select(User.role, func.count(User.id)).group_by(User.role))).all()
    return {(role.value if hasattr(role, "value") else role): count for role, count in rows}


def _sort_key(entry: Dict[str, Any]) -> float:
    # Postgres hands back aware datetimes, SQLite naive ones; compare on a single axis
    ts: Optional[datetime] = entry.get("timestamp")
    if ts is None:
        return float("-inf")
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.timestamp()


class AdminService:
    """Admin-only reads and the user status switch."""

    @staticmethod
    async def list_users(
        session: AsyncSession,
        page: int,
        limit: int,
        role: Optional[UserRole] = None,
    ) -> Tuple[Sequence[User], int]:
        filters = [User.role == role] if role is not None else []
        total = await session.scalar(select(func.count(User.id)).where(*filters))
        users = (
            await session.execute(
                select(User)
                .where(*filters)
                .order_by(User.created_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
        ).scalars().all()
        return users, total or 0

    @staticmethod
    async def update_user_status(
        session: AsyncSession,
        user_id: UUID,
        new_status: Optional[str],
        acting_admin: User,
    ) -> User:
        """
        Enable, disable or suspend an account.

        Args:
            session: Database session
            user_id: Account to change
            new_status: One of active, inactive, suspended
            acting_admin: Admin making the change; may not change their own status
        """
        try:
            status_value = UserStatus(new_status)
        except ValueError:
            raise ValidationError("Invalid status. Must be active, inactive, or suspended")

        if user_id == acting_admin.id:
            raise ValidationError("Cannot change your own status")

        user = await session.get(User, user_id)
        if not user:
            raise NotFoundError("User not found")

        user.status = status_value
        user.updated_at = utcnow()
        await session.commit()
        await session.refresh(user)

        logger.info(f"User {user.email} status set to {status_value.value} by {acting_admin.email}")
        return user

    @staticmethod
    async def system_analytics(session_factory: async_sessionmaker[AsyncSession]) -> Dict[str, Any]:
        """Independent counts, fanned out concurrently; any failed count fails the report."""
        role_counts, medications, donations, doses, links = await gather_or_cancel(
            _role_counts(session_factory),
            _count(session_factory, Medication),
            _count(session_factory, Donation),
            _count(session_factory, Dose),
            _count(session_factory, Link),
        )
        return {
            "users": {
                "total": sum(role_counts.values()),
                "byRole": {role.value: role_counts.get(role.value, 0) for role in UserRole},
            },
            "medications": medications,
            "donations": donations,
            "doses": doses,
            "caretakerPatientLinks": links,
        }

    @staticmethod
    async def list_links(session: AsyncSession, page: int, limit: int) -> Tuple[Sequence[Link], int]:
        total = await session.scalar(select(func.count(Link.id)))
        links = (
            await session.execute(
                select(Link)
                .options(selectinload(Link.caretaker), selectinload(Link.patient))
                .order_by(Link.created_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
        ).scalars().all()
        return links, total or 0

    @staticmethod
    async def recent_activity(session: AsyncSession, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Newest user sign-ups, medications and dose updates merged into one feed."""
        limit = limit or settings.ACTIVITY_FEED_LIMIT

        users = (
            await session.execute(select(User).order_by(User.created_at.desc()).limit(limit))
        ).scalars().all()
        medications = (
            await session.execute(
                select(Medication)
                .options(selectinload(Medication.patient))
                .order_by(Medication.created_at.desc())
                .limit(limit)
            )
        ).scalars().all()
        doses = (
            await session.execute(select(Dose).order_by(Dose.updated_at.desc()).limit(limit))
        ).scalars().all()

        activities = [
            {
                "type": "user_created",
                "timestamp": u.created_at,
                "data": {"name": u.name, "email": u.email, "role": u.role.value},
            }
            for u in users
        ]
        activities += [
            {
                "type": "medication_created",
                "timestamp": m.created_at,
                "data": {"medication": m.name, "patient": m.patient.name if m.patient else None},
            }
            for m in medications
        ]
        activities += [
            {
                "type": "dose_updated",
                "timestamp": d.updated_at,
                "data": {"status": d.status.value, "scheduled": d.scheduled_time},
            }
            for d in doses
        ]

        activities.sort(key=_sort_key, reverse=True)
        return activities[:limit]


# Global instance
admin_service = AdminService()
