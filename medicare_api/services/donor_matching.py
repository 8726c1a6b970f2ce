"""
Donor matching: rank active donors for a donation request and fan out
donation-request notifications to donors of the requested blood group.
"""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from medicare_api.core.config import settings
from medicare_api.core.exceptions import NotFoundError
from medicare_api.core.tasks import gather_or_cancel
from medicare_api.models import (
    Donation,
    DonationRequest,
    DonationStatus,
    Notification,
    NotificationType,
    User,
    UserRole,
    UserStatus,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DonorCandidate:
    donor: User
    total_donations: int
    last_donation_date: Optional[datetime]
    is_same_city: bool


def parse_limit(raw, default: Optional[int] = None) -> int:
    """Positive integer from a query value; anything else falls back to the default."""
    fallback = default if default is not None else settings.DEFAULT_DONOR_MATCH_LIMIT
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return fallback
    return value if value > 0 else fallback


def is_same_city(donor_city: Optional[str], request_city: Optional[str]) -> bool:
    """Exact, case-sensitive match; a missing city on either side never matches."""
    if not donor_city or not request_city:
        return False
    return donor_city == request_city


def rank_donors(candidates: Iterable[DonorCandidate], limit: int) -> Tuple[List[DonorCandidate], int]:
    """
    Order candidates for contact and cut the list to ``limit``.

    Same-city donors come first, then completed donations descending. The sort
    is stable so equal candidates keep the order they were loaded in.

    Returns:
        (ranked, total) where total is the length of the truncated list.
    """
    ranked = sorted(candidates, key=lambda c: (not c.is_same_city, -c.total_donations))
    ranked = ranked[:limit]
    return ranked, len(ranked)


async def _donation_history(
    session_factory: async_sessionmaker[AsyncSession],
    donor_id: UUID,
    semaphore: asyncio.Semaphore,
) -> Tuple[int, Optional[datetime]]:
    """Completed-donation count and most recent donation date for one donor."""
    async with semaphore:
        async with session_factory() as session:
            completed = await session.scalar(
                select(func.count(Donation.id)).where(
                    Donation.donor_id == donor_id,
                    Donation.status == DonationStatus.COMPLETED,
                )
            )
            last_date = await session.scalar(
                select(func.max(Donation.date)).where(Donation.donor_id == donor_id)
            )
    return completed or 0, last_date


async def get_request_or_404(session: AsyncSession, request_id: UUID, with_patient: bool = False) -> DonationRequest:
    stmt = select(DonationRequest).where(DonationRequest.id == request_id)
    if with_patient:
        stmt = stmt.options(selectinload(DonationRequest.patient))
    donation_request = (await session.execute(stmt)).scalar_one_or_none()
    if not donation_request:
        raise NotFoundError("Donation request not found")
    return donation_request


async def find_suitable_donors(
    session: AsyncSession,
    session_factory: async_sessionmaker[AsyncSession],
    request_id: UUID,
    limit: int,
) -> Tuple[DonationRequest, List[DonorCandidate], int]:
    """
    Rank every active donor against a donation request.

    Per-donor history lookups run concurrently on their own sessions and are
    joined before ranking; if any of them fails the whole lookup fails.

    Args:
        session: Session for the request and donor reads
        session_factory: Factory for the per-donor history sessions
        request_id: Donation request to match against
        limit: Maximum number of donors to return

    Returns:
        (donation_request, ranked_candidates, total)
    """
    donation_request = await get_request_or_404(session, request_id, with_patient=True)
    request_city = donation_request.patient.city if donation_request.patient else None

    donors: Sequence[User] = (
        await session.execute(
            select(User)
            .where(User.role == UserRole.DONOR, User.status == UserStatus.ACTIVE)
            .order_by(User.created_at.asc())
        )
    ).scalars().all()

    semaphore = asyncio.Semaphore(max(1, settings.MATCHING_MAX_CONCURRENT_READS))
    histories = await gather_or_cancel(
        *(_donation_history(session_factory, donor.id, semaphore) for donor in donors)
    )

    candidates = [
        DonorCandidate(
            donor=donor,
            total_donations=completed,
            last_donation_date=last_date,
            is_same_city=is_same_city(donor.city, request_city),
        )
        for donor, (completed, last_date) in zip(donors, histories)
    ]
    ranked, total = rank_donors(candidates, limit)

    logger.info(
        f"Matched {len(donors)} active donors for request {request_id}; returning {total}"
    )
    return donation_request, ranked, total


def build_request_message(donation_request: DonationRequest) -> str:
    """Notification text for a donation request."""
    return (
        f"Urgent blood requirement at {donation_request.hospital_name}: "
        f"{donation_request.units_needed} unit(s) of {_value(donation_request.blood_group)} needed. "
        f"Urgency: {_value(donation_request.urgency_level)}. "
        f"Location: {donation_request.location}. "
        f"Contact: {donation_request.contact_number}."
    )


def _value(member) -> str:
    return member.value if hasattr(member, "value") else str(member)


async def notify_matching_donors(
    session: AsyncSession,
    donation_request: DonationRequest,
) -> List[User]:
    """
    Write one donation_request notification per donor with the request's blood group.

    The notifications go in as a single commit: either every donor is notified
    or, on failure, none are and the error propagates.

    Returns:
        The donors that were notified (possibly empty, in which case nothing is written).
    """
    donors: Sequence[User] = (
        await session.execute(
            select(User)
            .where(User.role == UserRole.DONOR, User.blood_group == donation_request.blood_group)
            .order_by(User.created_at.asc())
        )
    ).scalars().all()

    if not donors:
        return []

    message = build_request_message(donation_request)
    title = f"Blood needed: {_value(donation_request.blood_group)}"
    session.add_all([
        Notification(
            user_id=donor.id,
            type=NotificationType.DONATION_REQUEST,
            title=title,
            message=message,
            is_read=False,
        )
        for donor in donors
    ])
    try:
        await session.commit()
    except Exception:
        await session.rollback()
        raise

    logger.info(f"Notified {len(donors)} donors about donation request {donation_request.id}")
    return list(donors)


async def notify_donors_about_request(session: AsyncSession, request_id: UUID) -> List[User]:
    """Explicit notify: at least one donor must match, otherwise NotFound."""
    donation_request = await get_request_or_404(session, request_id)
    donors = await notify_matching_donors(session, donation_request)
    if not donors:
        raise NotFoundError(
            f"No donors found with blood group {_value(donation_request.blood_group)}"
        )
    return donors
