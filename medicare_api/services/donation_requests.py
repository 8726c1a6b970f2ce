"""
Donation request lifecycle: creation (with urgent auto-notify) and the
one-shot pending -> approved / rejected review.
"""
import logging
from typing import List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from medicare_api.core.exceptions import ConflictError, NotFoundError, ValidationError
from medicare_api.models import (
    AUTO_NOTIFY_URGENCY,
    BloodGroup,
    DonationRequest,
    RequestStatus,
    UrgencyLevel,
    User,
)
from medicare_api.models.base import utcnow
from medicare_api.schemas.donation_request import DonationRequestCreate
from medicare_api.services.donor_matching import get_request_or_404, notify_matching_donors

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("hospital_name", "location", "blood_group", "units_needed", "contact_number")


def missing_required_fields(payload: DonationRequestCreate) -> List[str]:
    missing = []
    for field in REQUIRED_FIELDS:
        value = getattr(payload, field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


class DonationRequestService:
    """Reads and state transitions for donation requests."""

    @staticmethod
    async def create(session: AsyncSession, payload: DonationRequestCreate) -> Tuple[DonationRequest, int]:
        """
        Create an active donation request.

        High and Critical requests notify matching donors straight away. That
        notification is best-effort: no matching donors, or a failed insert,
        is logged and the request is still created.

        Returns:
            (donation_request, notified_count)
        """
        missing = missing_required_fields(payload)
        if missing:
            detail = f"Missing required fields: {', '.join(missing)}"
            raise ValidationError(detail, detail)

        donation_request = DonationRequest(
            patient_id=payload.patient_id,
            hospital_name=payload.hospital_name.strip(),
            location=payload.location.strip(),
            blood_group=payload.blood_group,
            units_needed=payload.units_needed,
            urgency_level=payload.urgency_level or UrgencyLevel.MEDIUM,
            contact_number=payload.contact_number.strip(),
            notes=payload.notes,
            status=RequestStatus.ACTIVE,
        )
        session.add(donation_request)
        await session.commit()
        await session.refresh(donation_request)

        logger.info(
            f"Donation request {donation_request.id} created: {donation_request.blood_group.value} "
            f"x{donation_request.units_needed} at {donation_request.hospital_name} "
            f"({donation_request.urgency_level.value})"
        )

        notified = 0
        request_id = donation_request.id
        if donation_request.urgency_level in AUTO_NOTIFY_URGENCY:
            try:
                donors = await notify_matching_donors(session, donation_request)
                notified = len(donors)
                if not donors:
                    logger.info(
                        f"No donors with blood group {donation_request.blood_group.value} "
                        f"to notify for request {donation_request.id}"
                    )
            except Exception as e:
                logger.warning(
                    f"Auto-notify failed for donation request {request_id}: {e}",
                    exc_info=True
                )
                # A failed read leaves the transaction aborted; the request itself is already committed
                await session.rollback()
                await session.refresh(donation_request)

        return donation_request, notified

    @staticmethod
    async def get(session: AsyncSession, request_id: UUID) -> DonationRequest:
        return await get_request_or_404(session, request_id)

    @staticmethod
    async def list_requests(
        session: AsyncSession,
        page: int,
        limit: int,
        status: Optional[RequestStatus] = None,
        blood_group: Optional[BloodGroup] = None,
    ) -> Tuple[Sequence[DonationRequest], int]:
        """Newest first, with optional status / blood group filters."""
        filters = []
        if status is not None:
            filters.append(DonationRequest.status == status)
        if blood_group is not None:
            filters.append(DonationRequest.blood_group == blood_group)

        total = await session.scalar(
            select(func.count(DonationRequest.id)).where(*filters)
        )
        rows = (
            await session.execute(
                select(DonationRequest)
                .where(*filters)
                .order_by(DonationRequest.created_at.desc())
                .offset((page - 1) * limit)
                .limit(limit)
            )
        ).scalars().all()
        return rows, total or 0

    @staticmethod
    async def _transition_from_pending(
        session: AsyncSession,
        request_id: UUID,
        new_status: RequestStatus,
        action: str,
        values: dict,
    ) -> DonationRequest:
        """
        Move a pending request to ``new_status`` with a single conditional update.

        Zero rows affected means the request is missing (NotFound) or no longer
        pending (Conflict); in both cases nothing is written.
        """
        now = utcnow()
        result = await session.execute(
            update(DonationRequest)
            .where(
                DonationRequest.id == request_id,
                DonationRequest.status == RequestStatus.PENDING,
            )
            .values(status=new_status, updated_at=now, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await session.rollback()
            current = await session.get(DonationRequest, request_id)
            if current is None:
                raise NotFoundError("Donation request not found")
            raise ConflictError(
                f"Cannot {action} request with status '{current.status.value}'",
                f"Only pending requests can be {new_status.value}; current status is '{current.status.value}'",
            )
        await session.commit()
        return await session.get(DonationRequest, request_id, populate_existing=True)

    @classmethod
    async def approve(
        cls,
        session: AsyncSession,
        request_id: UUID,
        reviewer: User,
        notes: Optional[str] = None,
    ) -> DonationRequest:
        donation_request = await cls._transition_from_pending(
            session,
            request_id,
            RequestStatus.APPROVED,
            "approve",
            {"approved_at": utcnow(), "admin_notes": notes, "reviewed_by": reviewer.id},
        )
        logger.info(f"Donation request {request_id} approved by {reviewer.email}")
        return donation_request

    @classmethod
    async def reject(
        cls,
        session: AsyncSession,
        request_id: UUID,
        reviewer: User,
        reason: Optional[str],
    ) -> DonationRequest:
        # Checked before touching the store so it fails the same way in any state
        if not reason or not reason.strip():
            raise ValidationError("Rejection reason is required")

        donation_request = await cls._transition_from_pending(
            session,
            request_id,
            RequestStatus.REJECTED,
            "reject",
            {"rejected_at": utcnow(), "rejection_reason": reason.strip(), "reviewed_by": reviewer.id},
        )
        logger.info(f"Donation request {request_id} rejected by {reviewer.email}: {reason.strip()}")
        return donation_request


# Global instance
donation_request_service = DonationRequestService()
