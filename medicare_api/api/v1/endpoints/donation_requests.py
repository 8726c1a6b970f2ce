from fastapi import APIRouter, Depends, Query
from fastapi import status as http_status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from typing import Optional
from uuid import UUID
import logging
from medicare_api.core.config import settings
from medicare_api.database import get_session, get_session_factory
from medicare_api.models import BloodGroup, RequestStatus, User
from medicare_api.schemas.common import Pagination, envelope
from medicare_api.schemas.donation_request import (
    ApproveRequest,
    DonationRequestCreate,
    DonationRequestResponse,
    DonorMatchResult,
    NotifyResult,
    RejectRequest,
    SuitableDonor,
)
from medicare_api.schemas.user import UserSummary
from medicare_api.services.donation_requests import donation_request_service
from medicare_api.services.donor_matching import (
    find_suitable_donors,
    notify_donors_about_request,
    parse_limit,
)
from medicare_api.api.v1.endpoints.auth import require_admin

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("")
async def list_donation_requests(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    status: Optional[RequestStatus] = None,
    blood_group: Optional[BloodGroup] = None,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin)
):
    """List donation requests, newest first."""
    rows, total = await donation_request_service.list_requests(db, page, limit, status, blood_group)
    return envelope(
        data=[DonationRequestResponse.model_validate(r) for r in rows],
        pagination=Pagination.build(page, limit, total),
    )


@router.post("", status_code=http_status.HTTP_201_CREATED)
async def create_donation_request(
    payload: DonationRequestCreate,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin)
):
    """Create a donation request; High/Critical ones notify matching donors."""
    donation_request, notified = await donation_request_service.create(db, payload)
    message = "Donation request created successfully"
    if notified:
        message += f" and {notified} donor(s) notified"
    return envelope(data=DonationRequestResponse.model_validate(donation_request), message=message)


@router.get("/{request_id}")
async def get_donation_request(
    request_id: UUID,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin)
):
    donation_request = await donation_request_service.get(db, request_id)
    return envelope(data=DonationRequestResponse.model_validate(donation_request))


@router.get("/{request_id}/find-donors")
async def find_donors(
    request_id: UUID,
    limit: Optional[str] = None,
    db: AsyncSession = Depends(get_session),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
    current_user: User = Depends(require_admin)
):
    """Rank active donors for a request: same city first, then most donations."""
    donation_request, ranked, total = await find_suitable_donors(
        db, session_factory, request_id, parse_limit(limit)
    )
    result = DonorMatchResult(
        request=DonationRequestResponse.model_validate(donation_request),
        suitableDonors=[
            SuitableDonor(
                id=c.donor.id,
                name=c.donor.name,
                email=c.donor.email,
                phone=c.donor.phone,
                blood_group=c.donor.blood_group,
                city=c.donor.city,
                total_donations=c.total_donations,
                last_donation_date=c.last_donation_date,
                is_same_city=c.is_same_city,
            )
            for c in ranked
        ],
        total=total,
    )
    return envelope(data=result)


@router.post("/{request_id}/notify-donors")
async def notify_donors(
    request_id: UUID,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin)
):
    """Notify every donor with the request's blood group."""
    donors = await notify_donors_about_request(db, request_id)
    result = NotifyResult(
        notified_count=len(donors),
        donors=[UserSummary.model_validate(d) for d in donors],
    )
    return envelope(data=result, message=f"Notified {len(donors)} donor(s) successfully")


@router.patch("/{request_id}/approve")
async def approve_donation_request(
    request_id: UUID,
    body: Optional[ApproveRequest] = None,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin)
):
    notes = body.notes if body else None
    donation_request = await donation_request_service.approve(db, request_id, current_user, notes)
    return envelope(
        data=DonationRequestResponse.model_validate(donation_request),
        message="Donation request approved successfully",
    )


@router.patch("/{request_id}/reject")
async def reject_donation_request(
    request_id: UUID,
    body: Optional[RejectRequest] = None,
    db: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_admin)
):
    reason = body.reason if body else None
    donation_request = await donation_request_service.reject(db, request_id, current_user, reason)
    return envelope(
        data=DonationRequestResponse.model_validate(donation_request),
        message="Donation request rejected successfully",
    )
