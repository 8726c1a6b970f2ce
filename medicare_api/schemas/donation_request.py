from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from medicare_api.models.enums import BloodGroup, RequestStatus, UrgencyLevel
from medicare_api.schemas.user import UserSummary


class DonationRequestCreate(BaseModel):
    """Body of POST /donation-requests.

    Required fields are optional here so that the service can report every
    missing one at once instead of failing on the first.
    """
    hospital_name: Optional[str] = None
    location: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    units_needed: Optional[int] = Field(None, gt=0)
    urgency_level: Optional[UrgencyLevel] = None
    contact_number: Optional[str] = None
    notes: Optional[str] = None
    patient_id: Optional[UUID] = None


class ApproveRequest(BaseModel):
    notes: Optional[str] = None


class RejectRequest(BaseModel):
    reason: Optional[str] = None


class DonationRequestResponse(BaseModel):
    id: UUID
    patient_id: Optional[UUID] = None
    hospital_name: str
    location: str
    blood_group: BloodGroup
    units_needed: int
    urgency_level: UrgencyLevel
    contact_number: str
    notes: Optional[str] = None
    status: RequestStatus
    admin_notes: Optional[str] = None
    rejection_reason: Optional[str] = None
    reviewed_by: Optional[UUID] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SuitableDonor(BaseModel):
    id: UUID
    name: str
    email: str
    phone: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    city: Optional[str] = None
    total_donations: int
    last_donation_date: Optional[datetime] = None
    is_same_city: bool


class DonorMatchResult(BaseModel):
    request: DonationRequestResponse
    suitableDonors: List[SuitableDonor]
    total: int


class NotifyResult(BaseModel):
    notified_count: int
    donors: List[UserSummary]
