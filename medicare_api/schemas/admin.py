from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, Optional
from datetime import datetime
from uuid import UUID
from medicare_api.models.enums import LinkStatus
from medicare_api.schemas.user import UserSummary


class RoleCounts(BaseModel):
    patient: int = 0
    caretaker: int = 0
    donor: int = 0
    admin: int = 0


class UserCounts(BaseModel):
    total: int
    byRole: RoleCounts


class SystemAnalytics(BaseModel):
    users: UserCounts
    medications: int
    donations: int
    doses: int
    caretakerPatientLinks: int


class LinkResponse(BaseModel):
    id: UUID
    caretaker_id: UUID
    patient_id: UUID
    status: LinkStatus
    created_at: datetime
    caretaker: Optional[UserSummary] = None
    patient: Optional[UserSummary] = None

    model_config = ConfigDict(from_attributes=True)


class ActivityEntry(BaseModel):
    type: str
    timestamp: Optional[datetime] = None
    data: Dict[str, Any]
