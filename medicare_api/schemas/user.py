from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from uuid import UUID
from medicare_api.models.enums import BloodGroup, UserRole, UserStatus


class UserResponse(BaseModel):
    """Public view of a user; the password hash never leaves the database layer."""
    id: UUID
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    city: Optional[str] = None
    status: UserStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    id: UUID
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class UserStatusUpdate(BaseModel):
    # Kept as a plain string so an unknown value gets the domain error message
    status: Optional[str] = None


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
