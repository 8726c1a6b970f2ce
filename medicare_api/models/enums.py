"""Closed value sets shared by the ORM columns and the request/response schemas."""
import enum

from sqlalchemy import Enum


class UserRole(str, enum.Enum):
    PATIENT = "patient"
    CARETAKER = "caretaker"
    DONOR = "donor"
    ADMIN = "admin"


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class BloodGroup(str, enum.Enum):
    A_POS = "A+"
    A_NEG = "A-"
    B_POS = "B+"
    B_NEG = "B-"
    AB_POS = "AB+"
    AB_NEG = "AB-"
    O_POS = "O+"
    O_NEG = "O-"


class UrgencyLevel(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class RequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    APPROVED = "approved"
    REJECTED = "rejected"


class DonationStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class NotificationType(str, enum.Enum):
    DONATION_REQUEST = "donation_request"
    SYSTEM = "system"


class LinkStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class DoseStatus(str, enum.Enum):
    PENDING = "pending"
    TAKEN = "taken"
    MISSED = "missed"
    SKIPPED = "skipped"


# Urgency levels that notify matching donors as soon as a request is created
AUTO_NOTIFY_URGENCY = frozenset({UrgencyLevel.HIGH, UrgencyLevel.CRITICAL})


def value_enum(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Column type storing the enum *values* (e.g. 'A+', 'pending'), not member names."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
