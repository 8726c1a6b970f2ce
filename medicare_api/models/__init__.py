# Database models
from .enums import (
    AUTO_NOTIFY_URGENCY,
    BloodGroup,
    DonationStatus,
    DoseStatus,
    LinkStatus,
    NotificationType,
    RequestStatus,
    UrgencyLevel,
    UserRole,
    UserStatus,
)
from .user import User
from .donation import Donation, DonationRequest
from .notification import Notification
from .care import Dose, Link, Medication
