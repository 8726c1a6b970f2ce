"""Donation requests raised by hospitals and the donations that (may) fulfil them."""
import uuid
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medicare_api.database import Base, generate_uuid
from medicare_api.models.base import utcnow
from medicare_api.models.enums import (
    BloodGroup,
    DonationStatus,
    RequestStatus,
    UrgencyLevel,
    value_enum,
)
from medicare_api.models.user import User


class DonationRequest(Base):
    __tablename__ = "donation_requests"
    __table_args__ = (
        CheckConstraint("units_needed > 0", name="ck_donation_requests_units_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=generate_uuid)
    # Patient the blood is for; their city drives same-city donor ranking
    patient_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    hospital_name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    blood_group: Mapped[BloodGroup] = mapped_column(value_enum(BloodGroup, "bloodgroup"), nullable=False, index=True)
    units_needed: Mapped[int] = mapped_column(Integer, nullable=False)
    urgency_level: Mapped[UrgencyLevel] = mapped_column(
        value_enum(UrgencyLevel, "urgencylevel"),
        nullable=False,
        default=UrgencyLevel.MEDIUM,
    )
    contact_number: Mapped[str] = mapped_column(String(32), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[RequestStatus] = mapped_column(
        value_enum(RequestStatus, "requeststatus"),
        nullable=False,
        default=RequestStatus.ACTIVE,
        index=True,
    )
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_by: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    rejected_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    patient: Mapped[User | None] = relationship(User, foreign_keys=[patient_id])


class Donation(Base):
    __tablename__ = "donations"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=generate_uuid)
    donor_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Weak reference: the request outlives or predates the donation independently
    request_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("donation_requests.id", ondelete="SET NULL"), nullable=True
    )
    hospital_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    blood_group: Mapped[BloodGroup] = mapped_column(value_enum(BloodGroup, "bloodgroup"), nullable=False)
    units: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    status: Mapped[DonationStatus] = mapped_column(
        value_enum(DonationStatus, "donationstatus"),
        nullable=False,
        default=DonationStatus.COMPLETED,
        index=True,
    )
    donation_code: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
