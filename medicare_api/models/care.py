"""Medication-adherence side of the schema: medications, their doses, caretaker links."""
import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from medicare_api.database import Base, generate_uuid
from medicare_api.models.base import utcnow
from medicare_api.models.enums import DoseStatus, LinkStatus, value_enum
from medicare_api.models.user import User


class Medication(Base):
    __tablename__ = "medications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=generate_uuid)
    patient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    dosage: Mapped[str | None] = mapped_column(String(64), nullable=True)
    frequency: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    patient: Mapped[User] = relationship(User)
    doses: Mapped[list["Dose"]] = relationship("Dose", back_populates="medication", cascade="all, delete-orphan")


class Dose(Base):
    __tablename__ = "doses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=generate_uuid)
    medication_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("medications.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[DoseStatus] = mapped_column(
        value_enum(DoseStatus, "dosestatus"),
        nullable=False,
        default=DoseStatus.PENDING,
    )
    scheduled_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    taken_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    medication: Mapped[Medication] = relationship(Medication, back_populates="doses")


class Link(Base):
    """Caretaker to patient assignment."""

    __tablename__ = "links"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=generate_uuid)
    caretaker_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    patient_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[LinkStatus] = mapped_column(
        value_enum(LinkStatus, "linkstatus"),
        nullable=False,
        default=LinkStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    caretaker: Mapped[User] = relationship(User, foreign_keys=[caretaker_id])
    patient: Mapped[User] = relationship(User, foreign_keys=[patient_id])
