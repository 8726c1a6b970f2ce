import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from medicare_api.database import Base, generate_uuid
from medicare_api.models.base import utcnow
from medicare_api.models.enums import BloodGroup, UserRole, UserStatus, value_enum


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(value_enum(UserRole, "userrole"), nullable=False, index=True)
    status: Mapped[UserStatus] = mapped_column(
        value_enum(UserStatus, "userstatus"),
        nullable=False,
        default=UserStatus.ACTIVE,
    )
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(16), nullable=True)
    blood_group: Mapped[BloodGroup | None] = mapped_column(value_enum(BloodGroup, "bloodgroup"), nullable=True)
    city: Mapped[str | None] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
