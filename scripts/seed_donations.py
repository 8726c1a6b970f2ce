#!/usr/bin/env python3
"""
Seed a donor, a patient, three donation requests and three completed donations.
Usage: python scripts/seed_donations.py
"""
import asyncio
import sys
import os
import time
from datetime import timedelta
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select
from medicare_api.database import async_session_factory, engine, init_db
from medicare_api.models import (
    BloodGroup,
    Donation,
    DonationRequest,
    DonationStatus,
    RequestStatus,
    UrgencyLevel,
    User,
    UserRole,
)
from medicare_api.models.base import utcnow
from medicare_api.core.security import hash_password


async def get_or_create_user(db, email: str, **fields) -> User:
    user = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
    if user:
        print(f"✅ Found existing user: {email}")
        return user
    user = User(email=email, hashed_password=hash_password("Test@123"), **fields)
    db.add(user)
    await db.flush()
    print(f"✅ Created user: {email}")
    return user


async def seed_donations():
    await init_db()
    now = utcnow()
    stamp = int(time.time())

    async with async_session_factory() as db:
        try:
            donor = await get_or_create_user(
                db, "test3@gmail.com",
                name="Test Donor 3", role=UserRole.DONOR, phone="9876543210",
                age=28, gender="male", blood_group=BloodGroup.B_POS, city="Mumbai",
            )
            patient = await get_or_create_user(
                db, "patient@gmail.com",
                name="Test Patient", role=UserRole.PATIENT, phone="9876543211",
                age=35, gender="female", blood_group=BloodGroup.A_POS, city="Mumbai",
            )

            requests = [
                DonationRequest(
                    patient_id=patient.id, hospital_name="KEM Hospital", location="Parel, Mumbai",
                    blood_group=BloodGroup.B_POS, units_needed=2, urgency_level=UrgencyLevel.CRITICAL,
                    contact_number="9876543210", notes="Urgent blood requirement for surgery patient",
                    status=RequestStatus.ACTIVE,
                ),
                DonationRequest(
                    patient_id=patient.id, hospital_name="Lilavati Hospital", location="Bandra, Mumbai",
                    blood_group=BloodGroup.A_POS, units_needed=1, urgency_level=UrgencyLevel.HIGH,
                    contact_number="9876543211", notes="Emergency blood transfusion needed",
                    status=RequestStatus.ACTIVE,
                ),
                DonationRequest(
                    patient_id=patient.id, hospital_name="Hinduja Hospital", location="Mahim, Mumbai",
                    blood_group=BloodGroup.O_POS, units_needed=3, urgency_level=UrgencyLevel.MEDIUM,
                    contact_number="9876543212", notes="Planned surgery next week",
                    status=RequestStatus.PENDING,
                ),
            ]
            db.add_all(requests)
            await db.flush()
            print(f"✅ Created {len(requests)} donation requests")

            donations = [
                Donation(
                    donor_id=donor.id, request_id=requests[0].id, hospital_name="KEM Hospital",
                    location="Parel, Mumbai", blood_group=BloodGroup.B_POS, units=1,
                    date=now - timedelta(days=5), status=DonationStatus.COMPLETED,
                    donation_code=f"DON{stamp}001", notes="Blood donation completed successfully",
                ),
                Donation(
                    donor_id=donor.id, request_id=requests[1].id, hospital_name="Lilavati Hospital",
                    location="Bandra, Mumbai", blood_group=BloodGroup.B_POS, units=2,
                    date=now - timedelta(days=10), status=DonationStatus.COMPLETED,
                    donation_code=f"DON{stamp}002", notes="Emergency donation completed",
                ),
                Donation(
                    donor_id=donor.id, request_id=None, hospital_name="Hinduja Hospital",
                    location="Mahim, Mumbai", blood_group=BloodGroup.B_POS, units=1,
                    date=now - timedelta(days=1), status=DonationStatus.COMPLETED,
                    donation_code=f"DON{stamp}003", notes="Regular voluntary donation",
                ),
            ]
            db.add_all(donations)
            await db.commit()
            print(f"✅ Created {len(donations)} donation records")

            print("\n🎉 Donation data seeding completed successfully!")
            print(f"   - Donor: {donor.email} ({donor.blood_group.value})")
            print(f"   - Patient: {patient.email}")
        except Exception as e:
            print(f"❌ Error seeding donation data: {e}")
            await db.rollback()
            raise
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_donations())
