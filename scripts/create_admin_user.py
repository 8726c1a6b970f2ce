#!/usr/bin/env python3
"""
Production script to create initial admin user
Usage: python scripts/create_admin_user.py [email] [password]
"""
import asyncio
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import select
from medicare_api.database import async_session_factory, engine, init_db
from medicare_api.models import User, UserRole, UserStatus
from medicare_api.core.exceptions import ValidationError
from medicare_api.core.security import hash_password, validate_password

DEFAULT_EMAIL = "admin@medicare.com"
DEFAULT_PASSWORD = "Admin@123"


async def create_admin_user(email: str, password: str):
    """Create initial admin user for production setup."""
    await init_db()

    async with async_session_factory() as db:
        try:
            existing = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
            if existing:
                if existing.role != UserRole.ADMIN:
                    existing.role = UserRole.ADMIN
                    existing.status = UserStatus.ACTIVE
                    await db.commit()
                    print(f"✅ Existing user {email} promoted to admin")
                else:
                    print("✅ Admin user already exists")
                return

            db.add(User(
                name="System Administrator",
                email=email,
                hashed_password=hash_password(password),
                role=UserRole.ADMIN,
                status=UserStatus.ACTIVE,
            ))
            await db.commit()
            print("✅ Admin user created successfully!")
            print(f"📧 Email: {email}")
            print(f"🔑 Password: {password}")
            print("⚠️  Please change the password after first login!")

        except Exception as e:
            print(f"❌ Error creating admin user: {e}")
            await db.rollback()
            raise
    await engine.dispose()


if __name__ == "__main__":
    email = sys.argv[1] if len(sys.argv) > 1 else DEFAULT_EMAIL
    password = sys.argv[2] if len(sys.argv) > 2 else DEFAULT_PASSWORD
    try:
        validate_password(password)
    except ValidationError as e:
        print(f"❌ {e.message}")
        sys.exit(1)
    asyncio.run(create_admin_user(email.lower(), password))
