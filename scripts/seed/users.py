#!/usr/bin/env python3
"""
Seed one account per role for local development.

Accounts:
1. admin@lms.test      / admin123 (admin)
2. instructor@lms.test / teach123 (instructor)
3. trainee@lms.test    / learn123 (trainee, code NHIS/T/1001)

Idempotent: accounts whose email already exists are skipped.
"""

import asyncio
import os
import sys

# Add project root to path
project_root = os.path.dirname(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
)
sys.path.insert(0, project_root)

from libs.common.config import get_settings
from libs.common.passwords import hash_password
from libs.db.config import AsyncSessionLocal
from services.lms_service.models import User, UserRole
from sqlalchemy.future import select

SEED_USERS = [
    {
        "first_name": "IT",
        "last_name": "Admin",
        "email": "admin@lms.test",
        "password": "admin123",
        "role": UserRole.ADMIN.value,
    },
    {
        "first_name": "Ian",
        "last_name": "Instructor",
        "email": "instructor@lms.test",
        "title": "Dr.",
        "password": "teach123",
        "role": UserRole.INSTRUCTOR.value,
    },
    {
        "first_name": "Tina",
        "last_name": "Trainee",
        "email": "trainee@lms.test",
        "password": "learn123",
        "role": UserRole.TRAINEE.value,
        "trainee_id": "NHIS/T/1001",
    },
]


async def seed_users():
    """Create the seed accounts that are not there yet."""
    settings = get_settings()

    async with AsyncSessionLocal() as session:
        async with session.begin():
            for user_data in SEED_USERS:
                data = dict(user_data)
                password = data.pop("password")

                stmt = select(User).where(User.email == data["email"])
                result = await session.execute(stmt)
                if result.scalar_one_or_none():
                    print(f"  User '{data['email']}' already exists, skipping...")
                    continue

                session.add(
                    User(
                        **data,
                        password_hash=hash_password(password),
                        profile_picture=settings.DEFAULT_AVATAR,
                    )
                )
                print(f"  Created {data['role']}: {data['email']}")

            print("\n✓ User seed data complete!")


if __name__ == "__main__":
    print("Seeding users...")
    asyncio.run(seed_users())
