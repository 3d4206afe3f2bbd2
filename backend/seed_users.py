"""
Database seeding script for initial users.

Creates the ADMIN user who reviews rider applications. Everyone else
registers through POST /users after signing in with the identity provider.
Run this script after the database is set up but before first use.

Usage:
    python -m backend.seed_users admin@example.com "Site Admin"
"""

import asyncio
import sys

from sqlalchemy import select

from backend.app.core.config import settings
from backend.app.db.session import Database
from backend.app.models.user import User
from backend.app.models.enums import UserRole


async def seed_admin(email: str, name: str = "Admin"):
    """
    Seed the admin user, promoting an existing user if the email is taken.
    """
    database = Database.from_settings(settings)
    await database.create_all()

    try:
        async with database.session_factory() as db:
            print("🌱 Starting user seeding...")
            email = email.lower()

            result = await db.execute(select(User).where(User.email == email))
            existing = result.scalar_one_or_none()

            if existing and existing.role == UserRole.ADMIN:
                print(f"ℹ️  {email} is already an ADMIN, skipping seeding")
                return

            if existing:
                existing.role = UserRole.ADMIN
                print(f"✅ Promoted {email} to ADMIN")
            else:
                db.add(User(email=email, name=name, role=UserRole.ADMIN))
                print(f"✅ Created ADMIN user {email}")

            await db.commit()
            print("\n🎉 User seeding completed successfully!")
    finally:
        await database.dispose()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python -m backend.seed_users <email> [name]")
        sys.exit(2)
    asyncio.run(seed_admin(*sys.argv[1:3]))
