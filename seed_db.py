"""
Seed the database with the admin account.

Set ADMIN_PASSWORD (and optionally ADMIN_EMAIL) in the environment or .env,
then run with:
    python seed_db.py
"""

import asyncio

from sqlalchemy import select
from werkzeug.security import generate_password_hash

import ranker.models  # noqa: F401
from ranker.config import settings
from ranker.database import Base, async_session, engine
from ranker.models.user import User


async def async_main():
    if not settings.ADMIN_PASSWORD:
        print("ADMIN_PASSWORD is not set; refusing to create an admin that cannot sign in.")
        return

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    email = settings.ADMIN_EMAIL.lower()
    async with async_session() as session:
        result = await session.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none():
            print("Admin user already exists!")
        else:
            print("Creating admin user...")
            session.add(
                User(
                    name="Admin User",
                    email=email,
                    password_hash=generate_password_hash(settings.ADMIN_PASSWORD),
                    is_admin=True,
                )
            )
            await session.commit()
            print("Admin user created!")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(async_main())
