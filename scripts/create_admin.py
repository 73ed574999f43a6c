#!/usr/bin/env python3
"""
Create (or promote) an admin account for the iSafari marketplace.

Admins cannot self-register; this script and POST /admin/users are the only
ways to obtain one.

Reads settings from .env:
    DATABASE_URL     — marketplace database (required)
    ADMIN_EMAIL      — admin account email (required)
    ADMIN_PASSWORD   — admin account password (required)
    ADMIN_NAME       — display name (optional, defaults to "Marketplace Admin")

Usage:
    cd <repo>
    python -m scripts.create_admin
"""
from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

# Add backend root to path so imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "services" / "marketplace"))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "shared"))

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from sqlalchemy.ext.asyncio import async_sessionmaker

from app.admin.service import create_admin_user
from app.auth.service import get_user_by_email
from app.auth.utils import split_display_name
from shared.constants import Role
from shared.database.postgres import get_async_engine


async def main() -> int:
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        print("Error: ADMIN_EMAIL and ADMIN_PASSWORD must be set in .env")
        return 1
    first_name, last_name = split_display_name(
        os.getenv("ADMIN_NAME"), fallback="Marketplace Admin"
    )
    engine = get_async_engine(os.environ["DATABASE_URL"])
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    try:
        async with session_factory() as session:
            existing = await get_user_by_email(session, email)

            if existing is not None:
                print(f"User {email} already exists (id={existing.id}).")
                if existing.role != Role.ADMIN:
                    existing.role = Role.ADMIN
                    await session.commit()
                    print("  -> Promoted to admin.")
                else:
                    print("  -> Already an admin. Nothing to do.")
                return 0

            resolution = await create_admin_user(
                session,
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name,
            )
            if not resolution.ok:
                print(f"Error: could not create {email}: {resolution.error.value}")
                return 1
            await session.commit()
            print(f"Admin created: {resolution.user.email} (id={resolution.user.id})")
            return 0
    finally:
        await engine.dispose()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
