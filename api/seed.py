"""
Create tables and a demo login for local development.

Usage (from `api/`):
    DATABASE_URL=postgres://... python -m seed
"""

from __future__ import annotations

import asyncio
import logging
import os

from auth import repository as auth_repository
from auth import security
from core import db, settings

logger = logging.getLogger(__name__)

SCHEMA = (
    'CREATE EXTENSION IF NOT EXISTS "uuid-ossp"',
    """
    CREATE TABLE IF NOT EXISTS users (
        id UUID DEFAULT uuid_generate_v4() PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        email TEXT NOT NULL UNIQUE,
        password TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS customers (
        id UUID DEFAULT uuid_generate_v4() PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        email VARCHAR(255) NOT NULL,
        image_url VARCHAR(255) NOT NULL DEFAULT ''
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS invoices (
        id UUID DEFAULT uuid_generate_v4() PRIMARY KEY,
        customer_id UUID NOT NULL REFERENCES customers (id),
        amount INT NOT NULL CHECK (amount > 0),
        status VARCHAR(255) NOT NULL CHECK (status IN ('pending', 'paid')),
        date DATE NOT NULL
    )
    """,
)


async def seed_database(*, email: str, password: str, name: str = "User") -> None:
    for statement in SCHEMA:
        await db.execute(statement)

    existing = await auth_repository.get_user_by_email(email)
    if existing is None:
        await auth_repository.create_user(
            name=name,
            email=email,
            password_hash=security.hash_password(password),
        )
        logger.info("seed_user_created email=%s", email)
    else:
        logger.info("seed_user_exists email=%s", email)


async def _main() -> None:
    settings.configure_logging()
    await db.init_pool()
    try:
        await seed_database(
            email=os.environ.get("SEED_USER_EMAIL", "user@nextmail.com").strip(),
            password=os.environ.get("SEED_USER_PASSWORD", "123456"),
        )
    finally:
        await db.close_pool()


if __name__ == "__main__":
    asyncio.run(_main())
