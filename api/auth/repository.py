"""
Auth persistence helpers.
"""

from __future__ import annotations

from core import db


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id::text AS id, name, email, password
        FROM users
        WHERE email = $1
        """,
        email,
    )


async def create_user(*, name: str, email: str, password_hash: str) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO users (name, email, password)
        VALUES ($1, $2, $3)
        ON CONFLICT (email) DO NOTHING
        RETURNING id::text AS id, name, email
        """,
        name,
        email,
        password_hash,
    )
    if row is None:
        raise db.DatabaseError("Failed to create user.")
    return row
