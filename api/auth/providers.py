"""
Sign-in providers.

A provider turns a raw form submission into a user row, or None when the
credentials are not accepted. It never raises for "unknown user" or "wrong
password"; both collapse to None.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Mapping, Protocol

from core import db

from . import repository, schemas, security

logger = logging.getLogger(__name__)

UserLookup = Callable[[str], Awaitable[dict | None]]


class UserLookupError(RuntimeError):
    pass


class Provider(Protocol):
    id: str

    async def authorize(self, credentials: Mapping[str, Any]) -> dict | None: ...


class CredentialsProvider:
    id = "credentials"

    def __init__(self, get_user: UserLookup | None = None) -> None:
        self._get_user = get_user or repository.get_user_by_email

    async def _fetch_user(self, email: str) -> dict | None:
        try:
            return await self._get_user(email)
        except db.DatabaseError as exc:
            logger.error("user_lookup_failed email=%s", email)
            raise UserLookupError("Failed to fetch user.") from exc

    async def authorize(self, credentials: Mapping[str, Any]) -> dict | None:
        parsed = schemas.validate_credentials(credentials)
        if not parsed.success:
            return None

        email, password = parsed.data.email, parsed.data.password
        user = await self._fetch_user(email)
        if user is None:
            return None

        if await security.verify_password_async(password, str(user.get("password") or "")):
            return user
        return None
