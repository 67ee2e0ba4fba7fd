"""
Auth security helpers: bcrypt password hashes and signed session tokens.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import bcrypt
import jwt

from core.settings import AuthSettings


class AuthSecurityError(RuntimeError):
    pass


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


async def verify_password_async(plain_password: str, password_hash: str) -> bool:
    # bcrypt is CPU-bound; keep it off the event loop.
    return await asyncio.to_thread(verify_password, plain_password, password_hash)


def build_session_token(settings: AuthSettings, *, user_id: str, email: str, name: str | None = None) -> str:
    issued_at = now_epoch_s()
    payload = {
        "sub": str(user_id),
        "email": email,
        "name": name,
        "type": "session",
        "iat": issued_at,
        "exp": issued_at + settings.session_max_age_s,
    }
    return jwt.encode(payload, settings.secret, algorithm=settings.algorithm)


def decode_session_token(settings: AuthSettings, token: str) -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Session token is empty.")

    try:
        payload = jwt.decode(raw, settings.secret, algorithms=[settings.algorithm])
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid session token.") from exc

    if str(payload.get("type") or "").strip().lower() != "session":
        raise AuthSecurityError("Token is not a session token.")
    return payload
