"""
Environment-driven settings.

Everything is read from environment variables so the same image works in
local dev and in deployment. Values are read at call time; `main.create_app()`
reads them once on startup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

PPR_MODES = ("incremental", "all", "off")


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def ppr_mode() -> str:
    """
    Partial prerendering mode.

    - incremental: only routes decorated with `experimental_ppr=True` are cached
    - all: every decorated route is cached
    - off: nothing is cached
    """
    raw = _env_str("PPR_MODE", "incremental").lower()
    if raw == "true":
        return "all"
    if raw in ("false", "0"):
        return "off"
    return raw if raw in PPR_MODES else "incremental"


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def configure_logging() -> None:
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@dataclass(frozen=True)
class AuthSettings:
    secret: str
    algorithm: str = "HS256"
    session_max_age_s: int = 30 * 24 * 60 * 60
    cookie_name: str = "session"
    login_path: str = "/login"
    home_path: str = "/dashboard"


def auth_settings() -> AuthSettings:
    # Local default keeps development simple.
    # In production, set AUTH_SECRET in environment.
    return AuthSettings(
        secret=_env_str("AUTH_SECRET", "dev-change-this-secret"),
        algorithm=_env_str("JWT_ALG", "HS256"),
        session_max_age_s=_env_int("AUTH_SESSION_MAX_AGE_S", 30 * 24 * 60 * 60),
        cookie_name=_env_str("AUTH_COOKIE_NAME", "session"),
    )
