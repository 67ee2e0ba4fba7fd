"""
Auth business logic.

`AuthService` is built once in `main.create_app()` with its settings and
provider list, then stored on `app.state.auth`. Request handlers reach it
through `auth.dependencies`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

from fastapi import Response

from core import db
from core.settings import AuthSettings

from . import security
from .providers import Provider, UserLookupError

logger = logging.getLogger(__name__)


class AuthErrorType(str, enum.Enum):
    CREDENTIALS_SIGNIN = "CredentialsSignin"
    CALLBACK_ROUTE_ERROR = "CallbackRouteError"
    CONFIGURATION = "Configuration"


class AuthError(Exception):
    def __init__(self, error_type: AuthErrorType, message: str = "") -> None:
        super().__init__(message or error_type.value)
        self.type = error_type


class AuthService:
    def __init__(self, settings: AuthSettings, providers: Sequence[Provider]) -> None:
        self.settings = settings
        self._providers = {provider.id: provider for provider in providers}

    def provider(self, provider_id: str) -> Provider:
        provider = self._providers.get(provider_id)
        if provider is None:
            raise AuthError(AuthErrorType.CONFIGURATION, f"Unknown provider: {provider_id}")
        return provider

    async def sign_in(self, provider_id: str, form: Mapping[str, Any]) -> str:
        """
        Authorize with one provider and return a session token.
        """
        provider = self.provider(provider_id)
        try:
            user = await provider.authorize(form)
        except (UserLookupError, db.DatabaseError) as exc:
            logger.exception("authorize_failed provider=%s", provider_id)
            raise AuthError(AuthErrorType.CALLBACK_ROUTE_ERROR) from exc

        if user is None:
            raise AuthError(AuthErrorType.CREDENTIALS_SIGNIN)

        logger.info("sign_in provider=%s user_id=%s", provider_id, user.get("id"))
        return security.build_session_token(
            self.settings,
            user_id=str(user["id"]),
            email=str(user["email"]),
            name=user.get("name"),
        )

    def auth(self, token: str | None) -> dict | None:
        """
        Session payload for a cookie value, or None when absent/invalid/expired.
        """
        if not token:
            return None
        try:
            payload = security.decode_session_token(self.settings, token)
        except security.AuthSecurityError:
            return None
        return {"id": payload["sub"], "email": payload.get("email"), "name": payload.get("name")}

    def set_session_cookie(self, response: Response, token: str) -> None:
        response.set_cookie(
            self.settings.cookie_name,
            token,
            max_age=self.settings.session_max_age_s,
            httponly=True,
            samesite="lax",
        )

    def sign_out(self, response: Response) -> None:
        response.delete_cookie(self.settings.cookie_name)


@dataclass(frozen=True)
class SignInOutcome:
    token: str | None = None
    error: str | None = None


async def authenticate(auth: AuthService, form: Mapping[str, Any]) -> SignInOutcome:
    """
    Sign in with credentials and map auth failures to user-facing messages.

    Anything that is not an `AuthError` is re-raised.
    """
    try:
        token = await auth.sign_in("credentials", form)
    except AuthError as error:
        if error.type is AuthErrorType.CREDENTIALS_SIGNIN:
            return SignInOutcome(error="Invalid credentials.")
        return SignInOutcome(error="Something went wrong.")
    return SignInOutcome(token=token)
