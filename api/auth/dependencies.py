"""
Auth dependencies for server-rendered routes.

Dashboard pages require a session cookie; anonymous visitors are sent to the
login page. Signed-in users opening the login page go to the dashboard.
"""

from __future__ import annotations

from urllib.parse import quote

from fastapi import Depends, Request

from core.navigation import redirect

from .service import AuthService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


async def get_session(request: Request, auth: AuthService = Depends(get_auth_service)) -> dict | None:
    return auth.auth(request.cookies.get(auth.settings.cookie_name))


async def get_current_user(request: Request, session: dict | None = Depends(get_session)) -> dict:
    if session is None:
        auth: AuthService = request.app.state.auth
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        redirect(f"{auth.settings.login_path}?callbackUrl={quote(target, safe='')}")
    return session


async def redirect_if_signed_in(
    auth: AuthService = Depends(get_auth_service),
    session: dict | None = Depends(get_session),
) -> None:
    if session is not None:
        redirect(auth.settings.home_path)
