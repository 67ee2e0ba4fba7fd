"""
Sign-in / sign-out endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from core.templates import templates

from . import dependencies, service

router = APIRouter()


def _safe_callback(url: str | None, default: str) -> str:
    # Only same-site paths; never follow absolute or protocol-relative URLs.
    url = (url or "").strip()
    if not url.startswith("/") or url.startswith("//"):
        return default
    return url


@router.get("/login", response_class=HTMLResponse, dependencies=[Depends(dependencies.redirect_if_signed_in)])
async def login_page(
    request: Request,
    callback_url: str | None = Query(default=None, alias="callbackUrl"),
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "login.html",
        {"error": None, "email": "", "callback_url": callback_url or ""},
    )


@router.post("/login")
async def login(
    request: Request,
    auth: service.AuthService = Depends(dependencies.get_auth_service),
):
    form = await request.form()
    outcome = await service.authenticate(auth, form)
    if outcome.error is not None:
        return templates.TemplateResponse(
            request,
            "login.html",
            {
                "error": outcome.error,
                "email": str(form.get("email") or ""),
                "callback_url": str(form.get("redirectTo") or ""),
            },
        )

    target = _safe_callback(str(form.get("redirectTo") or ""), auth.settings.home_path)
    response = RedirectResponse(url=target, status_code=303)
    auth.set_session_cookie(response, outcome.token)
    return response


@router.post("/logout")
async def logout(auth: service.AuthService = Depends(dependencies.get_auth_service)) -> RedirectResponse:
    response = RedirectResponse(url=auth.settings.login_path, status_code=303)
    auth.sign_out(response)
    return response
