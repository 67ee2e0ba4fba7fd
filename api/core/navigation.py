"""
Navigation signal used by form actions.

A successful action ends the request with `redirect(path)`. The exception
is turned into a 303 response by the handler registered in `api/main.py`.
"""

from __future__ import annotations

from typing import NoReturn

from fastapi import Request
from fastapi.responses import RedirectResponse


class Redirect(Exception):
    def __init__(self, location: str) -> None:
        super().__init__(location)
        self.location = location


def redirect(location: str) -> NoReturn:
    raise Redirect(location)


async def redirect_handler(_: Request, exc: Redirect) -> RedirectResponse:
    return RedirectResponse(url=exc.location, status_code=303)
