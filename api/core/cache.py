"""
Rendered-page cache for prerendered routes.

Routes opt in with `@prerender(experimental_ppr=True)`. Whether an opted-in
route is actually cached depends on `PPR_MODE` (see `core/settings.py`).
Mutations drop stale pages with `revalidate_path()`.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping
from urllib.parse import urlencode

from fastapi import Request
from fastapi.responses import HTMLResponse, Response

DEFAULT_MAX_ENTRIES = 128

logger = logging.getLogger(__name__)


class PageCache:
    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        self.max_entries = max(1, max_entries)
        self._pages: dict[str, bytes] = {}

    @staticmethod
    def key_for(path: str, params: Mapping[str, Any] | None = None) -> str:
        query = urlencode(sorted((params or {}).items()))
        return f"{path}?{query}" if query else path

    def get(self, key: str) -> bytes | None:
        return self._pages.get(key)

    def put(self, key: str, body: bytes) -> None:
        self._pages.pop(key, None)
        # Oldest entries go first once the cache is full.
        while len(self._pages) >= self.max_entries:
            del self._pages[next(iter(self._pages))]
        self._pages[key] = body

    def __contains__(self, key: str) -> bool:
        return key in self._pages

    def __len__(self) -> int:
        return len(self._pages)

    def revalidate_path(self, path: str) -> int:
        """
        Drop the cached page for `path`, including every query-string variant.
        """
        path = path.rstrip("/") or "/"
        stale = [k for k in self._pages if k == path or k.startswith(path + "?")]
        for key in stale:
            del self._pages[key]
        logger.debug("revalidate_path path=%s dropped=%s", path, len(stale))
        return len(stale)


def _should_cache(mode: str, experimental_ppr: bool) -> bool:
    if mode == "all":
        return True
    if mode == "incremental":
        return experimental_ppr
    return False


def prerender(*, experimental_ppr: bool = False, vary: tuple[str, ...] = ()):
    """
    Cache the HTML produced by a GET endpoint.

    The endpoint must accept `request: Request` as a keyword argument. The
    cache key is the path plus the validated endpoint parameters named in
    `vary`; any other query parameters do not create new entries.
    """

    def decorator(func: Callable[..., Awaitable[Any]]):
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            request: Request = kwargs["request"]
            cache: PageCache | None = getattr(request.app.state, "page_cache", None)
            mode = getattr(request.app.state, "ppr_mode", "off")
            if cache is None or not _should_cache(mode, experimental_ppr):
                return await func(*args, **kwargs)

            key = PageCache.key_for(request.url.path, {name: kwargs[name] for name in vary})
            cached = cache.get(key)
            if cached is not None:
                return HTMLResponse(content=cached)

            response: Response = await func(*args, **kwargs)
            if isinstance(response, HTMLResponse) and response.status_code == 200:
                cache.put(key, bytes(response.body))
            return response

        # Resolve string annotations against the endpoint module, not this one.
        wrapper.__signature__ = inspect.signature(func, eval_str=True)
        return wrapper

    return decorator
