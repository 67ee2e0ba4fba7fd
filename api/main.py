from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse

from auth import router as auth_router
from auth.providers import CredentialsProvider
from auth.service import AuthService
from core import db, settings
from core.cache import PageCache
from core.navigation import Redirect, redirect_handler
from core.templates import templates
from invoices import router as invoices_router


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


def create_app(*, auth_service: AuthService | None = None, page_cache: PageCache | None = None) -> FastAPI:
    settings.configure_logging()

    app = FastAPI(lifespan=lifespan)

    # Built once per process and shared by reference with every request.
    app.state.auth = (
        auth_service if auth_service is not None else AuthService(settings.auth_settings(), [CredentialsProvider()])
    )
    app.state.page_cache = page_cache if page_cache is not None else PageCache()
    app.state.ppr_mode = settings.ppr_mode()

    app.add_exception_handler(Redirect, redirect_handler)

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(invoices_router.router, tags=["invoices"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/", response_class=HTMLResponse)
    def root(request: Request) -> HTMLResponse:
        return templates.TemplateResponse(request, "index.html", {})

    return app


app = create_app()
