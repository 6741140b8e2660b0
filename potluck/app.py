from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from potluck.core.config import Settings, get_settings
from potluck.core.context import AppContext
from potluck.core.log_setup import configure_logging
from potluck.repositories import RsvpStorage, build_storage
from potluck.routers import rsvps as rsvps_router

logger = logging.getLogger(__name__)

DEV_ORIGINS = (
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (anti clickjacking, sniffing, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


class CachedStaticFiles(StaticFiles):
    def file_response(self, *args, **kwargs):
        response = super().file_response(*args, **kwargs)
        # bundler output is fingerprinted
        response.headers["Cache-Control"] = "public, max-age=31536000, immutable"
        return response


async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


def _mount_frontend(app: FastAPI, static_dir: str) -> None:
    """Serve the pre-built single page app, falling back to index.html for client routes."""
    root = Path(static_dir).resolve()
    index = root / "index.html"
    if not index.is_file():
        logger.warning("Static bundle not found at %s; serving API only", root)
        return
    assets = root / "assets"
    if assets.is_dir():
        app.mount("/assets", CachedStaticFiles(directory=str(assets)), name="assets")

    @app.get("/{full_path:path}", include_in_schema=False)
    def spa(full_path: str):
        if full_path.startswith("api/"):
            raise HTTPException(404, "Not Found")
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index)


def create_app(settings: Optional[Settings] = None, storage: Optional[RsvpStorage] = None) -> FastAPI:
    """Factory usable with `uvicorn --factory`; tests inject their own storage."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)
    storage = storage or build_storage(settings)
    storage.ensure_schema()
    if settings.uses_default_admin_password:
        logger.warning("ADMIN_PASSWORD is not set; using the insecure default admin password")

    context = AppContext(settings=settings, storage=storage)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        context.storage.close()

    app = FastAPI(title="Potluck RSVP API", lifespan=lifespan)
    app.state.context = context
    app.add_exception_handler(RequestValidationError, _invalid_body)

    if not settings.is_production:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(DEV_ORIGINS),
            allow_credentials=True,
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.is_production)

    @app.get("/healthz", include_in_schema=False)
    def healthz():
        return {"status": "ok", "backend": context.storage.backend_name}

    app.include_router(rsvps_router.router)

    if settings.is_production:
        _mount_frontend(app, settings.static_dir)
    return app
