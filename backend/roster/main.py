"""Roster API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map RosterError → structured JSON responses
    - CORS, rate limiting and static serving configured from settings (not hardcoded)
    - Repository and media client created on startup via lifespan and kept on app.state

Design Decisions:
    - create_app() factory: tests build apps with their own Settings; `app` is the
      default instance for uvicorn
    - Lifespan skips building a repository that is already on app.state, so tests
      can inject one
    - Middleware order: security headers wrap everything, so 429s carry them too
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from roster.api.error_handlers import register_error_handlers
from roster.api.middleware import RateLimitMiddleware, SecurityHeadersMiddleware
from roster.api.routes import health, students
from roster.config import Settings, get_settings
from roster.infrastructure.media_client import ResilientMediaClient
from roster.infrastructure.observability import setup_logging
from roster.infrastructure.rate_limit import RateLimiter
from roster.infrastructure.repositories import build_repository, close_repository

logger = logging.getLogger(__name__)

SERVICE_NAME = "roster-api"
VERSION = "1.0.0"


def build_media_client(settings: Settings) -> ResilientMediaClient:
    return ResilientMediaClient(
        settings.cloudinary_cloud_name,
        settings.cloudinary_api_key,
        settings.cloudinary_api_secret,
        base_url=settings.cloudinary_base_url,
        max_retries=settings.media_max_retries,
        base_delay_ms=settings.media_base_delay_ms,
        max_delay_ms=settings.media_max_delay_ms,
        timeout_seconds=settings.media_timeout_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_format)

    owns_repository = getattr(app.state, "repository", None) is None
    if owns_repository:
        app.state.repository = await build_repository(settings)
    owns_media_client = getattr(app.state, "media_client", None) is None
    if owns_media_client:
        app.state.media_client = build_media_client(settings)
        if not app.state.media_client.configured:
            logger.warning("Cloudinary credentials missing; file uploads will fail")

    logger.info(
        "Roster API started",
        extra={"backend": app.state.repository.backend_name},
    )
    yield
    logger.info("Roster API shutting down")

    if owns_media_client:
        await app.state.media_client.aclose()
        app.state.media_client = None
    if owns_repository:
        await close_repository(app.state.repository)
        app.state.repository = None


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title="Roster API", version=VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.repository = None
    app.state.media_client = None

    # Added innermost first: CORS, then rate limit, then security headers outermost
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            limiter=RateLimiter(
                settings.rate_limit_max_requests,
                settings.rate_limit_window_seconds,
            ),
        )
    app.add_middleware(SecurityHeadersMiddleware)

    # Routes: explicit registration
    app.include_router(health.router)
    app.include_router(students.router)

    register_error_handlers(app)

    # Static files: serves the client bundle when one is deployed alongside the API.
    # Mounted AFTER API routes so /students and /health take precedence.
    if os.path.isdir(settings.static_dir):
        app.mount(
            "/", StaticFiles(directory=settings.static_dir, html=True), name="static",
        )
    else:
        @app.get("/", tags=["meta"])
        async def root():
            return {
                "message": "Backend running",
                "service": SERVICE_NAME,
                "version": VERSION,
            }

    return app


app = create_app()
