"""
EstateHub — application entry point.

This is the **only** file that assembles the app.  Business logic lives
in the `services/` package, HTTP wiring in `api/`, and cross-cutting
concerns (config, errors, auth guard, rate limiting) in `core/`.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.middleware import SlowAPIMiddleware

from estatehub.api.api import api_router
from estatehub.core.config import settings
from estatehub.core.exceptions import ConflictError, register_exception_handlers
from estatehub.core.rate_limit import limiter
from estatehub.db.base import Base
from estatehub.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from estatehub.models.contact import AgentContact, Contact  # noqa: F401
from estatehub.models.listing import Land, Project, Property  # noqa: F401
from estatehub.models.user import User  # noqa: F401
from estatehub.services.credentials import CredentialService

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def _seed_first_admin() -> None:
    if not (settings.FIRST_ADMIN_EMAIL and settings.FIRST_ADMIN_PASSWORD):
        return
    async with async_session_factory() as session:
        service = CredentialService(session, settings)
        try:
            await service.register(
                settings.FIRST_ADMIN_EMAIL,
                settings.FIRST_ADMIN_PASSWORD,
                name="System Administrator",
                role="admin",
            )
        except ConflictError:
            return
        logger.info("Default admin created: %s (password: <redacted>)", settings.FIRST_ADMIN_EMAIL)


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    await _seed_first_admin()

    logger.info("%s v%s started (%s)", settings.PROJECT_NAME, settings.VERSION, settings.ENVIRONMENT)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Real-estate listings: properties, projects and lands",
        version=settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS (credentials allowed so the session cookie crosses origins)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
        max_age=3600,
    )

    # Rate limiting: global default plus per-route auth limits
    application.state.limiter = limiter
    application.add_middleware(SlowAPIMiddleware)

    # Global exception handlers (uniform envelope, no stack-trace leakage)
    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_PREFIX)

    return application


app = create_app()
