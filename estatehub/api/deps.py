"""
FastAPI dependencies — database session, services and the session guard.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from estatehub.core.config import Settings, get_settings
from estatehub.core.guard import Identity, SessionGuard
from estatehub.db.session import async_session_factory
from estatehub.services.contacts import ContactRecorder, RequestMeta
from estatehub.services.credentials import CredentialService
from estatehub.services.listings import ListingAggregator


# ── Database session ────────────────────────────────────────────────
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# ── Services ────────────────────────────────────────────────────────
def get_credential_service(
    db: AsyncSession = Depends(get_db),
    config: Settings = Depends(get_settings),
) -> CredentialService:
    return CredentialService(db, config)


def get_listing_aggregator(
    db: AsyncSession = Depends(get_db),
    config: Settings = Depends(get_settings),
) -> ListingAggregator:
    return ListingAggregator(db, config)


def get_contact_recorder(db: AsyncSession = Depends(get_db)) -> ContactRecorder:
    return ContactRecorder(db)


async def get_request_meta(request: Request) -> RequestMeta:
    """Path, client details and the raw JSON body of the current request."""
    raw_body = await request.json() if await request.body() else None
    return RequestMeta(
        path=request.url.path,
        user_agent=request.headers.get("user-agent"),
        ip_address=request.client.host if request.client else None,
        raw_body=raw_body,
    )


# ── Auth dependencies ───────────────────────────────────────────────
def get_session_guard(config: Settings = Depends(get_settings)) -> SessionGuard:
    return SessionGuard(config)


async def require_identity(
    request: Request,
    guard: SessionGuard = Depends(get_session_guard),
) -> Identity:
    """Cookie first, then Bearer header; identity lives on ``request.state``."""
    identity = guard.authenticate(request.cookies, request.headers)
    request.state.identity = identity
    return identity
