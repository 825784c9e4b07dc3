"""
Shared test fixtures for the EstateHub test suite.

Each test gets a fresh in-memory SQLite database (aiosqlite + StaticPool)
and an httpx AsyncClient wired to the app with ``get_db`` overridden.
"""

import os
import sys
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest

# Ensure project root is importable
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

# Override environment BEFORE importing application modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CORS_ORIGINS"] = "http://test"

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from estatehub.api.deps import get_db  # noqa: E402
from estatehub.core.config import Settings  # noqa: E402
from estatehub.db.base import Base  # noqa: E402
from estatehub.main import app  # noqa: E402
from estatehub.models.listing import Land, Project, Property  # noqa: E402

STRONG_PASSWORD = "Abcdefg1"
BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(SECRET_KEY="test-secret-key", RATE_LIMIT_ENABLED=False)


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh database per test: create all tables, drop the engine afterwards."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Return a raw database session for direct queries in tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Return a httpx AsyncClient wired to the app."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db, None)


# ── Listing helpers ─────────────────────────────────────────────────
def make_listing(model, name: str, minutes: int = 0, **fields):
    """Build a listing row; ``minutes`` offsets created_at from a fixed base."""
    fields.setdefault("image_urls", [])
    fields.setdefault("location_city", "Downtown")
    fields.setdefault("location_neighborhood", "Old Quarter")
    return model(name=name, created_at=BASE_TIME + timedelta(minutes=minutes), **fields)


@pytest.fixture
async def seeded_listings(db_session: AsyncSession) -> AsyncSession:
    """Three properties (300 / 200 / unpriced), one project, one land at 150."""
    db_session.add_all(
        [
            make_listing(Property, "Villa Mare", 1, price=300, location_city="Seaside",
                         details="Sea views from the balcony."),
            make_listing(Property, "Cozy Studio", 2, price=200,
                         location_neighborhood="Seaside Heights", details="Close to transport."),
            make_listing(Property, "Unpriced Loft", 3, price=None, details="A hidden villa gem."),
            make_listing(Project, "Seaside Towers", 4, price_range="50k - 300k",
                         location_city="Hillside"),
            make_listing(Land, "Land Plot 7", 5, price=150, location_city="Riverside"),
        ]
    )
    await db_session.commit()
    return db_session
