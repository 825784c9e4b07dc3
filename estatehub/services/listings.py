"""
Listing aggregation across properties, projects and lands.

Each record kind is a ``ListingSource`` that runs its own ordered,
limited query; the aggregator fans out to every source and k-way merges
the already-sorted streams on the shared ordering key.

Filters are modelled as small predicate objects compiled to SQLAlchemy
expressions.  User input only ever reaches the database as a bound
parameter, and LIKE metacharacters are escaped before wrapping.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass
from itertools import islice
from typing import Any, Union

from sqlalchemy import and_, or_, select, true
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from estatehub.core.config import Settings
from estatehub.models.listing import Land, Project, Property

logger = logging.getLogger(__name__)

POPULAR_DEFAULT_LIMIT = 6
SEARCH_DEFAULT_LIMIT = 20
LIKE_ESCAPE = "\\"

KEYWORD_FIELDS = ("name", "details")
LOCATION_FIELDS = ("location_city", "location_neighborhood")


# ── Predicates ──────────────────────────────────────────────────────
def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user text only ever matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


@dataclass(frozen=True)
class Always:
    def compile(self, model: type) -> ColumnElement[bool]:
        return true()


@dataclass(frozen=True)
class Contains:
    """Case-insensitive substring match against any of ``fields``."""

    fields: tuple[str, ...]
    value: str

    def compile(self, model: type) -> ColumnElement[bool]:
        pattern = f"%{escape_like(self.value)}%"
        return or_(
            *(getattr(model, f).ilike(pattern, escape=LIKE_ESCAPE) for f in self.fields)
        )


@dataclass(frozen=True)
class AllOf:
    predicates: tuple[Predicate, ...]

    def compile(self, model: type) -> ColumnElement[bool]:
        if not self.predicates:
            return true()
        return and_(*(p.compile(model) for p in self.predicates))


Predicate = Union[Always, Contains, AllOf]


def text_filter(fields: tuple[str, ...], value: str | None) -> Predicate:
    term = (value or "").strip().lower()
    if not term:
        return Always()
    return Contains(fields, term)


def build_search_predicate(keyword: str | None, location: str | None) -> Predicate:
    """Keyword and location filters, AND-combined; absent filters match everything."""
    parts = tuple(
        p
        for p in (text_filter(KEYWORD_FIELDS, keyword), text_filter(LOCATION_FIELDS, location))
        if not isinstance(p, Always)
    )
    if not parts:
        return Always()
    if len(parts) == 1:
        return parts[0]
    return AllOf(parts)


def clamp_limit(limit: int | None, default: int, maximum: int) -> int:
    if limit is None or limit <= 0:
        return default
    return min(limit, maximum)


# ── Sources ─────────────────────────────────────────────────────────
class ListingSource:
    def __init__(self, kind: str, model: type, *, priced: bool) -> None:
        self.kind = kind
        self.model = model
        self.priced = priced

    def to_listing(self, row: Any) -> dict[str, Any]:
        return {
            "id": row.id,
            "type": self.kind,
            "name": row.name,
            "price": row.price if self.priced else None,
            "price_range": row.price_range,
            "image_urls": row.image_urls or [],
            "location_city": row.location_city,
            "location_neighborhood": row.location_neighborhood,
            "sq_ft_or_area": row.sq_ft_or_area,
            "created_at": row.created_at,
        }

    async def query_popular(self, db: AsyncSession, limit: int) -> list[dict[str, Any]]:
        model = self.model
        stmt = select(model)
        if self.priced:
            stmt = stmt.where(model.price.is_not(None)).order_by(model.price.desc(), model.id.asc())
        else:
            stmt = stmt.order_by(model.id.asc())
        result = await db.execute(stmt.limit(limit))
        return [self.to_listing(row) for row in result.scalars().all()]

    async def query_search(
        self, db: AsyncSession, predicate: Predicate, limit: int
    ) -> list[dict[str, Any]]:
        model = self.model
        stmt = (
            select(model)
            .where(predicate.compile(model))
            .order_by(model.created_at.desc(), model.id.desc())
            .limit(limit)
        )
        result = await db.execute(stmt)
        return [self.to_listing(row) for row in result.scalars().all()]


SOURCES: tuple[ListingSource, ...] = (
    ListingSource("property", Property, priced=True),
    ListingSource("project", Project, priced=False),
    ListingSource("land", Land, priced=True),
)
_SOURCE_RANK = {source.kind: rank for rank, source in enumerate(SOURCES)}


def _popular_key(listing: dict[str, Any]) -> tuple:
    price = listing["price"]
    return (price is None, -(price or 0), listing["id"], _SOURCE_RANK[listing["type"]])


def _recency_key(listing: dict[str, Any]) -> tuple:
    return (listing["created_at"], listing["id"], -_SOURCE_RANK[listing["type"]])


# ── Aggregator ──────────────────────────────────────────────────────
class ListingAggregator:
    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        sources: tuple[ListingSource, ...] = SOURCES,
    ) -> None:
        self.db = db
        self.max_limit = settings.LISTING_MAX_LIMIT
        self.sources = sources

    async def popular(self, limit: int | None = POPULAR_DEFAULT_LIMIT) -> list[dict[str, Any]]:
        """Highest-priced listings first; unpriced projects only fill the tail."""
        limit = clamp_limit(limit, POPULAR_DEFAULT_LIMIT, self.max_limit)
        streams = [await source.query_popular(self.db, limit) for source in self.sources]
        return list(islice(heapq.merge(*streams, key=_popular_key), limit))

    async def search(
        self,
        keyword: str | None = "",
        location: str | None = "",
        limit: int | None = SEARCH_DEFAULT_LIMIT,
    ) -> list[dict[str, Any]]:
        """Newest listings matching the keyword and location filters."""
        limit = clamp_limit(limit, SEARCH_DEFAULT_LIMIT, self.max_limit)
        predicate = build_search_predicate(keyword, location)
        logger.debug("Listing search predicate=%r limit=%d", predicate, limit)
        streams = [
            await source.query_search(self.db, predicate, limit) for source in self.sources
        ]
        return list(islice(heapq.merge(*streams, key=_recency_key, reverse=True), limit))
