"""
Listing endpoints — popular and search across properties, projects and lands.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from estatehub.api.deps import get_listing_aggregator
from estatehub.schemas.listing import ListingRead
from estatehub.services.listings import ListingAggregator

router = APIRouter(prefix="/listings", tags=["listings"])


@router.get("/popular", response_model=list[ListingRead])
async def popular_listings(
    limit: int | None = None,
    aggregator: ListingAggregator = Depends(get_listing_aggregator),
) -> list[dict]:
    return await aggregator.popular(limit)


@router.get("/search", response_model=list[ListingRead])
async def search_listings(
    q: str | None = None,
    location: str | None = None,
    limit: int | None = None,
    aggregator: ListingAggregator = Depends(get_listing_aggregator),
) -> list[dict]:
    """Keyword matches name or details; location matches city or neighborhood."""
    return await aggregator.search(q, location, limit)
