"""Catalog lookups backing the property / project / land detail pages."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from estatehub.models.listing import Land, Project, Property

PROPERTY_LIST_LIMIT = 50


async def list_properties(db: AsyncSession, limit: int = PROPERTY_LIST_LIMIT) -> list[Property]:
    result = await db.execute(select(Property).order_by(Property.id.desc()).limit(limit))
    return list(result.scalars().all())


async def get_listing(
    db: AsyncSession, model: type[Property] | type[Project] | type[Land], listing_id: int
) -> Property | Project | Land | None:
    return await db.get(model, listing_id)
