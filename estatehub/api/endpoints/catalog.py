"""
Catalog endpoints — property list and property / project / land details.

Unknown ids answer ``200 {"error": "Not found"}`` unless
``STRICT_NOT_FOUND`` is enabled, in which case they are a real 404.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from estatehub.api.deps import get_db
from estatehub.core.config import Settings, get_settings
from estatehub.core.exceptions import NotFoundError
from estatehub.models.listing import Land, Project, Property
from estatehub.schemas.listing import (LandRead, NotFoundBody, ProjectRead,
                                       PropertyRead, PropertySummary)
from estatehub.services.catalog import get_listing, list_properties

router = APIRouter(tags=["catalog"])


async def _detail(
    db: AsyncSession,
    config: Settings,
    model: type,
    schema: type[BaseModel],
    listing_id: int,
) -> BaseModel:
    row = await get_listing(db, model, listing_id)
    if row is None:
        if config.STRICT_NOT_FOUND:
            raise NotFoundError("Not found")
        return NotFoundBody()
    return schema.model_validate(row)


@router.get("/properties", response_model=list[PropertySummary])
async def list_latest_properties(db: AsyncSession = Depends(get_db)) -> list[Property]:
    return await list_properties(db)


@router.get("/properties/{listing_id}", response_model=PropertyRead | NotFoundBody)
@router.get("/property/{listing_id}", response_model=PropertyRead | NotFoundBody)
async def property_detail(
    listing_id: int,
    db: AsyncSession = Depends(get_db),
    config: Settings = Depends(get_settings),
) -> BaseModel:
    return await _detail(db, config, Property, PropertyRead, listing_id)


@router.get("/project/{listing_id}", response_model=ProjectRead | NotFoundBody)
async def project_detail(
    listing_id: int,
    db: AsyncSession = Depends(get_db),
    config: Settings = Depends(get_settings),
) -> BaseModel:
    return await _detail(db, config, Project, ProjectRead, listing_id)


@router.get("/land/{listing_id}", response_model=LandRead | NotFoundBody)
async def land_detail(
    listing_id: int,
    db: AsyncSession = Depends(get_db),
    config: Settings = Depends(get_settings),
) -> BaseModel:
    return await _detail(db, config, Land, LandRead, listing_id)
