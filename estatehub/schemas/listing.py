"""Pydantic schemas for listings and catalog detail pages."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

ListingType = Literal["property", "project", "land"]


class ListingRead(BaseModel):
    id: int
    type: ListingType
    name: str
    price: float | None = None
    price_range: str | None = None
    image_urls: list[str] = []
    location_city: str | None = None
    location_neighborhood: str | None = None
    sq_ft_or_area: int | None = None
    created_at: datetime | None = None


class _CatalogBase(BaseModel):
    id: int
    name: str
    price_range: str | None
    image_urls: list[str]
    location_city: str | None
    location_neighborhood: str | None
    details: str | None
    sq_ft_or_area: int | None
    created_at: datetime | None

    model_config = {"from_attributes": True}


class ProjectRead(_CatalogBase):
    pass


class PropertyRead(_CatalogBase):
    price: float | None
    project_id: int | None


class LandRead(_CatalogBase):
    price: float | None


class PropertySummary(BaseModel):
    id: int
    name: str
    price: float | None
    image_urls: list[str]
    location_city: str | None
    location_neighborhood: str | None
    sq_ft_or_area: int | None

    model_config = {"from_attributes": True}


class NotFoundBody(BaseModel):
    error: str = "Not found"

    model_config = {"extra": "forbid"}
