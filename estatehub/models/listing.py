"""
Listing models — the three record kinds behind the unified Listing view.

Property and Land carry a numeric ``price``; Project only has a free-text
``price_range``.  Shared columns live on ``ListingColumnsMixin``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from estatehub.db.base import Base


class ListingColumnsMixin:
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    price_range = Column(String(100), nullable=True)
    image_urls = Column(JSON, nullable=False, default=list)
    location_city = Column(String(100), nullable=True, index=True)
    location_neighborhood = Column(String(100), nullable=True)
    details = Column(Text, nullable=True)
    sq_ft_or_area = Column(Integer, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )


class Project(ListingColumnsMixin, Base):
    __tablename__ = "projects"

    properties = relationship("Property", back_populates="project")


class Property(ListingColumnsMixin, Base):
    __tablename__ = "properties"

    price: Decimal | None = Column(Numeric(12, 2), nullable=True, index=True)  # type: ignore[assignment]
    project_id: int | None = Column(Integer, ForeignKey("projects.id"), nullable=True)  # type: ignore[assignment]

    project = relationship("Project", back_populates="properties")


class Land(ListingColumnsMixin, Base):
    __tablename__ = "lands"

    price: Decimal | None = Column(Numeric(12, 2), nullable=True, index=True)  # type: ignore[assignment]
