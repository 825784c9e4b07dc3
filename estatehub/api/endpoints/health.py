"""Liveness probe."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from estatehub.core.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(config: Settings = Depends(get_settings)) -> dict:
    return {
        "status": "ok",
        "service": config.PROJECT_NAME,
        "version": config.VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
