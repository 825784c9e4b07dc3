"""
Rate limiter — keyed by client IP.

A global default limit applies through ``SlowAPIMiddleware``; auth
endpoints add a stricter per-route limit.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from estatehub.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)
