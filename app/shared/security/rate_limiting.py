"""
Rate limiting for the loan endpoints.

A single slowapi Limiter keyed by client address. Lending and
returning use ``settings.rate_limit_default``; the overdue sweep
uses the stricter ``settings.rate_limit_heavy``. Tests turn the
limiter off with ``RATE_LIMIT_ENABLED=false``.
"""

import logging

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from app.core.config import settings

logger = logging.getLogger(__name__)

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Reject a throttled request with a 429 in the common error shape."""
    logger.warning("Rate limit hit on %s: %s", request.url.path, exc.detail)
    return JSONResponse(
        status_code=429,
        content={"error": "Rate limit exceeded", "detail": str(exc.detail)},
    )
