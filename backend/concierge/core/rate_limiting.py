"""
Rate limiting for the public concierge endpoints (per client IP).
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import Request
from fastapi.responses import JSONResponse
import logging

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)

CONCIERGE_LIMIT = "120/minute"
CATALOG_META_LIMIT = "300/minute"
HEALTH_LIMIT = "1000/minute"


async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return a 429 JSON body with a Retry-After hint."""
    client_host = request.client.host if request.client else "unknown"
    logger.warning(f"Rate limit exceeded for {client_host} on {request.url.path} ({exc.detail})")

    return JSONResponse(
        status_code=429,
        content={
            "error": "too_many_requests",
            "message": "Too many concierge requests. Please wait a moment and try again.",
            "retry_after": 60,
        },
        headers={"Retry-After": "60"},
    )
