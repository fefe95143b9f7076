"""
Rate limiting configuration and setup.

Uses slowapi to enforce per-endpoint rate limits.
Credential endpoints are limited harder: each call spends a signed
request against the exchange's own per-key quota.
"""

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.requests import Request
from starlette.responses import JSONResponse

from seravat.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


async def rate_limit_exceeded_handler(
    request: Request, exc: RateLimitExceeded
) -> JSONResponse:
    """Handle rate limit exceeded errors with a clean JSON response.

    Args:
        request: The incoming HTTP request.
        exc: The rate limit exceeded exception.

    Returns:
        A 429 JSON response with a clear error message.
    """
    content = {"error": "Rate limit exceeded", "details": str(exc.detail)}
    content.update(getattr(request.state, "error_envelope", {}))
    return JSONResponse(status_code=429, content=content)
