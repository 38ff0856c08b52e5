"""
Rate limiting configuration using slowapi.

Uses Redis as the backend so limits are shared across workers.
Provides pre-configured limits for different endpoint categories.
"""
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from app.core.config import settings


def _get_user_or_ip(request: Request) -> str:
    """
    Rate-limit key: authenticated user ID if available, otherwise client IP.

    Per-user limits for authenticated endpoints, per-IP limits for
    login and register.
    """
    user = getattr(request.state, "current_user", None)
    if user and hasattr(user, "id"):
        return f"user:{user.id}"
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=_get_user_or_ip,
    storage_uri=settings.redis_url,
    strategy="fixed-window",
    enabled=settings.rate_limit_enabled,
)

# Pre-defined rate limit strings for use in route decorators:
#   @limiter.limit(RATE_AUTH)
RATE_AUTH = "5/minute"           # login, register
RATE_AI = "20/hour"              # keyword analysis, cover letter generation
RATE_PAYMENT = "10/minute"       # intent creation, verification
RATE_EXPORT = "30/minute"        # LaTeX / PDF / text rendering
RATE_DEFAULT = "60/minute"       # general API fallback
