# Core modules

from .config import Settings, get_settings
from .errors import ApiError, register_exception_handlers
from .rate_limit import FixedWindowRateLimiter, RateLimit, RateLimitResult

__all__ = [
    "Settings",
    "get_settings",
    "ApiError",
    "register_exception_handlers",
    "FixedWindowRateLimiter",
    "RateLimit",
    "RateLimitResult",
]
