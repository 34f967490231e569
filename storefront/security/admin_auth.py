"""
Admin session cookie

The back-office has a single shared password. A successful login stores
the SHA-256 digest of that password in an http-only cookie; a request is
authenticated when its cookie matches the digest of the configured
password, so changing the password signs every session out.
"""

import hashlib
import hmac
import logging
from typing import Optional

from fastapi import Request, Response

from ..core.config import Settings
from ..core.errors import ApiError

logger = logging.getLogger(__name__)

ADMIN_COOKIE_NAME = "admin_session"
ADMIN_COOKIE_MAX_AGE = 60 * 60 * 8


def hash_value(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def build_admin_session_value(password: str) -> str:
    return hash_value(password)


def is_admin_password(settings: Settings, password: Optional[str]) -> bool:
    if not settings.admin_configured or not password or not password.strip():
        return False
    expected = settings.admin_password.strip()
    return hmac.compare_digest(password.strip().encode("utf-8"), expected.encode("utf-8"))


def is_admin_session_valid(settings: Settings, cookie_value: Optional[str]) -> bool:
    if not settings.admin_configured or not cookie_value:
        return False
    expected = build_admin_session_value(settings.admin_password.strip())
    return hmac.compare_digest(cookie_value.encode("utf-8"), expected.encode("utf-8"))


def set_admin_cookie(response: Response, settings: Settings) -> None:
    response.set_cookie(
        ADMIN_COOKIE_NAME,
        build_admin_session_value(settings.admin_password.strip()),
        max_age=ADMIN_COOKIE_MAX_AGE,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


def clear_admin_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        ADMIN_COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


class AdminGuard:
    """
    FastAPI dependency that rejects requests without a valid admin session.
    """

    async def __call__(self, request: Request) -> None:
        settings: Settings = request.app.state.settings
        cookie_value = request.cookies.get(ADMIN_COOKIE_NAME)

        if not is_admin_session_valid(settings, cookie_value):
            logger.warning(f"Rejected admin request to {request.url.path}")
            raise ApiError(
                status_code=401,
                code="UNAUTHORIZED",
                message="Admin authentication required.",
            )


require_admin = AdminGuard()
