# Security modules

from .admin_auth import (
    ADMIN_COOKIE_NAME,
    AdminGuard,
    require_admin,
    is_admin_password,
    set_admin_cookie,
    clear_admin_cookie,
)

__all__ = [
    "ADMIN_COOKIE_NAME",
    "AdminGuard",
    "require_admin",
    "is_admin_password",
    "set_admin_cookie",
    "clear_admin_cookie",
]
