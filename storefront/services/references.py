"""Human-readable order and request numbers"""

import secrets
from datetime import datetime, timezone
from typing import Optional


def generate_reference(prefix: str, now: Optional[datetime] = None) -> str:
    """``<prefix>-YYYYMMDD-XXXX`` where XXXX is four random digits"""
    now = now or datetime.now(timezone.utc)
    suffix = f"{secrets.randbelow(10_000):04d}"
    return f"{prefix}-{now:%Y%m%d}-{suffix}"


def is_non_empty(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())
