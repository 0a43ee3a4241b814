"""
Core Utilities

Shared helpers used across the application.
"""
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")


def utcnow() -> datetime:
    """
    Return timezone-aware UTC datetime.

    Use this instead of datetime.utcnow() which returns naive datetime.
    """
    return datetime.now(timezone.utc)


def to_money(value) -> Decimal:
    """Coerce a number/str/Decimal to a Decimal rounded to cents."""
    if value is None:
        return Decimal("0.00")
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
