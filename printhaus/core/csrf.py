"""
CSRF Token Management

Double-submit cookie pattern:
1. Server generates a CSRF token and sets it as a non-HttpOnly cookie
2. Frontend reads the cookie and echoes it in the X-CSRF-Token header
3. Server validates that cookie value matches header value
"""
import hashlib
import hmac
import secrets
import time
from typing import Optional

from printhaus.core.config import settings


def get_csrf_secret() -> str:
    """Get CSRF secret key, deriving from main SECRET_KEY if not set."""
    if settings.CSRF_SECRET_KEY:
        return settings.CSRF_SECRET_KEY
    return hashlib.sha256(f"{settings.SECRET_KEY}_csrf".encode()).hexdigest()


def _sign(message: str) -> str:
    return hmac.new(
        get_csrf_secret().encode(),
        message.encode(),
        hashlib.sha256
    ).hexdigest()


def generate_csrf_token() -> str:
    """
    Generate a new CSRF token.

    Format: {random_bytes}.{timestamp}.{signature}
    """
    random_part = secrets.token_hex(32)
    timestamp = str(int(time.time()))
    signature = _sign(f"{random_part}.{timestamp}")
    return f"{random_part}.{timestamp}.{signature}"


def validate_csrf_token(token: str, max_age_seconds: int = 86400) -> bool:
    """Check signature and age of a CSRF token."""
    if not token:
        return False

    try:
        parts = token.split(".")
        if len(parts) != 3:
            return False

        random_part, timestamp_str, signature = parts

        if not hmac.compare_digest(signature, _sign(f"{random_part}.{timestamp_str}")):
            return False

        if max_age_seconds > 0:
            if time.time() - int(timestamp_str) > max_age_seconds:
                return False

        return True

    except (ValueError, TypeError):
        return False


def tokens_match(cookie_token: Optional[str], header_token: Optional[str]) -> bool:
    """
    Validate that cookie and header CSRF tokens match.

    Uses constant-time comparison to prevent timing attacks.
    """
    if not cookie_token or not header_token:
        return False

    if not validate_csrf_token(cookie_token):
        return False

    return hmac.compare_digest(cookie_token, header_token)
