"""
Passwords and session tokens

A session token is an HS256 JWT issued at signup/login. It travels either
in the HttpOnly session cookie or as a Bearer header and carries:

    sub   user id (string, as JWT requires)
    type  always "session"
    jti   random id, so two sessions of one user never share a token
    iat / exp

Blocking a user does not revoke tokens; the dependency layer re-reads the
user row on every request instead.
"""
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from printhaus.core.config import settings

SESSION_TOKEN_TYPE = "session"


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_session_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a session token for user_id."""
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {
        "sub": str(user_id),
        "type": SESSION_TOKEN_TYPE,
        "jti": uuid.uuid4().hex,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def read_session_token(token: str) -> Optional[int]:
    """
    User id carried by a valid session token.

    None for a bad signature, an expired token, a token of another type
    or a non-numeric subject.
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    if claims.get("type") != SESSION_TOKEN_TYPE:
        return None
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        return None
