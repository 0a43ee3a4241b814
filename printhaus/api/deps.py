"""
API dependencies

Supports both cookie-based and header-based auth. Cookie sessions are
what the browser storefront uses (HttpOnly, CSRF protected); Bearer
tokens are kept for API clients.

The acting user always comes from the session, never from the body.
"""
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.core.database import get_db
from printhaus.core.security import read_session_token
from printhaus.core.cookies import (
    get_session_token_from_cookie,
    get_csrf_token_from_cookie,
    get_csrf_token_from_header,
)
from printhaus.core.csrf import tokens_match
from printhaus.core.exceptions import AuthenticationError, PermissionDeniedError
from printhaus.models.artist import Artist
from printhaus.models.user import User
from printhaus.services.artist_service import ArtistService
from printhaus.services.user_service import UserService

# Optional bearer - doesn't fail if no Authorization header
security = HTTPBearer(auto_error=False)

SAFE_METHODS = ("GET", "HEAD", "OPTIONS")


def get_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """
    Extract the session token.

    Priority:
    1. Authorization header (Bearer token)
    2. HttpOnly session cookie
    """
    if credentials and credentials.credentials:
        return credentials.credentials
    return get_session_token_from_cookie(request)


def validate_csrf_for_mutation(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> bool:
    """
    Cookie-authenticated mutations must echo the CSRF cookie in the
    X-CSRF-Token header. Bearer requests and safe methods are exempt.
    """
    if request.method in SAFE_METHODS:
        return True
    if credentials and credentials.credentials:
        return True
    if not get_session_token_from_cookie(request):
        return True

    return tokens_match(
        get_csrf_token_from_cookie(request),
        get_csrf_token_from_header(request),
    )


async def _resolve_user(token: str, db: AsyncSession) -> Optional[User]:
    user_id = read_session_token(token)
    if user_id is None:
        return None

    user = await UserService(db).get_user(user_id)
    if not user or user.is_blocked:
        return None
    return user


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Authenticated user or 401. Blocked accounts count as logged out."""
    token = get_token_from_request(request, credentials)
    if not token:
        raise AuthenticationError("Not authenticated")

    if not validate_csrf_for_mutation(request, credentials):
        raise PermissionDeniedError("CSRF token missing or invalid", code="csrf_failed")

    user = await _resolve_user(token, db)
    if not user:
        raise AuthenticationError("Invalid or expired session", code="invalid_session")

    return user


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """The logged-in user if there is one, else None."""
    token = get_token_from_request(request, credentials)
    if not token:
        return None
    return await _resolve_user(token, db)


async def get_current_admin(user: User = Depends(get_current_user)) -> User:
    """Require admin user"""
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required")
    return user


async def get_current_artist(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Artist:
    """Require the caller to have an artist profile; returns the profile."""
    artist = await ArtistService(db).get_artist_by_user_id(user.id)
    if not artist:
        raise PermissionDeniedError("Artist profile required", code="not_an_artist")
    return artist
