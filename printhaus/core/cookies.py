"""
Session cookie handling

The session token lives in an HttpOnly cookie; the CSRF token lives in a
cookie the frontend can read and echo back in X-CSRF-Token.
"""
from typing import Optional
from fastapi import Response
from starlette.requests import Request

from printhaus.core.config import settings
from printhaus.core.csrf import generate_csrf_token


SESSION_COOKIE = "printhaus_session"
CSRF_TOKEN_COOKIE = "printhaus_csrf"
CSRF_HEADER = "X-CSRF-Token"


def get_cookie_domain(request: Request) -> Optional[str]:
    """
    Get the cookie domain from settings or auto-detect from request.

    Returns None for localhost (and bare hosts) to let the browser auto-set.
    """
    if settings.COOKIE_DOMAIN:
        return settings.COOKIE_DOMAIN

    host = request.headers.get("host", "").split(":")[0]

    if host in ("localhost", "127.0.0.1", "test", ""):
        return None

    parts = host.split(".")
    if len(parts) >= 2:
        return f".{'.'.join(parts[-2:])}"

    return None


def set_session_cookies(response: Response, request: Request, access_token: str) -> str:
    """
    Set the session and CSRF cookies on a response.

    Returns the CSRF token so it can be echoed in the response body.
    """
    domain = get_cookie_domain(request)
    csrf_token = generate_csrf_token()
    max_age = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    response.set_cookie(
        key=SESSION_COOKIE,
        value=access_token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
        domain=domain,
        max_age=max_age,
        path="/",
    )

    # JS needs to read this one
    response.set_cookie(
        key=CSRF_TOKEN_COOKIE,
        value=csrf_token,
        httponly=False,
        secure=settings.COOKIE_SECURE,
        samesite=settings.COOKIE_SAMESITE,
        domain=domain,
        max_age=max_age,
        path="/",
    )

    return csrf_token


def clear_session_cookies(response: Response, request: Request) -> None:
    """Clear the session and CSRF cookies."""
    domain = get_cookie_domain(request)
    for cookie_name in (SESSION_COOKIE, CSRF_TOKEN_COOKIE):
        response.delete_cookie(key=cookie_name, domain=domain, path="/")


def get_session_token_from_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(SESSION_COOKIE)


def get_csrf_token_from_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(CSRF_TOKEN_COOKIE)


def get_csrf_token_from_header(request: Request) -> Optional[str]:
    return request.headers.get(CSRF_HEADER)
