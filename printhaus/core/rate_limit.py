"""
Rate limiting (SlowAPI, in-memory storage, one process)

Anonymous traffic is keyed on the client IP. Checkout is keyed on the
account when the request carries a session, so shoppers behind one NAT
do not share a checkout budget.
"""
import logging
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from starlette.requests import Request
from starlette.responses import JSONResponse

from printhaus.core.config import settings
from printhaus.core.cookies import get_session_token_from_cookie
from printhaus.core.security import read_session_token

logger = logging.getLogger(__name__)

RETRY_AFTER_SECONDS = 60


def get_client_ip(request: Request) -> str:
    # First hop of X-Forwarded-For is the original client
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


def get_account_key(request: Request) -> str:
    """`user:<id>` for a valid session (Bearer first, then cookie), else `ip:<addr>`."""
    token = None
    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        token = authorization[7:].strip()
    if not token:
        token = get_session_token_from_cookie(request)

    user_id = read_session_token(token) if token else None
    if user_id is not None:
        return f"user:{user_id}"
    return f"ip:{get_client_ip(request)}"


limiter = Limiter(
    key_func=get_client_ip,
    enabled=settings.RATE_LIMIT_ENABLED,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    logger.warning(
        f"Rate limit exceeded: {get_account_key(request)} on {request.method} {request.url.path} "
        f"limit={exc.detail} request_id={request_id}"
    )

    return JSONResponse(
        status_code=429,
        content={
            "error": "rate_limit_exceeded",
            "message": f"Too many requests ({exc.detail}). Please try again later.",
            "details": {"limit": exc.detail, "retry_after": RETRY_AFTER_SECONDS},
        },
        headers={"Retry-After": str(RETRY_AFTER_SECONDS)},
    )
