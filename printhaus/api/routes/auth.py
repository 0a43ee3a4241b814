"""
Authentication routes

Rate limited to slow down credential stuffing. Signup and login set the
HttpOnly session cookie plus the CSRF cookie.
"""
import logging
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.api.deps import get_current_user
from printhaus.core.config import settings
from printhaus.core.cookies import set_session_cookies, clear_session_cookies
from printhaus.core.database import get_db
from printhaus.core.exceptions import AuthenticationError, PermissionDeniedError
from printhaus.core.rate_limit import limiter
from printhaus.core.security import create_session_token
from printhaus.models.user import User
from printhaus.schemas.cart import MessageResponse
from printhaus.schemas.user import AuthResponse, UserCreate, UserLogin, UserResponse
from printhaus.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def _start_session(request: Request, response: Response, user: User) -> AuthResponse:
    access_token = create_session_token(user.id)
    csrf_token = set_session_cookies(response, request, access_token)
    return AuthResponse(
        user=UserResponse.model_validate(user),
        access_token=access_token,
        csrf_token=csrf_token,
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def signup(
    request: Request,
    response: Response,
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db),
):
    """Register a new account and log it in. The first account becomes admin."""
    user = await UserService(db).create_user(
        email=user_data.email,
        password=user_data.password,
        first_name=user_data.first_name,
        last_name=user_data.last_name,
    )
    return _start_session(request, response, user)


@router.post("/login", response_model=AuthResponse)
@limiter.limit(settings.RATE_LIMIT_AUTH)
async def login(
    request: Request,
    response: Response,
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).authenticate(credentials.email, credentials.password)
    if not user:
        logger.info("Failed login attempt")
        raise AuthenticationError("Invalid email or password", code="invalid_credentials")

    if user.is_blocked:
        logger.info(f"Blocked user {user.id} attempted login")
        raise PermissionDeniedError("Account is blocked", code="account_blocked")

    return _start_session(request, response, user)


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request, response: Response):
    clear_session_cookies(response, request)
    return MessageResponse(message="Logged out successfully")


@router.get("/user", response_model=UserResponse)
async def get_user(user: User = Depends(get_current_user)):
    return user
