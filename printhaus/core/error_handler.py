"""
Error handling and sanitization middleware

Sanitize error messages to prevent internal information leakage:
- Database errors → generic message
- Stack traces → logged only, not returned to client
- Domain errors and validation errors are rendered by their own handlers
"""
import logging
import traceback
from typing import Union

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from printhaus.core.config import settings

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again later."

# Patterns that indicate internal/sensitive error information
SENSITIVE_PATTERNS = [
    "password",
    "secret",
    "token",
    "key",
    "credential",
    "sqlalchemy",
    "asyncpg",
    "postgresql",
    "sqlite",
    "traceback",
    "file \"",
    "line ",
]


def is_sensitive_error(message: str) -> bool:
    """Check if error message contains sensitive information."""
    message_lower = message.lower()
    return any(pattern in message_lower for pattern in SENSITIVE_PATTERNS)


def sanitize_error_message(error: Union[str, Exception]) -> str:
    """Sanitize an error message for safe client exposure."""
    message = error if isinstance(error, str) else str(error)

    if settings.DEBUG:
        return message

    if is_sensitive_error(message):
        return "An internal error occurred. Please try again later."

    if len(message) > 200:
        return message[:200] + "..."

    return message


class ErrorSanitizationMiddleware(BaseHTTPMiddleware):
    """
    Catch unhandled exceptions and return a sanitized 500.

    - In production: Returns generic error, logs full details
    - In development: Returns full error for debugging
    """

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except HTTPException:
            raise
        except Exception as e:
            error_id = f"{getattr(request.state, 'request_id', 'unknown')}-{id(e)}"
            logger.error(
                f"Unhandled exception [{error_id}]: {type(e).__name__}: {str(e)}\n"
                f"Path: {request.url.path}\n"
                f"Method: {request.method}\n"
                f"Traceback:\n{traceback.format_exc()}"
            )

            content = {
                "error": "internal_error",
                "message": GENERIC_ERROR_MESSAGE,
                "error_id": error_id,
            }
            if settings.DEBUG:
                content["message"] = str(e)
                content["type"] = type(e).__name__
            return JSONResponse(status_code=500, content=content)
