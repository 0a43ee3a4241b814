"""
Request context middleware

Tags every request with an id (reused from X-Request-ID when the client
sends one) and reports its duration in the response headers.
"""
import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from printhaus.core.config import settings

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
REQUEST_DURATION_HEADER = "X-Request-Duration"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request.state.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.started_at = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - request.state.started_at) * 1000
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        response.headers[REQUEST_DURATION_HEADER] = f"{duration_ms:.1f}ms"
        logger.debug(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"in {duration_ms:.1f}ms [{request.state.request_id}]"
        )
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared body exceeds the upload limit."""

    def __init__(self, app, max_bytes: int = None):
        super().__init__(app)
        # Multipart framing adds a little on top of the file itself
        self.max_bytes = max_bytes or settings.max_upload_bytes + 64 * 1024

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_bytes:
            logger.warning(
                f"Request size limit exceeded: {content_length} bytes on {request.url.path}"
            )
            return JSONResponse(
                status_code=413,
                content={
                    "error": "request_too_large",
                    "message": f"Request body exceeds maximum size of {settings.MAX_UPLOAD_SIZE_MB}MB",
                },
            )
        return await call_next(request)
