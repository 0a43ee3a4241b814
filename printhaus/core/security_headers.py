"""
Security headers middleware
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from printhaus.core.config import settings


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all responses.

    Uploaded files (including SVG) are served under a sandboxed CSP so
    scripts embedded in user artwork never execute on our origin.
    """

    CSP_DIRECTIVES = {
        "default-src": "'self'",
        "script-src": "'self'",
        "style-src": "'self' 'unsafe-inline'",
        "img-src": "'self' data: https:",
        "frame-ancestors": "'none'",
        "object-src": "'none'",
        "base-uri": "'self'",
    }

    DOCS_CSP_DIRECTIVES = {
        "default-src": "'self'",
        "script-src": "'self' 'unsafe-inline' https://cdn.jsdelivr.net",
        "style-src": "'self' 'unsafe-inline' https://cdn.jsdelivr.net",
        "img-src": "'self' data: https:",
        "frame-ancestors": "'self'",
        "object-src": "'none'",
    }

    UPLOAD_CSP = "default-src 'none'; style-src 'unsafe-inline'; sandbox"

    def _build_csp(self, directives: dict) -> str:
        return "; ".join(f"{key} {value}" for key, value in directives.items())

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        path = request.url.path
        if path.startswith("/uploads/"):
            csp = self.UPLOAD_CSP
        elif path in ("/docs", "/redoc", "/openapi.json"):
            csp = self._build_csp(self.DOCS_CSP_DIRECTIVES)
        else:
            csp = self._build_csp(self.CSP_DIRECTIVES)

        response.headers["Content-Security-Policy"] = csp
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        if settings.ENVIRONMENT == "production" and not settings.DEBUG:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        return response
