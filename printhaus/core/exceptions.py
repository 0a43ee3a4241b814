"""
Printhaus Exception Hierarchy

Services raise these; the API layer renders them through a single
exception handler so each kind keeps its own HTTP status instead of
collapsing into a 500.

Exception Hierarchy:
    PrinthausError
    ├── ValidationError              400
    ├── BusinessRuleError            400
    │   └── EmptyCartError
    ├── UploadError                  400
    │   ├── MissingFileError
    │   ├── UnsupportedFileTypeError
    │   └── FileTooLargeError
    ├── AuthenticationError          401
    ├── PermissionDeniedError        403
    ├── NotFoundError                404
    └── ConflictError                409
"""
import logging
from typing import Optional, Dict, Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class PrinthausError(Exception):
    """
    Base exception for all Printhaus errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code for programmatic handling
        details: Additional context (field errors, ids)
    """

    default_code: str = "PRINTHAUS_ERROR"
    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class ValidationError(PrinthausError):
    """Payload failed validation; details carry per-field errors."""
    default_code = "validation_error"
    status_code = 400


class BusinessRuleError(PrinthausError):
    default_code = "business_rule_violation"
    status_code = 400


class EmptyCartError(BusinessRuleError):
    default_code = "empty_cart"

    def __init__(self, message: str = "Cart is empty", **kwargs):
        super().__init__(message, **kwargs)


class UploadError(PrinthausError):
    default_code = "upload_error"
    status_code = 400


class MissingFileError(UploadError):
    default_code = "missing_file"

    def __init__(self, message: str = "An image file is required", **kwargs):
        super().__init__(message, **kwargs)


class UnsupportedFileTypeError(UploadError):
    default_code = "unsupported_file_type"

    def __init__(self, message: str, filename: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["filename"] = filename
        super().__init__(message, details=details, **kwargs)


class FileTooLargeError(UploadError):
    default_code = "file_too_large"

    def __init__(self, message: str, max_bytes: Optional[int] = None, **kwargs):
        details = kwargs.pop("details", {})
        details["max_bytes"] = max_bytes
        super().__init__(message, details=details, **kwargs)


class AuthenticationError(PrinthausError):
    default_code = "not_authenticated"
    status_code = 401


class PermissionDeniedError(PrinthausError):
    default_code = "forbidden"
    status_code = 403


class NotFoundError(PrinthausError):
    default_code = "not_found"
    status_code = 404

    def __init__(self, resource: str, resource_id: Any = None, **kwargs):
        details = kwargs.pop("details", {})
        details.update({"resource": resource, "id": resource_id})
        super().__init__(f"{resource} not found", details=details, **kwargs)


class ConflictError(PrinthausError):
    default_code = "conflict"
    status_code = 409


# =============================================================================
# HANDLERS
# =============================================================================

async def printhaus_error_handler(request: Request, exc: PrinthausError) -> JSONResponse:
    """Render a PrinthausError with its own status code."""
    if exc.status_code >= 500:
        logger.error(f"{exc!r} on {request.method} {request.url.path}")
    else:
        logger.info(f"{exc.status_code} {exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed payloads are client errors: 400 with field-level details."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg"),
            "type": err.get("type"),
        }
        for err in exc.errors()
    ]
    error = ValidationError("Invalid request payload", details={"errors": errors})
    return JSONResponse(status_code=error.status_code, content=jsonable_encoder(error.to_dict()))
