"""
Image upload validation utilities

Design and portfolio images are checked before anything is written:
- Extension allow-list (.jpg, .jpeg, .png, .svg)
- Content-Type header must agree with the extension
- Magic bytes (actual file content) must agree with both
- File size limit
- Raster dimensions via PIL (also catches corrupted images)
"""
import io
import os
from typing import Optional, Tuple

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from printhaus.core.config import settings
from printhaus.core.exceptions import (
    FileTooLargeError,
    MissingFileError,
    UnsupportedFileTypeError,
)


# Extension -> canonical MIME type
ALLOWED_EXTENSIONS = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".svg": "image/svg+xml",
}

# Content-Type headers browsers send for each canonical type
CONTENT_TYPE_ALIASES = {
    "image/jpeg": {"image/jpeg", "image/jpg", "image/pjpeg"},
    "image/png": {"image/png", "image/x-png"},
    "image/svg+xml": {"image/svg+xml"},
}

IMAGE_SIGNATURES = {
    "image/jpeg": [
        bytes([0xFF, 0xD8, 0xFF]),
    ],
    "image/png": [
        bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A]),
    ],
}

DEFAULT_MAX_DIMENSION = 8192
DEFAULT_MIN_DIMENSION = 10


def _looks_like_svg(content: bytes) -> bool:
    head = content[:1024].lstrip(b"\xef\xbb\xbf").lstrip().lower()
    if head.startswith(b"<svg"):
        return True
    # XML prolog / comments / doctype before the root element
    return head.startswith((b"<?xml", b"<!--", b"<!doctype svg")) and b"<svg" in content[:4096].lower()


def detect_image_type(content: bytes) -> Optional[str]:
    """
    Detect the image type from the file signature.
    Returns the MIME type or None if the content is not an allowed image.
    """
    for mime_type, signatures in IMAGE_SIGNATURES.items():
        if any(content.startswith(sig) for sig in signatures):
            return mime_type
    if _looks_like_svg(content):
        return "image/svg+xml"
    return None


def get_extension(filename: Optional[str]) -> str:
    return os.path.splitext(filename or "")[1].lower()


def validate_image_dimensions(
    content: bytes,
    max_dim: int = DEFAULT_MAX_DIMENSION,
    min_dim: int = DEFAULT_MIN_DIMENSION,
) -> Tuple[int, int]:
    """Open a raster image with PIL and check its size. Returns (width, height)."""
    try:
        with Image.open(io.BytesIO(content)) as img:
            img.verify()
        with Image.open(io.BytesIO(content)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise UnsupportedFileTypeError(f"Invalid or corrupted image file: {e}")

    if width > max_dim or height > max_dim:
        raise UnsupportedFileTypeError(
            f"Image dimensions exceed maximum of {max_dim}x{max_dim} pixels"
        )
    if width < min_dim or height < min_dim:
        raise UnsupportedFileTypeError(
            f"Image dimensions must be at least {min_dim}x{min_dim} pixels"
        )
    return width, height


def validate_image_bytes(
    filename: Optional[str],
    content_type: Optional[str],
    content: bytes,
    max_bytes: Optional[int] = None,
    validate_dimensions: bool = True,
) -> str:
    """
    Validate already-read upload content.

    Returns the extension to store the file under. Raises an UploadError
    subclass on failure.
    """
    max_bytes = max_bytes or settings.max_upload_bytes

    extension = get_extension(filename)
    expected_type = ALLOWED_EXTENSIONS.get(extension)
    if expected_type is None:
        raise UnsupportedFileTypeError(
            f"Invalid file type. Allowed extensions: {', '.join(sorted(ALLOWED_EXTENSIONS))}",
            filename=filename,
        )

    # Content-Type is client supplied: only reject when it contradicts the extension
    if content_type and content_type != "application/octet-stream":
        if content_type.split(";")[0].strip().lower() not in CONTENT_TYPE_ALIASES[expected_type]:
            raise UnsupportedFileTypeError(
                f"Content type '{content_type}' does not match extension '{extension}'",
                filename=filename,
            )

    if len(content) > max_bytes:
        raise FileTooLargeError(
            f"File size exceeds maximum of {max_bytes // (1024 * 1024)}MB",
            max_bytes=max_bytes,
        )

    if len(content) == 0:
        raise MissingFileError("Empty file uploaded")

    detected_type = detect_image_type(content)
    if detected_type != expected_type:
        raise UnsupportedFileTypeError(
            "File content does not match its extension (invalid file signature)",
            filename=filename,
        )

    if validate_dimensions and detected_type != "image/svg+xml":
        validate_image_dimensions(content)

    return ".jpg" if extension == ".jpeg" else extension


async def validate_image_upload(
    file: Optional[UploadFile],
    max_bytes: Optional[int] = None,
    validate_dimensions: bool = True,
) -> Tuple[bytes, str]:
    """
    Read and validate an uploaded design/portfolio image.

    Returns:
        (content, extension)

    Raises:
        MissingFileError: no file part was sent
        UnsupportedFileTypeError: extension, content type or signature rejected
        FileTooLargeError: over the upload limit
    """
    if file is None or not file.filename:
        raise MissingFileError()

    max_bytes = max_bytes or settings.max_upload_bytes
    # Read one byte past the limit so oversize files are detected without buffering them whole
    content = await file.read(max_bytes + 1)
    extension = validate_image_bytes(
        file.filename,
        file.content_type,
        content,
        max_bytes=max_bytes,
        validate_dimensions=validate_dimensions,
    )
    return content, extension
