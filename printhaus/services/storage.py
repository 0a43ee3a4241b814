"""
Local upload storage

Validated images are written under UPLOAD_DIR with a generated name and
served back from /uploads/<name>. Disk I/O runs in a worker thread so the
event loop is never blocked.
"""
import asyncio
import logging
import os
import uuid
from pathlib import Path
from typing import Optional

from printhaus.core.config import settings

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads/"


class StorageService:
    def __init__(self, upload_dir: Optional[str] = None):
        self.upload_dir = Path(upload_dir or settings.UPLOAD_DIR).resolve()

    def ensure_dir(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _write(self, path: Path, content: bytes) -> None:
        self.ensure_dir()
        with open(path, "wb") as f:
            f.write(content)

    async def save(self, content: bytes, extension: str) -> str:
        """Store bytes under a fresh name and return the public URL."""
        filename = f"{uuid.uuid4().hex}{extension}"
        await asyncio.to_thread(self._write, self.upload_dir / filename, content)
        logger.info(f"Stored upload {filename} ({len(content)} bytes)")
        return f"{PUBLIC_PREFIX}{filename}"

    def resolve(self, filename: str) -> Optional[Path]:
        """
        Map a requested filename to a stored file.

        Returns None when the file is missing or the name would escape
        the upload directory.
        """
        if not filename or "/" in filename or "\\" in filename or filename in (".", ".."):
            return None
        path = (self.upload_dir / filename).resolve()
        if path.parent != self.upload_dir or not path.is_file():
            return None
        return path

    async def delete(self, public_url: Optional[str]) -> None:
        """Remove a stored file by its public URL. Missing files are ignored."""
        if not public_url or not public_url.startswith(PUBLIC_PREFIX):
            return
        path = self.resolve(public_url[len(PUBLIC_PREFIX):])
        if path is None:
            return
        try:
            await asyncio.to_thread(os.remove, path)
            logger.info(f"Removed upload {path.name}")
        except FileNotFoundError:
            logger.debug(f"Upload {path.name} already gone")
