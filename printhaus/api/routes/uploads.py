"""
Serve stored upload files
"""
from fastapi import APIRouter
from fastapi.responses import FileResponse

from printhaus.core.exceptions import NotFoundError
from printhaus.services.storage import StorageService

router = APIRouter()


@router.get("/{filename}")
async def get_upload(filename: str):
    path = StorageService().resolve(filename)
    if path is None:
        raise NotFoundError("File", filename)
    return FileResponse(path)
