"""
Design routes

Public gallery plus multipart upload for artists.
"""
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.api.deps import get_current_artist
from printhaus.api.forms import parse_form, split_tags
from printhaus.core.database import get_db
from printhaus.core.exceptions import NotFoundError
from printhaus.core.upload_validation import validate_image_upload
from printhaus.models.artist import Artist
from printhaus.schemas.design import DesignCreate, DesignResponse
from printhaus.services.design_service import DesignService

router = APIRouter()


@router.get("", response_model=List[DesignResponse])
async def list_designs(
    artist: Optional[int] = Query(None, description="Only designs by this artist id"),
    db: AsyncSession = Depends(get_db),
):
    """Public designs, newest first."""
    service = DesignService(db)
    if artist is not None:
        return await service.get_designs_by_artist(artist)
    return await service.get_all_designs()


@router.get("/{design_id}", response_model=DesignResponse)
async def get_design(design_id: int, db: AsyncSession = Depends(get_db)):
    design = await DesignService(db).get_design(design_id)
    if not design or not design.is_public:
        raise NotFoundError("Design", design_id)
    return design


@router.post("", response_model=DesignResponse, status_code=status.HTTP_200_OK)
async def create_design(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    price: Optional[Decimal] = Form(None),
    tags: Optional[str] = Form(None, description="Comma separated"),
    is_public: Optional[bool] = Form(None),
    image: Optional[UploadFile] = File(None),
    artist: Artist = Depends(get_current_artist),
    db: AsyncSession = Depends(get_db),
):
    """
    Upload a design. The image is required and is validated before the
    design row is created.
    """
    data = parse_form(
        DesignCreate,
        title=title,
        description=description,
        price=price,
        tags=split_tags(tags),
        is_public=is_public,
    )
    content, extension = await validate_image_upload(image)
    return await DesignService(db).create_design(artist.id, data, content, extension)
