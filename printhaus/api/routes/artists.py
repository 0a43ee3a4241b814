"""
Artist routes

Public listing shows verified artists only. "Become an artist" is a
multipart form with an optional portfolio image.
"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.api.deps import get_current_user
from printhaus.api.forms import parse_form
from printhaus.core.database import get_db
from printhaus.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError
from printhaus.core.upload_validation import validate_image_upload
from printhaus.models.user import User
from printhaus.schemas.artist import ArtistCreate, ArtistResponse, ArtistUpdate
from printhaus.services.artist_service import ArtistService
from printhaus.services.storage import StorageService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[ArtistResponse])
async def list_artists(db: AsyncSession = Depends(get_db)):
    return await ArtistService(db).get_all_artists()


@router.get("/me", response_model=Optional[ArtistResponse])
async def get_my_artist_profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """The caller's artist profile, or null if they have none."""
    return await ArtistService(db).get_artist_by_user_id(user.id)


@router.get("/{artist_id}", response_model=ArtistResponse)
async def get_artist(artist_id: int, db: AsyncSession = Depends(get_db)):
    artist = await ArtistService(db).get_artist(artist_id)
    if not artist:
        raise NotFoundError("Artist", artist_id)
    return artist


@router.post("", response_model=ArtistResponse, status_code=status.HTTP_200_OK)
async def create_artist(
    bio: Optional[str] = Form(None),
    specialty: Optional[str] = Form(None),
    website: Optional[str] = Form(None),
    instagram: Optional[str] = Form(None),
    twitter: Optional[str] = Form(None),
    behance: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Submit an artist profile for the current user.

    Form fields are validated and the image (if any) is checked before
    anything is written. The profile starts unverified.
    """
    data = parse_form(
        ArtistCreate,
        bio=bio,
        specialty=specialty,
        social_links={
            key: value
            for key, value in (
                ("website", website),
                ("instagram", instagram),
                ("twitter", twitter),
                ("behance", behance),
            )
            if value
        },
    )

    service = ArtistService(db)
    if await service.get_artist_by_user_id(user.id):
        raise ConflictError("Artist profile already exists", code="artist_exists")

    portfolio_url = None
    storage = StorageService()
    if image is not None and image.filename:
        content, extension = await validate_image_upload(image)
        portfolio_url = await storage.save(content, extension)

    try:
        return await service.create_artist(user.id, data, portfolio_url=portfolio_url)
    except Exception:
        await storage.delete(portfolio_url)
        raise


@router.put("/{artist_id}", response_model=ArtistResponse)
async def update_artist(
    artist_id: int,
    data: ArtistUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Owner-only profile edit (admins use the admin endpoint)."""
    service = ArtistService(db)
    artist = await service.get_artist(artist_id)
    if not artist:
        raise NotFoundError("Artist", artist_id)
    if artist.user_id != user.id:
        raise PermissionDeniedError("You can only edit your own artist profile")

    return await service.update_artist(artist_id, data)
