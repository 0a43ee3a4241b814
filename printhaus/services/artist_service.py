"""
Artist Service

Artist profiles: onboarding ("become an artist"), public listing of
verified artists, and owner/admin updates.
"""
import logging
from typing import Optional, List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from printhaus.core.config import settings
from printhaus.core.exceptions import ConflictError, NotFoundError
from printhaus.models.artist import Artist
from printhaus.models.user import User, UserType
from printhaus.schemas.artist import ArtistCreate, ArtistUpdate, AdminArtistUpdate

logger = logging.getLogger(__name__)


class ArtistService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_artist(self, artist_id: int) -> Optional[Artist]:
        result = await self.db.execute(select(Artist).where(Artist.id == artist_id))
        return result.scalar_one_or_none()

    async def get_artist_with_user(self, artist_id: int) -> Optional[Artist]:
        result = await self.db.execute(
            select(Artist)
            .options(selectinload(Artist.user))
            .where(Artist.id == artist_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_artist_by_user_id(self, user_id: int) -> Optional[Artist]:
        result = await self.db.execute(select(Artist).where(Artist.user_id == user_id))
        return result.scalar_one_or_none()

    async def get_all_artists(self) -> List[Artist]:
        """Public listing: verified artists only."""
        result = await self.db.execute(
            select(Artist)
            .where(Artist.is_verified.is_(True))
            .order_by(Artist.created_at.desc(), Artist.id.desc())
        )
        return list(result.scalars().all())

    async def list_all_artists(self) -> List[Artist]:
        """Admin listing: every profile with its user."""
        result = await self.db.execute(
            select(Artist)
            .options(selectinload(Artist.user))
            .order_by(Artist.created_at.desc(), Artist.id.desc())
        )
        return list(result.scalars().all())

    async def create_artist(
        self,
        user_id: int,
        data: ArtistCreate,
        portfolio_url: Optional[str] = None,
    ) -> Artist:
        """
        Create the artist profile for a user and promote them to artist.

        Raises:
            NotFoundError: the user does not exist
            ConflictError: the user already has a profile
        """
        user = await self.db.get(User, user_id)
        if not user:
            raise NotFoundError("User", user_id)

        if await self.get_artist_by_user_id(user_id):
            raise ConflictError("Artist profile already exists", code="artist_exists")

        artist = Artist(
            user_id=user_id,
            bio=data.bio,
            specialty=data.specialty,
            social_links=data.social_links.model_dump(exclude_none=True),
            portfolio_url=portfolio_url or data.portfolio_url,
            is_verified=False,
            commission_rate=settings.DEFAULT_COMMISSION_RATE,
        )
        self.db.add(artist)
        if user.user_type == UserType.CUSTOMER.value:
            user.user_type = UserType.ARTIST.value

        try:
            await self.db.commit()
        except IntegrityError:
            # Concurrent submission for the same user lost the unique race
            await self.db.rollback()
            raise ConflictError("Artist profile already exists", code="artist_exists")

        await self.db.refresh(artist)
        logger.info(f"Artist profile created: id={artist.id} user_id={user_id}")
        return artist

    async def update_artist(
        self,
        artist_id: int,
        data: ArtistUpdate,
        portfolio_url: Optional[str] = None,
    ) -> Artist:
        artist = await self.get_artist(artist_id)
        if not artist:
            raise NotFoundError("Artist", artist_id)

        updates = data.model_dump(exclude_unset=True)
        if "social_links" in updates:
            if data.social_links is None:
                artist.social_links = {}
            else:
                merged = dict(artist.social_links or {})
                merged.update(data.social_links.model_dump(exclude_unset=True))
                artist.social_links = {k: v for k, v in merged.items() if v is not None}
        for field in ("bio", "specialty", "portfolio_url"):
            if field in updates:
                setattr(artist, field, updates[field])
        if portfolio_url:
            artist.portfolio_url = portfolio_url

        await self.db.commit()
        await self.db.refresh(artist)
        return artist

    async def admin_update_artist(self, artist_id: int, data: AdminArtistUpdate) -> Artist:
        artist = await self.get_artist(artist_id)
        if not artist:
            raise NotFoundError("Artist", artist_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(artist, field, value)

        await self.db.commit()
        await self.db.refresh(artist)
        return artist

    async def set_verified(self, artist_id: int, is_verified: bool) -> Artist:
        return await self.admin_update_artist(artist_id, AdminArtistUpdate(is_verified=is_verified))

