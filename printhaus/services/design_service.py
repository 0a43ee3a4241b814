"""
Design Service

Artist artwork: upload, public gallery, and the download counter that
checkout bumps.
"""
import logging
from typing import Optional, List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.models.design import Design
from printhaus.schemas.design import DesignCreate
from printhaus.services.storage import StorageService

logger = logging.getLogger(__name__)


class DesignService:
    def __init__(self, db: AsyncSession, storage: Optional[StorageService] = None):
        self.db = db
        self.storage = storage or StorageService()

    async def create_design(
        self,
        artist_id: int,
        data: DesignCreate,
        content: bytes,
        extension: str,
    ) -> Design:
        """
        Store the (already validated) image, then insert the design row.

        If the insert fails the stored file is removed again.
        """
        image_url = await self.storage.save(content, extension)
        design = Design(
            artist_id=artist_id,
            title=data.title,
            description=data.description,
            image_url=image_url,
            file_url=image_url,
            tags=data.tags,
            price=data.price,
            is_public=data.is_public,
        )
        self.db.add(design)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            await self.storage.delete(image_url)
            raise

        await self.db.refresh(design)
        logger.info(f"Design uploaded: id={design.id} artist_id={artist_id}")
        return design

    async def get_design(self, design_id: int) -> Optional[Design]:
        return await self.db.get(Design, design_id)

    async def get_all_designs(self) -> List[Design]:
        """Public designs, newest first."""
        result = await self.db.execute(
            select(Design)
            .where(Design.is_public.is_(True))
            .order_by(Design.created_at.desc(), Design.id.desc())
        )
        return list(result.scalars().all())

    async def get_designs_by_artist(self, artist_id: int) -> List[Design]:
        """Public designs of one artist, newest first."""
        result = await self.db.execute(
            select(Design)
            .where(Design.artist_id == artist_id, Design.is_public.is_(True))
            .order_by(Design.created_at.desc(), Design.id.desc())
        )
        return list(result.scalars().all())

    async def increment_download_count(self, design_id: int, by: int = 1) -> None:
        """Atomic counter bump; does not commit."""
        await self.db.execute(
            update(Design)
            .where(Design.id == design_id)
            .values(download_count=Design.download_count + by)
        )
