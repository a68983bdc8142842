"""
Site Content Repository
"""

from typing import Dict
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.repositories.base import BaseRepository
from app.models.site_content import SiteContent


class SiteContentRepository(BaseRepository[SiteContent]):
    """Repository for SiteContent model."""

    def __init__(self, db: AsyncSession):
        super().__init__(SiteContent, db)

    async def get_all_pairs(self) -> Dict[str, str]:
        """Every content_key mapped to its content_value."""
        result = await self.db.execute(
            select(SiteContent.content_key, SiteContent.content_value)
        )
        return {key: value for key, value in result.all()}
