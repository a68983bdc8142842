"""
Expert Connection Repository
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.repositories.base import BaseRepository
from app.models.expert_connection import ExpertConnection


class ExpertConnectionRepository(BaseRepository[ExpertConnection]):
    """Repository for ExpertConnection model."""

    def __init__(self, db: AsyncSession):
        super().__init__(ExpertConnection, db)

    async def get_with_participants(self, connection_id) -> Optional[ExpertConnection]:
        """Load a connection together with both users."""
        result = await self.db.execute(
            select(ExpertConnection)
            .options(
                selectinload(ExpertConnection.requester),
                selectinload(ExpertConnection.recipient),
            )
            .where(ExpertConnection.id == connection_id)
        )
        return result.scalar_one_or_none()
