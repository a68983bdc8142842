"""
Support Ticket Repository
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from app.repositories.base import BaseRepository
from app.models.support_ticket import SupportTicket


class SupportTicketRepository(BaseRepository[SupportTicket]):
    """Repository for SupportTicket model."""

    def __init__(self, db: AsyncSession):
        super().__init__(SupportTicket, db)

    async def get_with_author(self, ticket_id) -> Optional[SupportTicket]:
        """Load a ticket together with the user who opened it."""
        result = await self.db.execute(
            select(SupportTicket)
            .options(selectinload(SupportTicket.user))
            .where(SupportTicket.id == ticket_id)
        )
        return result.scalar_one_or_none()
