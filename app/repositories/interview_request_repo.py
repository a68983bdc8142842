"""
Interview Request Repository
"""

from datetime import datetime
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_
from sqlalchemy.orm import selectinload

from app.repositories.base import BaseRepository
from app.models.interview_request import InterviewRequest, INTERVIEW_STATUS_ACCEPTED


class InterviewRequestRepository(BaseRepository[InterviewRequest]):
    """Repository for InterviewRequest model."""

    def __init__(self, db: AsyncSession):
        super().__init__(InterviewRequest, db)

    def _with_participants(self):
        return select(InterviewRequest).options(
            selectinload(InterviewRequest.researcher),
            selectinload(InterviewRequest.expert),
        )

    async def get_with_participants(self, request_id) -> Optional[InterviewRequest]:
        """Load a request together with its researcher and expert."""
        result = await self.db.execute(
            self._with_participants().where(InterviewRequest.id == request_id)
        )
        return result.scalar_one_or_none()

    async def get_accepted_between(
        self,
        start: datetime,
        end: datetime,
        reminder_flag,
    ) -> List[InterviewRequest]:
        """
        Accepted interviews scheduled in [start, end] that have not had
        this reminder yet.

        Args:
            reminder_flag: InterviewRequest.day_reminder_sent or
                InterviewRequest.soon_reminder_sent
        """
        result = await self.db.execute(
            self._with_participants()
            .where(
                and_(
                    InterviewRequest.status == INTERVIEW_STATUS_ACCEPTED,
                    InterviewRequest.scheduled_date >= start,
                    InterviewRequest.scheduled_date <= end,
                    reminder_flag == False  # noqa: E712
                )
            )
            .order_by(InterviewRequest.scheduled_date)
        )
        return list(result.scalars().all())

    async def mark_reminded(self, request_id, reminder_flag) -> None:
        """Flip one reminder flag. Not committed."""
        await self.db.execute(
            update(InterviewRequest)
            .where(InterviewRequest.id == request_id)
            .values({reminder_flag.key: True})
        )
