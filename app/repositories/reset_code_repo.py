"""
Reset Code Repository

Data access layer for ResetCode model.
All password reset code database operations.
"""

from typing import Optional
from datetime import datetime, timedelta
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, and_

from app.repositories.base import BaseRepository
from app.models.reset_code import ResetCode


class ResetCodeRepository(BaseRepository[ResetCode]):
    """Repository for ResetCode model."""

    def __init__(self, db: AsyncSession):
        super().__init__(ResetCode, db)

    # =================
    # Create reset code
    # =================
    async def create_reset_code(
        self,
        email: str,
        code: str,
        now: datetime,
        expire_minutes: int,
    ) -> ResetCode:
        """
        Persist a new reset code for an email.

        Args:
            email: Account email the code belongs to
            code: 6-digit code
            now: Creation time
            expire_minutes: Minutes until the code expires

        Returns:
            The committed ResetCode
        """
        reset = ResetCode(
            email=email,
            code=code,
            expires_at=now + timedelta(minutes=expire_minutes),
            used=False,
            created_at=now,
            updated_at=now,
        )

        self.db.add(reset)
        await self.db.commit()
        await self.db.refresh(reset)

        return reset

    # =================
    # Invalidate email codes
    # =================
    async def invalidate_email_codes(self, email: str) -> int:
        """
        Mark every outstanding code for an email as used.

        Not committed; create_reset_code commits it with the new code.

        Returns:
            Number of codes invalidated
        """
        result = await self.db.execute(
            update(ResetCode)
            .where(
                and_(
                    ResetCode.email == email,
                    ResetCode.used == False  # noqa: E712
                )
            )
            .values(used=True)
        )
        return result.rowcount

    # =================
    # Find valid code
    # =================
    async def find_valid_code(
        self,
        email: str,
        code: str,
        now: datetime,
    ) -> Optional[ResetCode]:
        """
        Newest unused, unexpired code matching email and code.

        Returns:
            ResetCode if one matches, None otherwise
        """
        result = await self.db.execute(
            select(ResetCode)
            .where(
                and_(
                    ResetCode.email == email,
                    ResetCode.code == code,
                    ResetCode.used == False,  # noqa: E712
                    ResetCode.expires_at > now
                )
            )
            .order_by(ResetCode.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    # =================
    # Claim code
    # =================
    async def claim_code(self, reset_id, now: datetime) -> bool:
        """
        Flip ``used`` only if the row is still unused.

        Not committed; the caller commits together with the credential
        change or rolls both back.

        Returns:
            False if another request consumed the code first
        """
        result = await self.db.execute(
            update(ResetCode)
            .where(
                and_(
                    ResetCode.id == reset_id,
                    ResetCode.used == False  # noqa: E712
                )
            )
            .values(used=True, updated_at=now)
        )
        return result.rowcount == 1
