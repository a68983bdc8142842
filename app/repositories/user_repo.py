"""
User Repository

Data access layer for User model.
All user-related database operations.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update

from app.repositories.base import BaseRepository
from app.models import User


class UserRepository(BaseRepository[User]):
    """Repository for User model."""

    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    # =================
    # Get by email
    # =================
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address."""
        result = await self.db.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    # =================
    # Get user type
    # =================
    async def get_user_type(self, user_id) -> Optional[str]:
        """Read only the stored user_type of a profile."""
        result = await self.db.execute(
            select(User.user_type).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    # =================
    # Set password hash
    # =================
    async def set_password_hash(self, user_id, password_hash: str) -> bool:
        """
        Overwrite a user's password hash without committing.

        Returns:
            True if a row was updated
        """
        result = await self.db.execute(
            update(User)
            .where(User.id == user_id)
            .values(password_hash=password_hash)
        )
        return result.rowcount == 1
