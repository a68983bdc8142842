"""
Identity Admin

Administrative facade over the account store: look an account up by
email, replace its credential, check a credential. Services talk to
accounts only through this class.
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CredentialUpdateError
from app.core.security import get_password_hash, verify_password
from app.models import User
from app.repositories.user_repo import UserRepository

logger = logging.getLogger(__name__)


class IdentityAdmin:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def find_user_by_email(self, email: str) -> Optional[User]:
        return await self.user_repo.get_by_email(email)

    async def update_credential(self, user_id, new_password: str) -> None:
        """
        Replace the password hash of an account.

        Runs inside the caller's transaction; nothing is committed here.

        Raises:
            CredentialUpdateError: If the account row was not updated
        """
        password_hash = get_password_hash(new_password)
        updated = await self.user_repo.set_password_hash(user_id, password_hash)
        if not updated:
            raise CredentialUpdateError()

    async def verify_credentials(self, email: str, password: str) -> Optional[User]:
        """Return the active account if the password matches."""
        user = await self.user_repo.get_by_email(email)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user
