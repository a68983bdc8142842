import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.auth import UserLogin, TokenResponse
from app.core.exceptions import AuthenticationError
from app.core.security import create_access_token, verify_access_token
from app.services.identity_admin import IdentityAdmin

from app.core.config import settings

logger = logging.getLogger(__name__)


class AuthService:
    """
    Service class for authentication operations.
    """
    def __init__(self, db: AsyncSession):
        """
        Initialize with database session.

        Args:
            db: AsyncSession instance
        """
        self.db = db
        self.identity = IdentityAdmin(db)

    # ============================================================
    # User Login
    # ============================================================
    async def login(self, login_data: UserLogin) -> TokenResponse:
        """
        Check credentials and issue an access token.

        Raises:
            AuthenticationError: If email or password is wrong
        """
        user = await self.identity.verify_credentials(login_data.email, login_data.password)

        if not user:
            logger.info("Failed login", extra={"email": login_data.email})
            raise AuthenticationError()

        return TokenResponse(
            access_token=create_access_token(subject=str(user.id)),
            token_type="bearer",
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

    # ============================================================
    # Session resolution
    # ============================================================
    async def get_session_user_id(self, token: Optional[str]) -> Optional[UUID]:
        """
        Resolve a bearer token to a user id.

        Returns None for missing, malformed or expired tokens.
        """
        if not token:
            return None

        subject = verify_access_token(token)
        if not subject:
            return None

        try:
            return UUID(subject)
        except ValueError:
            return None
