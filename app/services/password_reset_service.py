"""
Password Reset Service

Issues emailed 6-digit reset codes and redeems them for a new password.

Lifecycle of a ResetCode row:
1. Created by request_reset_code with expires_at = now + RESET_CODE_EXPIRE_MINUTES
2. Flipped to used = True once, by verify_reset_code
3. Never deleted

Verification claims the code with a conditional update in the same
transaction as the credential change, so two concurrent requests cannot
both redeem one code, and a failed credential update leaves the code
unconsumed.
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings, RESET_POLICY_INVALIDATE
from app.core.exceptions import (
    AppError,
    CredentialUpdateError,
    InvalidResetCodeError,
    PersistenceError,
    UserNotFoundError,
)
from app.core.security import generate_reset_code
from app.models.base import utc_now
from app.repositories.reset_code_repo import ResetCodeRepository
from app.services.identity_admin import IdentityAdmin
from app.utils.email import EmailClient
from app.utils.email_templates import reset_code_email

logger = logging.getLogger(__name__)

RESET_CODE_SENT_MESSAGE = "If an account exists, a reset code has been sent"
PASSWORD_RESET_MESSAGE = "Password reset successful"


class PasswordResetService:
    """
    Service class for the password reset code flow.
    """
    def __init__(
        self,
        db: AsyncSession,
        email_client: EmailClient,
        clock: Callable[[], datetime] = utc_now,
        expire_minutes: int = None,
        reissue_policy: str = None,
    ):
        """
        Args:
            db: AsyncSession instance
            email_client: Client used to deliver the code
            clock: Returns the current timezone-aware time
            expire_minutes: Code lifetime, defaults to settings
            reissue_policy: 'allow_multiple' or 'invalidate', defaults to settings
        """
        self.db = db
        self.email_client = email_client
        self.clock = clock
        if expire_minutes is None:
            expire_minutes = settings.RESET_CODE_EXPIRE_MINUTES
        if reissue_policy is None:
            reissue_policy = settings.RESET_CODE_REISSUE_POLICY
        self.expire_minutes = expire_minutes
        self.reissue_policy = reissue_policy
        self.reset_repo = ResetCodeRepository(db)
        self.identity = IdentityAdmin(db)

    # ============================================================
    # Issue code
    # ============================================================

    async def request_reset_code(self, email: str) -> str:
        """
        Issue a reset code for an email and send it.

        Unknown or inactive accounts get the same message and nothing
        is stored, so the response does not reveal which emails exist.

        Returns:
            Message for the caller

        Raises:
            PersistenceError: If the code could not be stored
            EmailDeliveryError: If the email provider failed; the stored
                code is kept
        """
        try:
            user = await self.identity.find_user_by_email(email)

            if not user or not user.is_active:
                logger.info("Reset code requested for unknown account", extra={"email": email})
                return RESET_CODE_SENT_MESSAGE

            if self.reissue_policy == RESET_POLICY_INVALIDATE:
                invalidated = await self.reset_repo.invalidate_email_codes(email)
                if invalidated:
                    logger.info(f"Invalidated {invalidated} outstanding reset codes", extra={"email": email})

            reset = await self.reset_repo.create_reset_code(
                email=email,
                code=generate_reset_code(),
                now=self.clock(),
                expire_minutes=self.expire_minutes,
            )
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.exception("Failed to store reset code", extra={"email": email})
            raise PersistenceError() from e

        subject, html = reset_code_email(reset.code, self.expire_minutes)
        await self.email_client.send([email], subject, html)

        logger.info("Reset code issued", extra={"email": email, "reset_id": str(reset.id)})
        return RESET_CODE_SENT_MESSAGE

    # ============================================================
    # Redeem code
    # ============================================================

    async def verify_reset_code(self, email: str, code: str, new_password: str) -> str:
        """
        Redeem a reset code and set a new password.

        Wrong, expired and already-used codes all raise the same error.

        Returns:
            Message for the caller

        Raises:
            InvalidResetCodeError: No redeemable code matches
            UserNotFoundError: The code is valid but the account is gone or
                inactive
            CredentialUpdateError: The password could not be changed; the
                code stays unused
        """
        now = self.clock()

        try:
            reset = await self.reset_repo.find_valid_code(email, code, now)
            if not reset:
                logger.info("Invalid or expired reset code", extra={"email": email})
                raise InvalidResetCodeError()

            user = await self.identity.find_user_by_email(email)
            if not user or not user.is_active:
                logger.warning("Reset code matched but account is missing or inactive", extra={"email": email})
                raise UserNotFoundError()

            if not await self.reset_repo.claim_code(reset.id, now):
                # Another request redeemed it between our read and write
                logger.warning("Reset code already consumed", extra={"email": email, "reset_id": str(reset.id)})
                raise InvalidResetCodeError()

            await self.identity.update_credential(user.id, new_password)
            await self.db.commit()
        except AppError:
            await self.db.rollback()
            raise
        except (SQLAlchemyError, ValueError) as e:
            await self.db.rollback()
            logger.exception("Failed to update password", extra={"email": email})
            raise CredentialUpdateError() from e

        logger.info("Password reset successful", extra={"email": email})
        return PASSWORD_RESET_MESSAGE
