"""
Email Utility

Transactional email delivery through the Resend API.
"""

import logging
from typing import List, Optional

import resend
from fastapi.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)


class EmailClient:
    """
    Sends HTML emails through Resend.

    When no API key is configured the message is logged and dropped,
    which keeps local development usable without credentials.
    """

    def __init__(self, api_key: Optional[str] = None, default_sender: Optional[str] = None):
        self.api_key = api_key
        self.default_sender = default_sender or settings.EMAIL_FROM

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def send(
        self,
        recipients: List[str],
        subject: str,
        html: str,
        sender: Optional[str] = None,
    ) -> Optional[str]:
        """
        Send an email.

        Args:
            recipients: List of email addresses
            subject: Email subject
            html: HTML body
            sender: "Name <address>" override of the default sender

        Returns:
            Provider message id, or None when delivery is disabled

        Raises:
            EmailDeliveryError: If the provider call fails
        """
        if not self.is_configured:
            logger.warning("RESEND_API_KEY not configured. Email not sent.")
            logger.info(f"Mock Email: To={recipients}, Subject={subject}")
            return None

        payload = {
            "from": sender or self.default_sender,
            "to": recipients,
            "subject": subject,
            "html": html,
        }

        try:
            response = await run_in_threadpool(resend.Emails.send, payload)
        except Exception as e:
            logger.error(
                "Failed to send email",
                extra={"recipients": recipients, "subject": subject, "error": str(e)},
            )
            raise EmailDeliveryError() from e

        message_id = response.get("id") if isinstance(response, dict) else None
        logger.info(f"Email sent to {recipients} (id={message_id})")
        return message_id


_email_client: Optional[EmailClient] = None


def get_email_client() -> EmailClient:
    """
    Dependency returning the shared EmailClient.

    Overridden in tests with a recording fake.
    """
    global _email_client

    if _email_client is None:
        # The resend SDK reads its key from module state
        if settings.RESEND_API_KEY:
            resend.api_key = settings.RESEND_API_KEY
        _email_client = EmailClient(api_key=settings.RESEND_API_KEY)

    return _email_client
