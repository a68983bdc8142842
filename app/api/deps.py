from datetime import datetime
from typing import Callable, Optional
from uuid import UUID
import logging
import secrets

from fastapi import Depends, Header, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import WebhookAuthError
from app.db.database import get_db
from app.models.base import utc_now
from app.services.auth_service import AuthService
from app.services.content_cache import SiteContentCache

logger = logging.getLogger(__name__)

# Optional bearer: anonymous callers are allowed on session-aware routes
optional_security = HTTPBearer(auto_error=False)


# =====================================================
# Clock
# =====================================================
def get_clock() -> Callable[[], datetime]:
    """Current-time provider; tests override it to move time forward."""
    return utc_now


# =====================================================
# Session
# =====================================================
async def get_session_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: AsyncSession = Depends(get_db)
) -> Optional[UUID]:
    """
    Dependency returning the signed-in user's id, or None.

    Never raises for a bad token; it just means "no session".
    """
    token = credentials.credentials if credentials else None
    return await AuthService(db).get_session_user_id(token)


# =====================================================
# Site content cache
# =====================================================
def get_content_cache(request: Request) -> SiteContentCache:
    """The cache instance created in the application lifespan."""
    return request.app.state.content_cache


async def verify_webhook_secret(
    x_webhook_secret: Optional[str] = Header(None)
) -> None:
    """Reject change events that do not carry the configured secret."""
    expected = settings.CONTENT_WEBHOOK_SECRET
    if not expected:
        return

    if not secrets.compare_digest((x_webhook_secret or "").encode(), expected.encode()):
        logger.warning("Rejected content change event with bad secret")
        raise WebhookAuthError()
