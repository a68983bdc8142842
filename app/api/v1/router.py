from fastapi import APIRouter
from app.api.v1.endpoints import auth, password_reset, profiles, notifications, content

# ============================================================
# Main API v1 Router
# ============================================================

api_router = APIRouter()

# Login at /auth
api_router.include_router(
    auth.router,
    prefix="/auth"
)

# Reset code issuance and verification
api_router.include_router(
    password_reset.router,
    prefix="/password-reset"
)

# Profile-gated home routing
api_router.include_router(
    profiles.router,
    prefix="/profiles"
)

# Transactional notification emails
api_router.include_router(
    notifications.router,
    prefix="/notifications"
)

# Site content served from the changefeed-backed cache
api_router.include_router(
    content.router,
    prefix="/content"
)
