from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_session_user_id
from app.db.database import get_db
from app.schemas.profile import HomeRouteResponse
from app.services.profile_service import ProfileService

router = APIRouter(tags=["Profiles"])


@router.get("/home-route", response_model=HomeRouteResponse)
async def get_home_route(
    user_id: Optional[UUID] = Depends(get_session_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Which home view to render for the current session.

    `expert_home` for experts, `index` for researchers and anonymous visitors.
    """
    return await ProfileService(db).resolve_home_route(user_id)
