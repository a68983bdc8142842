"""
Profile Service

Decides which home view a session should land on.

States: loading -> {expert_home, index}. The client shows "loading"
until this answers and calls again whenever its auth state changes;
nothing is cached here.
"""

from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import USER_TYPE_EXPERT
from app.repositories.user_repo import UserRepository
from app.schemas.profile import HomeRouteResponse

ROUTE_EXPERT_HOME = "expert_home"
ROUTE_INDEX = "index"


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.user_repo = UserRepository(db)

    async def resolve_home_route(self, user_id: Optional[UUID]) -> HomeRouteResponse:
        """Experts get their own home; everyone else, signed in or not, gets the index."""
        if user_id is None:
            return HomeRouteResponse(route=ROUTE_INDEX)

        user_type = await self.user_repo.get_user_type(user_id)

        if user_type == USER_TYPE_EXPERT:
            return HomeRouteResponse(route=ROUTE_EXPERT_HOME, user_type=user_type)

        return HomeRouteResponse(route=ROUTE_INDEX, user_type=user_type)
