from typing import Literal, Optional
from pydantic import BaseModel

HomeRoute = Literal["expert_home", "index"]


class HomeRouteResponse(BaseModel):
    """Which home view the client should render."""

    route: HomeRoute
    user_type: Optional[str] = None
