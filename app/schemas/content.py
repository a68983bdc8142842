from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, ConfigDict


class ContentItem(BaseModel):
    content_key: str
    content_value: str


class ContentResponse(BaseModel):
    content: Dict[str, str]


class ContentChangeEvent(BaseModel):
    """
    Row-level change pushed by the database webhook.

    ``record`` carries the new row for INSERT/UPDATE,
    ``old_record`` the previous row for DELETE.
    """

    model_config = ConfigDict(extra="ignore")

    type: Literal["INSERT", "UPDATE", "DELETE"]
    table: Optional[str] = None
    record: Optional[Dict[str, Any]] = None
    old_record: Optional[Dict[str, Any]] = None
