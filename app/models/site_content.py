from sqlalchemy import Column, String, Text
from .base import BaseModel


class SiteContent(BaseModel):
    """Editable key/value copy shown on the public site."""

    __tablename__ = "site_content"

    content_key = Column(String(255), unique=True, nullable=False, index=True)
    content_value = Column(Text, nullable=False, default="")
