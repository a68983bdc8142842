"""
Reset Code Model

One row per password reset attempt. Rows are kept after use as an
audit trail; ``used`` flips to True exactly once.
"""

from sqlalchemy import Column, String, DateTime, Boolean
from .base import BaseModel


class ResetCode(BaseModel):
    __tablename__ = "password_reset_codes"

    email = Column(String(255), nullable=False, index=True)
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    used = Column(Boolean, default=False, nullable=False)
