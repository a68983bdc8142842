from sqlalchemy import Column, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel

CONNECTION_STATUS_PENDING = "pending"
CONNECTION_STATUS_ACCEPTED = "accepted"


class ExpertConnection(BaseModel):
    """Request from one user to chat with another, expert or researcher."""

    __tablename__ = "expert_connections"

    requester_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    recipient_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), default=CONNECTION_STATUS_PENDING, nullable=False)

    requester = relationship("User", foreign_keys=[requester_id])
    recipient = relationship("User", foreign_keys=[recipient_id])
