from sqlalchemy import Column, String, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel


class SupportTicket(BaseModel):
    __tablename__ = "support_tickets"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    subject = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)
    status = Column(String(20), default="open", nullable=False)

    user = relationship("User", back_populates="support_tickets")
