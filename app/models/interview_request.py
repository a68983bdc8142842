"""
Interview Request Model

A researcher asks an expert for an interview. Once the expert accepts,
``scheduled_date`` drives the reminder emails; each reminder flag flips
to True once its email went out.
"""

from sqlalchemy import Column, String, Integer, DateTime, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel

INTERVIEW_STATUS_PENDING = "pending"
INTERVIEW_STATUS_ACCEPTED = "accepted"
INTERVIEW_STATUS_DECLINED = "declined"


class InterviewRequest(BaseModel):
    __tablename__ = "interview_requests"

    researcher_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expert_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    research_topic = Column(String(255), nullable=False)
    duration_minutes = Column(Integer, default=30, nullable=False)
    preferred_date = Column(DateTime(timezone=True), nullable=True)
    scheduled_date = Column(DateTime(timezone=True), nullable=True, index=True)
    status = Column(String(20), default=INTERVIEW_STATUS_PENDING, nullable=False)

    day_reminder_sent = Column(Boolean, default=False, nullable=False)
    soon_reminder_sent = Column(Boolean, default=False, nullable=False)

    researcher = relationship("User", foreign_keys=[researcher_id])
    expert = relationship("User", foreign_keys=[expert_id])
