from sqlalchemy import Column, String, Boolean, Integer, Text, JSON
from sqlalchemy.orm import relationship
from .base import BaseModel

USER_TYPE_RESEARCHER = "researcher"
USER_TYPE_EXPERT = "expert"


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(100), nullable=False)
    user_type = Column(String(20), default=USER_TYPE_RESEARCHER, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Expert profile fields
    institution = Column(String(255), nullable=True)
    field_of_expertise = Column(JSON, nullable=True)
    years_of_experience = Column(Integer, nullable=True)
    specific_experience = Column(Text, nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)

    support_tickets = relationship("SupportTicket", back_populates="user", cascade="all, delete-orphan")
