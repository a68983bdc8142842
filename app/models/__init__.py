from app.models.base import Base
from app.models.user import User
from app.models.reset_code import ResetCode
from app.models.support_ticket import SupportTicket
from app.models.site_content import SiteContent
from app.models.interview_request import InterviewRequest
from app.models.expert_connection import ExpertConnection

__all__ = [
    "Base",
    "User",
    "ResetCode",
    "SupportTicket",
    "SiteContent",
    "InterviewRequest",
    "ExpertConnection",
]
