from app.repositories.base import BaseRepository
from app.repositories.user_repo import UserRepository
from app.repositories.reset_code_repo import ResetCodeRepository
from app.repositories.support_ticket_repo import SupportTicketRepository
from app.repositories.site_content_repo import SiteContentRepository
from app.repositories.interview_request_repo import InterviewRequestRepository
from app.repositories.expert_connection_repo import ExpertConnectionRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ResetCodeRepository",
    "SupportTicketRepository",
    "SiteContentRepository",
    "InterviewRequestRepository",
    "ExpertConnectionRepository",
]
