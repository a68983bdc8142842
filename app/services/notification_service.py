"""
Notification Service

Transactional emails about expert onboarding, support tickets,
interview requests and connections, plus the scheduled interview
reminders. Each notify_* method loads the row it reports on and sends
one email.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import EmailDeliveryError, NotFoundError
from app.models.interview_request import InterviewRequest
from app.repositories.user_repo import UserRepository
from app.repositories.support_ticket_repo import SupportTicketRepository
from app.repositories.interview_request_repo import InterviewRequestRepository
from app.repositories.expert_connection_repo import ExpertConnectionRepository
from app.utils.email import EmailClient
from app.utils.email_templates import (
    connection_accepted_email,
    connection_request_email,
    expert_signup_email,
    expert_verification_email,
    interview_accepted_email,
    interview_day_reminder_email,
    interview_declined_email,
    interview_soon_reminder_email,
    new_interview_request_email,
    new_support_ticket_email,
)

logger = logging.getLogger(__name__)

SUPPORT_EVENT_NEW_TICKET = "new_ticket"

INTERVIEW_EVENT_NEW_REQUEST = "new_request"
INTERVIEW_EVENT_ACCEPTED = "request_accepted"
INTERVIEW_EVENT_DECLINED = "request_declined"

CONNECTION_EVENT_REQUEST = "connection_request"
CONNECTION_EVENT_ACCEPTED = "connection_accepted"

# Day reminder: scheduled within half an hour of now + 24h
DAY_REMINDER_LEAD = timedelta(hours=24)
DAY_REMINDER_SLACK = timedelta(minutes=30)
# Soon reminder: scheduled 30 to 35 minutes from now
SOON_REMINDER_START = timedelta(minutes=30)
SOON_REMINDER_END = timedelta(minutes=35)


@dataclass
class ReminderRunResult:
    sent: int = 0
    failed: int = 0


class NotificationService:
    def __init__(self, db: AsyncSession, email_client: EmailClient):
        self.db = db
        self.email_client = email_client
        self.user_repo = UserRepository(db)
        self.ticket_repo = SupportTicketRepository(db)
        self.interview_repo = InterviewRequestRepository(db)
        self.connection_repo = ExpertConnectionRepository(db)

    async def _get_expert(self, expert_id: UUID):
        expert = await self.user_repo.get_by_id(expert_id)
        if not expert:
            raise NotFoundError("Expert not found")
        return expert

    # ============================================================
    # Expert signup -> admin
    # ============================================================
    async def notify_expert_signup(self, expert_id: UUID) -> None:
        """Tell the admin a new expert is waiting for verification."""
        logger.info(f"Processing expert signup notification for {expert_id}")
        expert = await self._get_expert(expert_id)

        subject, html = expert_signup_email(
            full_name=expert.full_name,
            email=expert.email,
            institution=expert.institution,
            field_of_expertise=expert.field_of_expertise,
            years_of_experience=expert.years_of_experience,
            specific_experience=expert.specific_experience,
        )
        await self.email_client.send([settings.ADMIN_EMAIL], subject, html)

    # ============================================================
    # Expert verification -> expert
    # ============================================================
    async def notify_expert_verification(self, expert_id: UUID, approved: bool) -> None:
        """Tell an expert whether their account was approved."""
        logger.info(f"Processing expert verification notification for {expert_id}, approved: {approved}")
        expert = await self._get_expert(expert_id)

        subject, html = expert_verification_email(expert.full_name, approved)
        await self.email_client.send([expert.email], subject, html)

    # ============================================================
    # Support ticket -> admin
    # ============================================================
    async def notify_support_ticket(self, ticket_id: UUID, event_type: str) -> bool:
        """
        Email the admin about a support ticket event.

        Returns:
            True if an email was sent; only new tickets trigger one
        """
        logger.info(f"Processing support notification: {event_type} for ticket {ticket_id}")
        ticket = await self.ticket_repo.get_with_author(ticket_id)
        if not ticket:
            raise NotFoundError("Ticket not found")

        if event_type != SUPPORT_EVENT_NEW_TICKET:
            return False

        author = ticket.user
        subject, html = new_support_ticket_email(
            subject_line=ticket.subject,
            author_name=author.full_name if author else None,
            author_email=author.email if author else None,
            created_at=ticket.created_at,
        )
        await self.email_client.send(
            [settings.ADMIN_EMAIL],
            subject,
            html,
            sender=settings.SUPPORT_EMAIL_FROM,
        )
        return True

    # ============================================================
    # Interview request -> expert or researcher
    # ============================================================
    async def notify_interview_request(self, request_id: UUID, event_type: str) -> None:
        """
        Email the other side of an interview request.

        new_request goes to the expert; request_accepted and
        request_declined go to the researcher.
        """
        logger.info(f"Processing interview notification: {event_type} for request {request_id}")
        interview = await self.interview_repo.get_with_participants(request_id)
        if not interview:
            raise NotFoundError("Interview request not found")

        researcher, expert = interview.researcher, interview.expert
        researcher_name = researcher.full_name if researcher else None
        expert_name = expert.full_name if expert else None

        if event_type == INTERVIEW_EVENT_NEW_REQUEST:
            recipient = expert
            subject, html = new_interview_request_email(
                expert_name=expert_name,
                researcher_name=researcher_name,
                research_topic=interview.research_topic,
                duration_minutes=interview.duration_minutes,
                preferred_date=interview.preferred_date,
            )
        elif event_type == INTERVIEW_EVENT_ACCEPTED:
            recipient = researcher
            subject, html = interview_accepted_email(
                researcher_name=researcher_name,
                expert_name=expert_name,
                research_topic=interview.research_topic,
                duration_minutes=interview.duration_minutes,
            )
        else:
            recipient = researcher
            subject, html = interview_declined_email(
                researcher_name=researcher_name,
                expert_name=expert_name,
                research_topic=interview.research_topic,
            )

        if not recipient:
            raise NotFoundError("Recipient not found")

        await self.email_client.send(
            [recipient.email],
            subject,
            html,
            sender=settings.NOTIFICATIONS_EMAIL_FROM,
        )

    # ============================================================
    # Connection -> recipient or requester
    # ============================================================
    async def notify_connection(self, connection_id: UUID, event_type: str) -> None:
        """
        Email about a connection request.

        connection_request goes to the recipient; connection_accepted
        goes back to the requester.
        """
        logger.info(f"Processing connection notification: {event_type} for connection {connection_id}")
        connection = await self.connection_repo.get_with_participants(connection_id)
        if not connection:
            raise NotFoundError("Connection not found")

        requester, recipient = connection.requester, connection.recipient
        if not requester or not recipient:
            raise NotFoundError("Could not fetch user profiles")

        if event_type == CONNECTION_EVENT_REQUEST:
            to = recipient.email
            subject, html = connection_request_email(
                recipient_name=recipient.full_name,
                sender_name=requester.full_name,
                sender_type=requester.user_type,
                sender_institution=requester.institution,
            )
        else:
            to = requester.email
            subject, html = connection_accepted_email(
                requester_name=requester.full_name,
                accepter_name=recipient.full_name,
                accepter_type=recipient.user_type,
                accepter_institution=recipient.institution,
            )

        await self.email_client.send([to], subject, html, sender=settings.NOTIFICATIONS_EMAIL_FROM)

    # ============================================================
    # Interview reminders -> both participants
    # ============================================================
    async def send_interview_reminders(self, now: datetime) -> ReminderRunResult:
        """
        Send due reminders for accepted interviews.

        Meant to run every few minutes. An interview whose emails all
        went out is flagged so later runs skip it; one with a failed
        email stays unflagged and is retried while still in its window.
        """
        logger.info("Processing interview reminders")
        result = ReminderRunResult()

        day_due = await self.interview_repo.get_accepted_between(
            now + DAY_REMINDER_LEAD - DAY_REMINDER_SLACK,
            now + DAY_REMINDER_LEAD + DAY_REMINDER_SLACK,
            InterviewRequest.day_reminder_sent,
        )
        logger.info(f"Found {len(day_due)} interviews for 24h reminder")
        for interview in day_due:
            await self._remind(interview, InterviewRequest.day_reminder_sent, result)

        soon_due = await self.interview_repo.get_accepted_between(
            now + SOON_REMINDER_START,
            now + SOON_REMINDER_END,
            InterviewRequest.soon_reminder_sent,
        )
        logger.info(f"Found {len(soon_due)} interviews for 30min reminder")
        for interview in soon_due:
            await self._remind(interview, InterviewRequest.soon_reminder_sent, result)

        logger.info(
            "Interview reminders processed",
            extra={"sent": result.sent, "failed": result.failed},
        )
        return result

    async def _remind(self, interview: InterviewRequest, reminder_flag, result: ReminderRunResult) -> None:
        expert, researcher = interview.expert, interview.researcher
        # (recipient, the other participant, dashboard page)
        targets = [
            (expert, researcher, "/expert-home"),
            (researcher, expert, "/interviews"),
        ]

        all_sent = True
        for recipient, other, dashboard_path in targets:
            if not recipient or not recipient.email:
                continue

            other_name = other.full_name if other else None
            if reminder_flag.key == InterviewRequest.day_reminder_sent.key:
                subject, html = interview_day_reminder_email(
                    recipient_name=recipient.full_name,
                    other_name=other_name,
                    research_topic=interview.research_topic,
                    scheduled_date=interview.scheduled_date,
                    duration_minutes=interview.duration_minutes,
                    dashboard_path=dashboard_path,
                )
            else:
                subject, html = interview_soon_reminder_email(
                    recipient_name=recipient.full_name,
                    other_name=other_name,
                    research_topic=interview.research_topic,
                    duration_minutes=interview.duration_minutes,
                )

            try:
                await self.email_client.send(
                    [recipient.email],
                    subject,
                    html,
                    sender=settings.REMINDERS_EMAIL_FROM,
                )
            except EmailDeliveryError:
                logger.error(
                    "Interview reminder not delivered",
                    extra={"interview_id": str(interview.id), "recipient": recipient.email},
                )
                result.failed += 1
                all_sent = False
            else:
                result.sent += 1

        if all_sent:
            await self.interview_repo.mark_reminded(interview.id, reminder_flag)
            await self.db.commit()
