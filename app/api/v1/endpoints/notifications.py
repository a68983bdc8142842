from datetime import datetime
from typing import Callable

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_clock
from app.db.database import get_db
from app.schemas.auth import ErrorResponse
from app.schemas.notification import (
    ExpertSignupNotificationRequest,
    ExpertVerificationNotificationRequest,
    SupportNotificationRequest,
    InterviewNotificationRequest,
    ConnectionNotificationRequest,
    ReminderRunResponse,
    SuccessResponse,
)
from app.services.notification_service import NotificationService
from app.utils.email import EmailClient, get_email_client

router = APIRouter(tags=["Notifications"])

ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "Referenced row not found"},
    500: {"model": ErrorResponse, "description": "Email could not be sent"},
}


def get_notification_service(
    db: AsyncSession = Depends(get_db),
    email_client: EmailClient = Depends(get_email_client),
) -> NotificationService:
    return NotificationService(db, email_client)


@router.post("/expert-signup", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def expert_signup_notification(
    request_data: ExpertSignupNotificationRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Notify the admin that an expert registered and awaits review."""
    await service.notify_expert_signup(request_data.expert_id)
    return SuccessResponse()


@router.post("/expert-verification", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def expert_verification_notification(
    request_data: ExpertVerificationNotificationRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Tell an expert the outcome of their verification."""
    await service.notify_expert_verification(request_data.expert_id, request_data.approved)
    return SuccessResponse()


@router.post("/support", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def support_notification(
    request_data: SupportNotificationRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Email the admin about a support ticket event."""
    await service.notify_support_ticket(request_data.ticket_id, request_data.type)
    return SuccessResponse()


@router.post("/interview", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def interview_notification(
    request_data: InterviewNotificationRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Email the other side of an interview request about its new state."""
    await service.notify_interview_request(request_data.interview_request_id, request_data.type)
    return SuccessResponse()


@router.post("/connection", response_model=SuccessResponse, responses=ERROR_RESPONSES)
async def connection_notification(
    request_data: ConnectionNotificationRequest,
    service: NotificationService = Depends(get_notification_service),
):
    """Email about a connection request or its acceptance."""
    await service.notify_connection(request_data.connection_id, request_data.type)
    return SuccessResponse()


@router.post("/interview-reminders", response_model=ReminderRunResponse)
async def interview_reminders(
    service: NotificationService = Depends(get_notification_service),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """
    Send the 24-hour and 30-minute reminders that are due.

    Called by a scheduler every five minutes.
    """
    result = await service.send_interview_reminders(clock())
    return ReminderRunResponse(sent=result.sent, failed=result.failed)
