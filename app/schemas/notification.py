from typing import Literal
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class ExpertSignupNotificationRequest(BaseModel):
    """An expert finished registration and awaits review."""

    model_config = ConfigDict(populate_by_name=True)

    expert_id: UUID = Field(alias="expertId")


class ExpertVerificationNotificationRequest(BaseModel):
    """An admin approved or rejected an expert."""

    model_config = ConfigDict(populate_by_name=True)

    expert_id: UUID = Field(alias="expertId")
    approved: bool


class SupportNotificationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ticket_id: UUID = Field(alias="ticketId")
    type: str = Field(description="Event type, e.g. 'new_ticket'")


class SuccessResponse(BaseModel):
    success: bool = True


class InterviewNotificationRequest(BaseModel):
    """An interview request was created, accepted or declined."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["new_request", "request_accepted", "request_declined"]
    interview_request_id: UUID = Field(alias="interviewRequestId")


class ConnectionNotificationRequest(BaseModel):
    """A connection was requested or accepted."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["connection_request", "connection_accepted"]
    connection_id: UUID = Field(alias="connectionId")


class ReminderRunResponse(BaseModel):
    success: bool = True
    sent: int
    failed: int
