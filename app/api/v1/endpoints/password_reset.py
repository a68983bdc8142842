from datetime import datetime
from typing import Callable

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_clock
from app.db.database import get_db
from app.schemas.auth import (
    ResetCodeRequest,
    VerifyResetCodeRequest,
    MessageResponse,
    ErrorResponse,
)
from app.services.password_reset_service import PasswordResetService
from app.utils.email import EmailClient, get_email_client

# ============================================================
# Router Setup
# ============================================================

router = APIRouter(tags=["Password Reset"])


def get_password_reset_service(
    db: AsyncSession = Depends(get_db),
    email_client: EmailClient = Depends(get_email_client),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> PasswordResetService:
    return PasswordResetService(db, email_client, clock)


# ============================================================
# Send Reset Code Endpoint
# ============================================================

@router.post(
    "/send-code",
    response_model=MessageResponse,
    responses={
        200: {"description": "Reset code sent if the account exists"},
        400: {"model": ErrorResponse, "description": "Email missing or malformed"},
        500: {"model": ErrorResponse, "description": "Code could not be stored or sent"},
    }
)
async def send_reset_code(
    request_data: ResetCodeRequest,
    service: PasswordResetService = Depends(get_password_reset_service),
):
    """
    Request a password reset code.

    - **email**: Account email address

    A 6-digit code valid for 15 minutes is emailed if the account exists.
    The response is identical either way.
    """
    message = await service.request_reset_code(request_data.email)
    return MessageResponse(message=message)


# ============================================================
# Verify Reset Code Endpoint
# ============================================================

@router.post(
    "/verify-code",
    response_model=MessageResponse,
    responses={
        200: {"description": "Password reset successfully"},
        400: {"model": ErrorResponse, "description": "Invalid or expired code"},
        404: {"model": ErrorResponse, "description": "Account not found"},
        500: {"model": ErrorResponse, "description": "Password could not be updated"},
    }
)
async def verify_reset_code(
    request_data: VerifyResetCodeRequest,
    service: PasswordResetService = Depends(get_password_reset_service),
):
    """
    Redeem a reset code and set a new password.

    - **email**: Email address that requested the reset
    - **code**: 6-digit code from the email
    - **newPassword**: New password (must meet strength requirements)
    """
    message = await service.verify_reset_code(
        request_data.email,
        request_data.code,
        request_data.new_password,
    )
    return MessageResponse(message=message)
