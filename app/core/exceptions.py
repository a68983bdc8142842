"""
Application Exceptions

Domain errors raised by services and rendered by the exception
handlers in app.main as ``{"error": message}`` responses.

The message of every AppError is safe to show to the caller.
Anything that is not an AppError is treated as an internal fault:
it is logged with full detail and answered with a generic 500.
"""

from fastapi import status


class AppError(Exception):
    """Base exception for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidResetCodeError(AppError):
    """
    Reset code is wrong, expired, or already used.

    The three cases share one message so callers cannot tell the cases apart.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid or expired verification code"


class UserNotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "User not found"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Not found"


class AuthenticationError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid email or password"


class EmailDeliveryError(AppError):
    """The email provider rejected or failed to accept a message."""

    message = "Failed to send email"


class CredentialUpdateError(AppError):
    """The identity store could not update an account password."""

    message = "Failed to update password"


class PersistenceError(AppError):
    """The database rejected a read or write."""


class WebhookAuthError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid webhook secret"
