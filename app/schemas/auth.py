from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


# ============================================================
# Request Schemas (What client sends)
# ============================================================

class UserLogin(BaseModel):
    """Schema for login request"""

    email: EmailStr
    password: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "researcher@university.edu",
                "password": "SecurePass123"
            }
        }
    )


class ResetCodeRequest(BaseModel):
    """Schema for requesting a password reset code"""

    email: EmailStr


class VerifyResetCodeRequest(BaseModel):
    """Schema for redeeming a reset code and setting a new password"""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "email": "researcher@university.edu",
                "code": "123456",
                "newPassword": "NewSecurePass123"
            }
        }
    )

    email: EmailStr
    code: str = Field(min_length=1, max_length=12)
    # Any non-empty password is accepted
    new_password: str = Field(alias="newPassword", min_length=1)

    @field_validator("code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        return v.strip()


# ============================================================
# Response Schemas (What server sends back)
# ============================================================

class MessageResponse(BaseModel):
    """Schema for simple message responses"""

    message: str


class TokenResponse(BaseModel):
    """Schema for login response"""

    access_token: str
    token_type: str = "bearer"
    expires_in: int  # Seconds until access token expires


# ============================================================
# Error Schemas
# ============================================================

class ErrorResponse(BaseModel):
    """Schema for error responses"""

    error: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Invalid or expired verification code"
            }
        }
    )
