"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class RegisterResponse(BaseModel):
    """Response model for a submitted registration."""

    success: bool = True
    message: str
    token: str
    file: str = Field(..., description="Generated name of the stored profile image")


class VerifyOtpRequest(BaseModel):
    """Request model for OTP verification."""

    otp: str | None = Field(None, description="One-time passcode received by email")

    @field_validator("otp", mode="before")
    @classmethod
    def coerce_otp(cls, v: Any) -> Any:
        # Clients may send the code as a JSON number
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class VerifyOtpResponse(BaseModel):
    """Response model for a confirmed registration."""

    success: bool = True
    message: str
    authToken: str


class ErrorResponse(BaseModel):
    """Standard error response model."""

    success: bool = False
    message: str
