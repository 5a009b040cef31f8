"""
Domain exceptions - Semantic error types for registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Each class carries a client-safe ``detail`` message; the API layer
decides the HTTP status.
"""


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    detail = "Registration failed."


# Client-correctable input problems (HTTP 400)


class ValidationError(RegistrationError):
    """Request is missing required data or carries unacceptable data."""

    detail = "Invalid request."


class MissingFile(ValidationError):
    """No profile image accompanied the registration."""

    detail = "File upload failed!"


class MissingFields(ValidationError):
    """One or more required registration fields are absent or blank."""

    detail = "All fields are required!"

    def __init__(self, fields: list[str]) -> None:
        super().__init__(", ".join(fields))
        self.fields = fields


class MissingVerificationInput(ValidationError):
    """Verification request lacks the token cookie or the OTP."""

    detail = "Token and OTP are required."


class UploadRejected(ValidationError):
    """Upload collaborator refused the file (type or size)."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


# Pending-registration token failures (HTTP 400, one generic message)


class TokenError(RegistrationError):
    """Signed token could not be trusted; registration must restart."""

    detail = "Invalid token."


class MissingToken(TokenError):
    """No token was presented."""

    pass


class MalformedToken(TokenError):
    """Token structure or payload shape is not recognised."""

    pass


class TamperedToken(TokenError):
    """Integrity tag does not match the token contents."""

    pass


class ExpiredToken(TokenError):
    """Integrity tag is valid but the token has expired."""

    pass


class OtpMismatch(RegistrationError):
    """Submitted OTP does not match the staged one. Token stays usable."""

    detail = "Invalid OTP."


# Collaborator failures (HTTP 500, never retried by the server)


class DependencyFailure(RegistrationError):
    """A collaborator (hashing, email, signing, storage) failed."""

    detail = "Internal server error."


class HashingFailed(DependencyFailure):
    detail = "Failed to process registration."


class NotificationFailed(DependencyFailure):
    detail = "Failed to send OTP."


class TokenIssueFailed(DependencyFailure):
    detail = "Failed to generate token."


class StorageFailed(DependencyFailure):
    detail = "Failed to store the data."
