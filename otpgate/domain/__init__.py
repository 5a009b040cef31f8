"""
Domain layer - Pure business logic with zero framework imports.

This package contains the stateless pending-registration protocol:
password hashing, OTP generation and verification, the signed token
codec, and the registration service. It defines its own port
interfaces for infrastructure abstraction.
"""

from .exceptions import (
    DependencyFailure,
    ExpiredToken,
    HashingFailed,
    MalformedToken,
    MissingFields,
    MissingFile,
    MissingToken,
    MissingVerificationInput,
    NotificationFailed,
    OtpMismatch,
    RegistrationError,
    StorageFailed,
    TamperedToken,
    TokenError,
    TokenIssueFailed,
    UploadRejected,
    ValidationError,
)
from .hashing import BcryptPasswordHasher
from .models import (
    ConfirmedIdentity,
    DurableUserRecord,
    FileReference,
    PendingRegistration,
    RegistrationDetails,
)
from .otp import generate_otp, verify_otp
from .ports import EmailSender, ProfileImageStore, RegistrationState, UserRepository
from .registration import Confirmation, RegistrationService, StagedRegistration
from .tokens import AUTH_PURPOSE, REGISTRATION_PURPOSE, SignedTokenCodec

__all__ = [
    "AUTH_PURPOSE",
    "BcryptPasswordHasher",
    "Confirmation",
    "ConfirmedIdentity",
    "DependencyFailure",
    "DurableUserRecord",
    "EmailSender",
    "ExpiredToken",
    "FileReference",
    "HashingFailed",
    "MalformedToken",
    "MissingFields",
    "MissingFile",
    "MissingToken",
    "MissingVerificationInput",
    "NotificationFailed",
    "OtpMismatch",
    "PendingRegistration",
    "ProfileImageStore",
    "REGISTRATION_PURPOSE",
    "RegistrationDetails",
    "RegistrationError",
    "RegistrationService",
    "RegistrationState",
    "SignedTokenCodec",
    "StagedRegistration",
    "StorageFailed",
    "TamperedToken",
    "TokenError",
    "TokenIssueFailed",
    "UploadRejected",
    "UserRepository",
    "ValidationError",
    "generate_otp",
    "verify_otp",
]
