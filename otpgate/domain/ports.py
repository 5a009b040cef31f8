"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from enum import Enum
from typing import BinaryIO, Protocol

from .models import DurableUserRecord, FileReference


class RegistrationState(str, Enum):
    """
    Lifecycle of a single pending registration.

    Transitions:
    - STAGED -> COMMIT_ATTEMPTED (OTP verified)
    - COMMIT_ATTEMPTED -> COMMITTED (storage acknowledged the insert)
    - COMMIT_ATTEMPTED -> STAGED (storage failed, token still valid)
    - STAGED -> STAGED (OTP mismatch, token still valid)
    - STAGED -> EXPIRED (token expiry elapsed, terminal)

    There is no server-side record of these states; the token is
    the only witness of STAGED, and the durable row of COMMITTED.
    """

    STAGED = "STAGED"
    COMMIT_ATTEMPTED = "COMMIT_ATTEMPTED"
    COMMITTED = "COMMITTED"
    EXPIRED = "EXPIRED"


class UserRepository(Protocol):
    """Port interface for confirmed-registration persistence."""

    def insert(self, record: DurableUserRecord) -> int:
        """
        Insert one confirmed registration as a single atomic statement.

        Args:
            record: Row to persist

        Returns:
            Identifier assigned by storage

        Raises:
            StorageFailed: If the insert did not happen
        """
        ...


class EmailSender(Protocol):
    """Port interface for OTP delivery."""

    def send_otp(self, email: str, code: str) -> None:
        """
        Deliver the OTP to the claimed address.

        Args:
            email: Recipient email address
            code: One-time passcode

        Raises:
            NotificationFailed: If delivery could not be attempted
        """
        ...


class ProfileImageStore(Protocol):
    """Port interface for the profile image upload collaborator."""

    def save(self, stream: BinaryIO, original_filename: str, content_type: str | None) -> FileReference:
        """
        Validate and store an uploaded image.

        Raises:
            UploadRejected: If the file type or size is not allowed
        """
        ...
