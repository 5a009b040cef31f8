"""
Registration domain service - Stateless pending-registration protocol.

This module contains the core business logic for two-phase user
registration with a one-time passcode as the gate.

Flow
====

stage():
    form fields + stored file -> hash password -> generate OTP
    -> email OTP -> encode PendingRegistration into a signed token

confirm():
    token + OTP -> decode token -> verify OTP -> derive ConfirmedIdentity
    -> encode auth token -> insert one DurableUserRecord

Nothing is stored between the two requests. The signed token is the
only witness of the pending registration, so an OTP mismatch or a
storage failure leaves it valid for another attempt until it expires.

Known gap: nothing marks a token as consumed. Replaying confirm() with
the same token and OTP after a successful commit, or two concurrent
confirmations, each insert a row.
"""

import logging
from dataclasses import dataclass

from .exceptions import ExpiredToken, OtpMismatch, StorageFailed
from .hashing import BcryptPasswordHasher
from .models import (
    ConfirmedIdentity,
    DurableUserRecord,
    FileReference,
    PendingRegistration,
    RegistrationDetails,
)
from .otp import DIGITS, generate_otp, verify_otp
from .ports import EmailSender, RegistrationState, UserRepository
from .tokens import AUTH_PURPOSE, REGISTRATION_PURPOSE, SignedTokenCodec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagedRegistration:
    """Result of stage(): the pending token and the stored file name."""

    token: str
    file_name: str


@dataclass(frozen=True)
class Confirmation:
    """Result of a successful confirm()."""

    auth_token: str
    identity: ConfirmedIdentity
    record_id: int
    state: RegistrationState = RegistrationState.COMMITTED


@dataclass
class RegistrationService:
    """
    Domain service for OTP-gated registration.

    All collaborators are injected; the service holds no per-request state.
    """

    hasher: BcryptPasswordHasher
    codec: SignedTokenCodec
    email_sender: EmailSender
    repository: UserRepository
    otp_length: int = 6
    otp_alphabet: str = DIGITS
    pending_ttl_seconds: int = 3600
    auth_ttl_seconds: int = 30 * 24 * 3600

    def stage(self, details: RegistrationDetails, file: FileReference) -> StagedRegistration:
        """
        Stage a registration inside a signed token and email the OTP.

        Args:
            details: Registration form fields
            file: Reference to the already stored profile image

        Returns:
            StagedRegistration with the pending token

        Raises:
            MissingFields: If a required field is absent
            HashingFailed: If the password could not be hashed
            NotificationFailed: If the OTP could not be sent (no token issued)
            TokenIssueFailed: If the token could not be signed
        """
        details.require_complete()

        password_hash = self.hasher.hash(details.password)
        otp = generate_otp(self.otp_length, self.otp_alphabet)

        self.email_sender.send_otp(details.email, otp)

        pending = PendingRegistration(
            name=details.name,
            email=details.email,
            mobile=details.mobile,
            city=details.city,
            age=details.age,
            role=details.role or None,
            password_hash=password_hash,
            file=file,
            otp=otp,
        )
        token = self.codec.encode(pending, self.pending_ttl_seconds, REGISTRATION_PURPOSE)
        logger.info("Registration %s for %s (file %s)", RegistrationState.STAGED.value, details.email, file.filename)
        return StagedRegistration(token=token, file_name=file.filename)

    def confirm(self, token: str | None, otp: str | None) -> Confirmation:
        """
        Verify the OTP against the pending token and commit the registration.

        Args:
            token: Pending-registration token from stage()
            otp: Code submitted by the client

        Returns:
            Confirmation carrying the new auth token

        Raises:
            TokenError: Missing, malformed, tampered or expired token
            OtpMismatch: Code does not match; the token remains usable
            TokenIssueFailed: If the auth token could not be signed
            StorageFailed: If the insert did not happen; the token remains usable
        """
        try:
            pending = self.codec.decode(token, PendingRegistration, REGISTRATION_PURPOSE)
        except ExpiredToken:
            logger.info("Registration %s: pending token rejected", RegistrationState.EXPIRED.value)
            raise

        if not verify_otp(otp, pending):
            logger.info("OTP mismatch for %s, registration stays %s", pending.email, RegistrationState.STAGED.value)
            raise OtpMismatch()

        logger.info("Registration %s for %s", RegistrationState.COMMIT_ATTEMPTED.value, pending.email)
        identity = pending.confirm()
        auth_token = self.codec.encode(identity, self.auth_ttl_seconds, AUTH_PURPOSE)
        record = DurableUserRecord.from_identity(identity, auth_token)

        try:
            record_id = self.repository.insert(record)
        except StorageFailed:
            logger.warning(
                "Storage failed for %s, registration back to %s", pending.email, RegistrationState.STAGED.value
            )
            raise

        logger.info("Registration %s for %s (id %s)", RegistrationState.COMMITTED.value, pending.email, record_id)
        return Confirmation(auth_token=auth_token, identity=identity, record_id=record_id)

    def decode_auth_token(self, token: str | None) -> ConfirmedIdentity:
        """Decode a previously issued auth token back into its identity."""
        return self.codec.decode(token, ConfirmedIdentity, AUTH_PURPOSE)
