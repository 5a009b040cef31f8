"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Configuration is read once through get_settings() and passed
explicitly to each component.
"""

from fastapi import Depends, Request
from psycopg_pool import ConnectionPool

from otpgate.adapters.repository.postgres import PostgresUserRepository
from otpgate.adapters.smtp.console import ConsoleEmailSender
from otpgate.adapters.smtp.smtp import SmtpEmailSender
from otpgate.adapters.uploads.local import LocalProfileImageStore
from otpgate.config.settings import Settings, get_settings
from otpgate.domain.hashing import BcryptPasswordHasher
from otpgate.domain.ports import EmailSender
from otpgate.domain.registration import RegistrationService
from otpgate.domain.tokens import SignedTokenCodec


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresUserRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresUserRepository(pool)


# Module-level singleton - ConsoleEmailSender is stateless
_console_sender = ConsoleEmailSender()


def get_email_sender(settings: Settings = Depends(get_settings)) -> EmailSender:
    """Get the configured email sender."""
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            from_email=settings.smtp_from_email,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
        )
    return _console_sender


def get_token_codec(settings: Settings = Depends(get_settings)) -> SignedTokenCodec:
    """Create token codec keyed by the configured secret."""
    return SignedTokenCodec(settings.secret_key, algorithm=settings.jwt_algorithm)


def get_upload_store(settings: Settings = Depends(get_settings)) -> LocalProfileImageStore:
    """Create profile image store for the configured upload directory."""
    return LocalProfileImageStore(settings.upload_dir, max_bytes=settings.max_upload_bytes)


def get_registration_service(
    request: Request,
    settings: Settings = Depends(get_settings),
    email_sender: EmailSender = Depends(get_email_sender),
    codec: SignedTokenCodec = Depends(get_token_codec),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together hashing, token signing, email and storage.
    """
    return RegistrationService(
        hasher=BcryptPasswordHasher(settings.bcrypt_cost),
        codec=codec,
        email_sender=email_sender,
        repository=get_repository(request),
        otp_length=settings.otp_length,
        otp_alphabet=settings.otp_alphabet,
        pending_ttl_seconds=settings.pending_token_ttl_seconds,
        auth_ttl_seconds=settings.auth_token_ttl_seconds,
    )
