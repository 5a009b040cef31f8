"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory stand-ins for the email and storage collaborators
- Token codec and registration service wiring
- A test FastAPI application with dependency overrides
"""

import os
from collections.abc import Callable, Generator
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from otpgate.adapters.uploads.local import LocalProfileImageStore
from otpgate.api.dependencies import get_registration_service, get_upload_store
from otpgate.api.errors import register_exception_handlers
from otpgate.api.routes import router
from otpgate.domain.exceptions import NotificationFailed, StorageFailed
from otpgate.domain.hashing import BcryptPasswordHasher
from otpgate.domain.models import DurableUserRecord
from otpgate.domain.registration import RegistrationService
from otpgate.domain.tokens import SignedTokenCodec

SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs256"

# otpgate.api.main reads settings at import time
os.environ.setdefault("SECRET_KEY", SECRET_KEY)

JPEG_HEADER = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00"


class RecordingEmailSender:
    """EmailSender that remembers every OTP it was asked to deliver."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail = False

    def send_otp(self, email: str, code: str) -> None:
        if self.fail:
            raise NotificationFailed()
        self.sent.append((email, code))

    @property
    def last_code(self) -> str:
        return self.sent[-1][1]


class InMemoryUserRepository:
    """UserRepository keeping rows in a list."""

    def __init__(self) -> None:
        self.records: list[DurableUserRecord] = []
        self.fail = False

    def insert(self, record: DurableUserRecord) -> int:
        if self.fail:
            raise StorageFailed()
        self.records.append(record)
        return len(self.records)


def jpeg_bytes(size: int) -> bytes:
    """Fake JPEG payload of exactly ``size`` bytes."""
    return JPEG_HEADER + b"\x00" * (size - len(JPEG_HEADER))


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def secret_key() -> str:
    return SECRET_KEY


@pytest.fixture
def codec(secret_key: str) -> SignedTokenCodec:
    return SignedTokenCodec(secret_key)


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(10)


@pytest.fixture
def upload_store(tmp_path: Path) -> LocalProfileImageStore:
    return LocalProfileImageStore(tmp_path / "uploads")


@pytest.fixture
def make_service(
    hasher: BcryptPasswordHasher,
    email_sender: RecordingEmailSender,
    repository: InMemoryUserRepository,
) -> Callable[..., RegistrationService]:
    """Factory for a RegistrationService over the in-memory collaborators."""

    def _make(clock: Callable[[], datetime] | None = None) -> RegistrationService:
        codec = SignedTokenCodec(SECRET_KEY, clock=clock or (lambda: datetime.now(timezone.utc)))
        return RegistrationService(
            hasher=hasher,
            codec=codec,
            email_sender=email_sender,
            repository=repository,
        )

    return _make


@pytest.fixture
def service(make_service: Callable[..., RegistrationService]) -> RegistrationService:
    return make_service()


def build_app(service: RegistrationService, upload_store: LocalProfileImageStore) -> FastAPI:
    """Create a test application wired to the given service and upload store."""
    test_app = FastAPI()
    register_exception_handlers(test_app)
    test_app.include_router(router)
    test_app.dependency_overrides[get_registration_service] = lambda: service
    test_app.dependency_overrides[get_upload_store] = lambda: upload_store
    return test_app


@pytest.fixture
def client(
    service: RegistrationService, upload_store: LocalProfileImageStore
) -> Generator[TestClient, None, None]:
    """Test client over the in-memory collaborators."""
    with TestClient(build_app(service, upload_store)) as test_client:
        yield test_client


@pytest.fixture
def app_factory() -> Callable[[RegistrationService, LocalProfileImageStore], FastAPI]:
    return build_app


@pytest.fixture
def make_jpeg() -> Callable[[int], bytes]:
    return jpeg_bytes
