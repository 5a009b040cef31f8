"""
Shared fixtures for adversarial tests.

Provides a signed pending-registration token to attack. Everything
runs in memory; no database is needed.
"""

import pytest

from otpgate.domain.models import FileReference, PendingRegistration
from otpgate.domain.tokens import REGISTRATION_PURPOSE, SignedTokenCodec


@pytest.fixture
def pending() -> PendingRegistration:
    return PendingRegistration(
        name="Grace Hopper",
        email="grace@example.com",
        mobile="5550199",
        city="Arlington",
        age="85",
        role="admin",
        password_hash="$2b$10$abcdefghijklmnopqrstuuJ3Gx6S1c9vKq8H3o2ZLm4Yx0aB1c2D3",
        file=FileReference("profilePic-1-00ff00ff.png", "grace.png", "/srv/uploads/profilePic-1-00ff00ff.png"),
        otp="271828",
    )


@pytest.fixture
def pending_token(codec: SignedTokenCodec, pending: PendingRegistration) -> str:
    return codec.encode(pending, 3600, REGISTRATION_PURPOSE)
