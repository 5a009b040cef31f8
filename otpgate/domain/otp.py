"""
One-time passcodes - generation and verification.

Codes come from the ``secrets`` module; a predictable OTP would let
anyone holding a pending token confirm someone else's address.
"""

import secrets
import string

from .models import PendingRegistration

DIGITS = string.digits
ALPHANUMERIC = string.digits + string.ascii_uppercase

MIN_LENGTH = 4
MAX_LENGTH = 8


def generate_otp(length: int = 6, alphabet: str = DIGITS) -> str:
    """
    Generate a cryptographically secure OTP.

    Returns a string so leading zeros survive.

    Raises:
        ValueError: If length is outside [4, 8] or the alphabet is degenerate
    """
    if not MIN_LENGTH <= length <= MAX_LENGTH:
        raise ValueError(f"OTP length must be between {MIN_LENGTH} and {MAX_LENGTH}, got {length}")
    if len(set(alphabet)) < 2:
        raise ValueError("OTP alphabet needs at least two distinct symbols")
    return "".join(secrets.choice(alphabet) for _ in range(length))


def verify_otp(submitted: str | None, payload: PendingRegistration) -> bool:
    """
    Compare a submitted code with the staged one in constant time.

    Exact, case-sensitive match; empty or missing codes never match.
    """
    if not submitted:
        return False
    return secrets.compare_digest(submitted.encode("utf-8"), payload.otp.encode("utf-8"))
