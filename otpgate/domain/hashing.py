"""Credential hashing with bcrypt."""

import logging

import bcrypt

from .exceptions import HashingFailed

logger = logging.getLogger(__name__)

# bcrypt only consumes the first 72 bytes of input
_BCRYPT_MAX_BYTES = 72


def _pwd_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class BcryptPasswordHasher:
    """Slow, salted one-way password hashing with a fixed cost factor."""

    def __init__(self, rounds: int = 10) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be between 4 and 31, got {rounds}")
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        """
        Hash a plaintext password.

        Raises:
            HashingFailed: If the bcrypt library faults
        """
        try:
            return bcrypt.hashpw(_pwd_bytes(plaintext), bcrypt.gensalt(rounds=self.rounds)).decode()
        except (ValueError, TypeError) as e:
            logger.error("Password hashing failed: %s", e)
            raise HashingFailed() from e

    def verify(self, plaintext: str, hashed: str) -> bool:
        """Check a plaintext password against a stored hash."""
        try:
            return bcrypt.checkpw(_pwd_bytes(plaintext), hashed.encode())
        except ValueError:
            return False
