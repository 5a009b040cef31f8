"""
Signed token codec - stateless, expiring, tamper-evident payloads.

This module externalizes transient state into a client-held capsule:
a payload is serialized into an HS256 JWT whose signature covers the
payload, its expiry and its purpose. The same primitive carries the
pending registration (purpose ``registration``) and the confirmed
identity (purpose ``auth``).

Failure classification on decode:
- MissingToken: nothing to decode
- MalformedToken: not a three-segment base64url token, wrong purpose,
  or a payload that does not fit the requested type
- TamperedToken: any integrity failure, including non-canonical
  base64url segments that would otherwise decode to the signed bytes
- ExpiredToken: signature valid, expiry elapsed

Signature comparison is constant-time (PyJWT uses hmac.compare_digest).
"""

import logging
import re
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

import jwt
from jwt.utils import base64url_decode, base64url_encode

from .exceptions import (
    ExpiredToken,
    MalformedToken,
    MissingToken,
    TamperedToken,
    TokenIssueFailed,
)

logger = logging.getLogger(__name__)

REGISTRATION_PURPOSE = "registration"
AUTH_PURPOSE = "auth"

_SEGMENT = re.compile(r"[A-Za-z0-9_-]+")


class TokenPayload(Protocol):
    def to_claims(self) -> dict[str, Any]: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SignedTokenCodec:
    """
    Encode and decode signed, expiring payloads keyed by one server secret.

    ``clock`` stamps the expiry at encode time; expiry is checked
    against wall-clock time on decode.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._clock = clock

    def encode(self, payload: TokenPayload, ttl_seconds: int, purpose: str) -> str:
        """
        Serialize and sign a payload.

        Args:
            payload: Object exposing to_claims()
            ttl_seconds: Lifetime of the token, must be positive
            purpose: Audience the token is bound to

        Returns:
            Transport-safe token string

        Raises:
            TokenIssueFailed: If the payload cannot be serialized or signed
        """
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")

        try:
            expires_at = self._clock() + timedelta(seconds=ttl_seconds)
            # Fractional seconds kept: the token lives exactly ttl_seconds
            claims = {
                "data": payload.to_claims(),
                "aud": purpose,
                "exp": expires_at.timestamp(),
            }
            return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)
        except (TypeError, ValueError, NotImplementedError, jwt.PyJWTError) as e:
            logger.error("Token encoding failed for purpose %s: %s", purpose, e)
            raise TokenIssueFailed() from e

    def decode(self, token: str | None, payload_type: Any, purpose: str) -> Any:
        """
        Verify a token and rebuild its payload.

        Args:
            token: Token string as received from the client
            payload_type: Class exposing from_claims(dict)
            purpose: Audience the token must have been issued for

        Returns:
            Instance of payload_type

        Raises:
            MissingToken, MalformedToken, TamperedToken, ExpiredToken
        """
        if not token or not isinstance(token, str):
            raise MissingToken()

        self._check_structure(token)

        try:
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                audience=purpose,
                options={"verify_exp": False, "require": ["exp", "aud"]},
            )
        except (jwt.InvalidAudienceError, jwt.MissingRequiredClaimError) as e:
            raise MalformedToken(str(e)) from e
        except jwt.InvalidTokenError as e:
            raise TamperedToken(str(e)) from e

        expires_at = claims["exp"]
        if isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise MalformedToken("exp claim is not a timestamp")
        if expires_at <= _utcnow().timestamp():
            raise ExpiredToken()

        data = claims.get("data")
        if not isinstance(data, dict):
            raise MalformedToken("missing claim: data")
        return payload_type.from_claims(data)

    def _check_structure(self, token: str) -> None:
        segments = token.split(".")
        if len(segments) != 3 or not all(_SEGMENT.fullmatch(s) for s in segments):
            raise MalformedToken("token is not three base64url segments")

        for segment in segments:
            try:
                canonical = base64url_encode(base64url_decode(segment))
            except ValueError as e:
                raise MalformedToken("undecodable segment") from e
            if canonical != segment.encode("ascii"):
                raise TamperedToken("non-canonical segment")
