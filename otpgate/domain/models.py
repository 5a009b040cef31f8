"""
Registration data model.

Immutable value objects that flow through the two-phase registration:
the pending payload staged inside the signed token, the confirmed
identity issued after OTP verification, and the row handed to storage.

``to_claims``/``from_claims`` convert to and from the plain JSON
mapping carried in a token. ``from_claims`` raises ``MalformedToken``
when the mapping does not have the expected shape, so a token signed
for another payload type can never be half-decoded.
"""

from dataclasses import asdict, dataclass, fields
from typing import Any

from .exceptions import MalformedToken, MissingFields

REQUIRED_FIELDS = ("name", "email", "mobile", "password", "city", "age")


@dataclass(frozen=True)
class RegistrationDetails:
    """Raw registration form fields, validated for presence only."""

    name: str | None = None
    email: str | None = None
    mobile: str | None = None
    password: str | None = None
    city: str | None = None
    age: str | None = None
    role: str | None = None

    def missing_fields(self) -> list[str]:
        missing = []
        for name in REQUIRED_FIELDS:
            value = getattr(self, name)
            if value is None or not str(value).strip():
                missing.append(name)
        return missing

    def require_complete(self) -> None:
        """Raise MissingFields if any required field is absent or blank."""
        missing = self.missing_fields()
        if missing:
            raise MissingFields(missing)


@dataclass(frozen=True)
class FileReference:
    """Where the upload collaborator stored the profile image."""

    filename: str
    original_filename: str
    path: str


def _string_fields(cls: type, claims: dict[str, Any], skip: tuple[str, ...] = ()) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for field in fields(cls):
        if field.name in skip:
            continue
        if field.name not in claims:
            raise MalformedToken(f"missing claim: {field.name}")
        value = claims[field.name]
        if field.name == "role":
            if value is not None and not isinstance(value, str):
                raise MalformedToken("claim role must be a string")
        elif not isinstance(value, str):
            raise MalformedToken(f"claim {field.name} must be a string")
        values[field.name] = value
    return values


def _file_from_claims(claims: dict[str, Any]) -> FileReference:
    raw = claims.get("file")
    if not isinstance(raw, dict):
        raise MalformedToken("missing claim: file")
    return FileReference(**_string_fields(FileReference, raw))


@dataclass(frozen=True)
class ConfirmedIdentity:
    """
    Identity claim issued once the OTP has been verified.

    Carried as the payload of the long-lived auth token and written
    to durable storage.
    """

    name: str
    email: str
    mobile: str
    city: str
    age: str
    role: str | None
    password_hash: str
    file: FileReference

    def to_claims(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "ConfirmedIdentity":
        values = _string_fields(cls, claims, skip=("file",))
        return cls(file=_file_from_claims(claims), **values)


@dataclass(frozen=True)
class PendingRegistration:
    """
    Registration staged inside the signed token until OTP confirmation.

    Never mutated once encoded; the token is the only record of it.
    """

    name: str
    email: str
    mobile: str
    city: str
    age: str
    role: str | None
    password_hash: str
    file: FileReference
    otp: str

    def to_claims(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "PendingRegistration":
        values = _string_fields(cls, claims, skip=("file",))
        return cls(file=_file_from_claims(claims), **values)

    def confirm(self) -> ConfirmedIdentity:
        """Derive the confirmed identity, dropping the OTP challenge."""
        return ConfirmedIdentity(
            name=self.name,
            email=self.email,
            mobile=self.mobile,
            city=self.city,
            age=self.age,
            role=self.role,
            password_hash=self.password_hash,
            file=self.file,
        )


@dataclass(frozen=True)
class DurableUserRecord:
    """One row of confirmed-registration storage."""

    name: str
    email: str
    mobile: str
    password_hash: str
    city: str
    age: str
    file_name: str
    original_file_name: str
    file_path: str
    role: str | None
    auth_token: str

    @classmethod
    def from_identity(cls, identity: ConfirmedIdentity, auth_token: str) -> "DurableUserRecord":
        return cls(
            name=identity.name,
            email=identity.email,
            mobile=identity.mobile,
            password_hash=identity.password_hash,
            city=identity.city,
            age=identity.age,
            file_name=identity.file.filename,
            original_file_name=identity.file.original_filename,
            file_path=identity.file.path,
            role=identity.role,
            auth_token=auth_token,
        )
