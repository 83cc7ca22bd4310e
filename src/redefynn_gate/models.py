"""Gate data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

from .exceptions import GateError

T = TypeVar("T")

APPLICATION_STATUS_SUBMITTED = "submitted"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation call."""

    is_valid: bool
    errors: tuple[str, ...] = ()

    @classmethod
    def ok(cls) -> ValidationResult:
        return cls(is_valid=True)

    @classmethod
    def failed(cls, *errors: str) -> ValidationResult:
        return cls(is_valid=False, errors=tuple(errors))

    @property
    def error(self) -> str | None:
        """First error message, if any."""
        return self.errors[0] if self.errors else None


@dataclass
class RateLimitEntry:
    """Attempt counter for one key."""

    count: int
    reset_time: float


@dataclass(frozen=True)
class RateLimitPolicy:
    """Attempt budget per window."""

    max_attempts: int
    window_secs: float


@dataclass(frozen=True)
class ApplicationInput:
    """Application form fields as submitted by the caller."""

    name: str
    age: int
    address: str
    annual_income: str
    job_description: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ApplicationInput:
        return cls(
            name=data.get("name", ""),
            age=data.get("age", 0),
            address=data.get("address", ""),
            annual_income=data.get("annual_income", ""),
            job_description=data.get("job_description", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "age": self.age,
            "address": self.address,
            "annual_income": self.annual_income,
            "job_description": self.job_description,
        }


@dataclass
class ApplicationRecord:
    """Persisted application row."""

    id: str
    user_id: str
    name: str
    age: int
    address: str
    annual_income: str
    job_description: str
    status: str = APPLICATION_STATUS_SUBMITTED
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApplicationRecord:
        return cls(
            id=data["id"],
            user_id=data.get("user_id", ""),
            name=data.get("name", ""),
            age=data.get("age", 0),
            address=data.get("address", ""),
            annual_income=data.get("annual_income", ""),
            job_description=data.get("job_description", ""),
            status=data.get("status", APPLICATION_STATUS_SUBMITTED),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class Profile:
    """User profile row."""

    id: str
    user_id: str
    email: str | None = None
    is_admin: bool = False
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Profile:
        return cls(
            id=data["id"],
            user_id=data.get("user_id", ""),
            email=data.get("email"),
            is_admin=bool(data.get("is_admin", False)),
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )


@dataclass
class ApplicationStats:
    """Aggregated application counts per location and month."""

    application_count: int
    state: str | None = None
    city: str | None = None
    month_year: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApplicationStats:
        return cls(
            application_count=int(data.get("application_count", 0)),
            state=data.get("state"),
            city=data.get("city"),
            month_year=data.get("month_year"),
        )


@dataclass
class User:
    """Authenticated user as reported by the auth provider."""

    id: str
    email: str
    email_confirmed_at: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> User:
        return cls(
            id=data["id"],
            email=data.get("email", ""),
            email_confirmed_at=data.get("email_confirmed_at"),
        )


@dataclass
class AuthSession:
    """Auth provider session."""

    access_token: str
    user: User
    refresh_token: str = ""
    expires_in: int = 3600
    token_type: str = "bearer"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuthSession:
        return cls(
            access_token=data["access_token"],
            user=User.from_dict(data["user"]),
            refresh_token=data.get("refresh_token", ""),
            expires_in=int(data.get("expires_in", 3600)),
            token_type=data.get("token_type", "bearer"),
        )


@dataclass
class AuthResponse:
    """Result of sign-up or sign-in. ``session`` is None until the email is confirmed."""

    user: User | None
    session: AuthSession | None = None


@dataclass(frozen=True)
class SecurityEvent:
    """Audit record for a security-sensitive operation."""

    event_name: str
    timestamp: str
    details: dict[str, Any] = field(default_factory=dict)


class NotificationVariant(StrEnum):
    """Notification styles."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Notification:
    """User-facing message."""

    title: str
    description: str
    variant: NotificationVariant = NotificationVariant.DEFAULT


@dataclass
class GateResult(Generic[T]):
    """Data/error pair returned by every gate operation."""

    data: T | None = None
    error: GateError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T | None:
        """Return the data or raise the error."""
        if self.error is not None:
            raise self.error
        return self.data
