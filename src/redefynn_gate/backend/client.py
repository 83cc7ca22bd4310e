"""Backend collaborator abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ..models import (
    ApplicationRecord,
    ApplicationStats,
    AuthResponse,
    AuthSession,
    Profile,
    User,
)


class AuthClient(ABC):
    """Abstract client for the hosted auth provider.

    Failures are raised as ``AuthBackendError`` carrying the provider's text.
    """

    @abstractmethod
    async def sign_up(
        self, email: str, password: str, redirect_to: str | None = None
    ) -> AuthResponse: ...

    @abstractmethod
    async def sign_in_with_password(self, email: str, password: str) -> AuthResponse: ...

    @abstractmethod
    async def get_session(self) -> AuthSession | None: ...

    @abstractmethod
    async def sign_out(self) -> None: ...

    @abstractmethod
    async def reset_password_for_email(self, email: str, redirect_to: str | None = None) -> None: ...

    @abstractmethod
    async def update_user(self, access_token: str, password: str) -> User: ...


class PersistenceClient(ABC):
    """Abstract client for the hosted database.

    Failures are raised as ``BackendError`` carrying the database's text.
    """

    @abstractmethod
    async def insert_application(self, row: dict[str, Any]) -> ApplicationRecord: ...

    @abstractmethod
    async def list_applications(self, user_id: str | None = None) -> list[ApplicationRecord]:
        """Applications ordered by ``created_at`` descending; all of them when ``user_id`` is None."""
        ...

    @abstractmethod
    async def get_profile(self, user_id: str) -> Profile | None: ...

    @abstractmethod
    async def list_application_stats(self) -> list[ApplicationStats]: ...
