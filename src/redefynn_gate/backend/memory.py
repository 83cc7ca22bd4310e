"""In-memory backend collaborators for testing."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ..exceptions import AuthBackendError, BackendError
from ..models import (
    ApplicationRecord,
    ApplicationStats,
    AuthResponse,
    AuthSession,
    Profile,
    User,
)
from .client import AuthClient, PersistenceClient


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class _Account:
    user: User
    password: str


class InMemoryAuthClient(AuthClient):
    """In-memory auth provider.

    ``auto_confirm=False`` mimics a provider that requires email
    confirmation: sign-up returns a user without a session.
    """

    def __init__(self, auto_confirm: bool = True) -> None:
        self._auto_confirm = auto_confirm
        self._accounts: dict[str, _Account] = {}
        self._tokens: dict[str, str] = {}
        self._session: AuthSession | None = None
        self.calls: list[str] = []
        self.reset_requests: list[tuple[str, str | None]] = []

    def _issue_session(self, user: User) -> AuthSession:
        token = str(uuid.uuid4())
        self._tokens[token] = user.email
        return AuthSession(access_token=token, refresh_token=str(uuid.uuid4()), user=user)

    def issue_reset_token(self, email: str) -> str:
        """Issue a recovery token for ``email``. For testing."""
        account = self._accounts.get(email)
        if account is None:
            raise AuthBackendError("User not found", status=404)
        return self._issue_session(account.user).access_token

    def confirm_email(self, email: str) -> None:
        """Mark ``email`` as confirmed. For testing."""
        account = self._accounts[email]
        account.user.email_confirmed_at = _now_iso()

    async def sign_up(
        self, email: str, password: str, redirect_to: str | None = None
    ) -> AuthResponse:
        self.calls.append("sign_up")
        if email in self._accounts:
            raise AuthBackendError("User already registered", status=422)
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            email_confirmed_at=_now_iso() if self._auto_confirm else None,
        )
        self._accounts[email] = _Account(user=user, password=password)
        if not self._auto_confirm:
            return AuthResponse(user=user)
        self._session = self._issue_session(user)
        return AuthResponse(user=user, session=self._session)

    async def sign_in_with_password(self, email: str, password: str) -> AuthResponse:
        self.calls.append("sign_in_with_password")
        account = self._accounts.get(email)
        if account is None or account.password != password:
            raise AuthBackendError("Invalid login credentials", status=400)
        if account.user.email_confirmed_at is None:
            raise AuthBackendError("Email not confirmed", status=400)
        self._session = self._issue_session(account.user)
        return AuthResponse(user=account.user, session=self._session)

    async def get_session(self) -> AuthSession | None:
        return self._session

    async def sign_out(self) -> None:
        self.calls.append("sign_out")
        if self._session is not None:
            self._tokens.pop(self._session.access_token, None)
        self._session = None

    async def reset_password_for_email(self, email: str, redirect_to: str | None = None) -> None:
        self.calls.append("reset_password_for_email")
        self.reset_requests.append((email, redirect_to))

    async def update_user(self, access_token: str, password: str) -> User:
        self.calls.append("update_user")
        email = self._tokens.get(access_token)
        if email is None:
            raise AuthBackendError("Invalid token: token is expired or invalid", status=401)
        account = self._accounts[email]
        account.password = password
        return account.user


class InMemoryPersistenceClient(PersistenceClient):
    """In-memory database for testing."""

    def __init__(self) -> None:
        self._applications: list[tuple[int, ApplicationRecord]] = []
        self._profiles: dict[str, Profile] = {}
        self._stats: list[ApplicationStats] = []
        self._seq = 0
        self.calls: list[str] = []

    @property
    def applications(self) -> list[ApplicationRecord]:
        return [record for _, record in self._applications]

    def add_profile(self, profile: Profile) -> None:
        self._profiles[profile.user_id] = profile

    def add_stats(self, stats: ApplicationStats) -> None:
        self._stats.append(stats)

    async def insert_application(self, row: dict[str, Any]) -> ApplicationRecord:
        self.calls.append("insert_application")
        if not row.get("user_id"):
            raise BackendError(
                'null value in column "user_id" violates not-null constraint', status=400
            )
        now = _now_iso()
        record = ApplicationRecord.from_dict(
            {**row, "id": str(uuid.uuid4()), "created_at": now, "updated_at": now}
        )
        self._seq += 1
        self._applications.append((self._seq, record))
        return record

    async def list_applications(self, user_id: str | None = None) -> list[ApplicationRecord]:
        self.calls.append("list_applications")
        rows = [
            (seq, record)
            for seq, record in self._applications
            if user_id is None or record.user_id == user_id
        ]
        rows.sort(key=lambda item: (item[1].created_at, item[0]), reverse=True)
        return [record for _, record in rows]

    async def get_profile(self, user_id: str) -> Profile | None:
        self.calls.append("get_profile")
        return self._profiles.get(user_id)

    async def list_application_stats(self) -> list[ApplicationStats]:
        self.calls.append("list_application_stats")
        return sorted(self._stats, key=lambda s: s.month_year or "", reverse=True)
