"""Supabase REST クライアント実装"""

from __future__ import annotations

from typing import Any

import httpx

from ..config import BackendSection
from ..exceptions import AuthBackendError, BackendError, GateError
from ..models import (
    ApplicationRecord,
    ApplicationStats,
    AuthResponse,
    AuthSession,
    Profile,
    User,
)
from .client import AuthClient, PersistenceClient

_ERROR_KEYS = ("msg", "error_description", "message", "error")


def _error_message(resp: httpx.Response) -> str:
    """エラーレスポンスから本文メッセージを取り出す。"""
    try:
        data = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(data, dict):
        for key in _ERROR_KEYS:
            value = data.get(key)
            if isinstance(value, str) and value:
                return value
    return resp.text or f"HTTP {resp.status_code}"


def _transport_error(
    e: Exception, context: str, error_cls: type[BackendError] = BackendError
) -> BackendError:
    """httpx の例外を BackendError に変換する。

    httpx 以外の例外は常に素の BackendError とし、認証エラー扱いにしない。
    """
    if isinstance(e, httpx.TimeoutException):
        return error_cls(f"{context}: request timeout", cause=e)
    if isinstance(e, httpx.TransportError):
        return error_cls(f"{context}: network connection failed: {e}", cause=e)
    return BackendError(f"{context}: {e}", cause=e)


class _SupabaseBase:
    def __init__(self, config: BackendSection) -> None:
        self._config = config
        self._headers: dict[str, str] = {
            "Content-Type": "application/json",
            "apikey": config.anon_key,
            "Authorization": f"Bearer {config.anon_key}",
        }

    def _make_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._config.url,
            headers=self._headers,
            timeout=self._config.timeout_seconds,
        )

    @staticmethod
    def _bearer(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}


class SupabaseAuthClient(_SupabaseBase, AuthClient):
    """httpx を使った Supabase Auth (GoTrue) クライアント。

    サインイン後のセッションはインスタンス内に保持する。
    """

    def __init__(self, config: BackendSection) -> None:
        super().__init__(config)
        self._session: AuthSession | None = None

    def _handle_error(self, resp: httpx.Response) -> None:
        if resp.status_code >= 400:
            raise AuthBackendError(_error_message(resp), status=resp.status_code)

    async def _request(
        self,
        method: str,
        path: str,
        context: str,
        **kwargs: Any,
    ) -> httpx.Response:
        try:
            async with self._make_client() as client:
                resp = await client.request(method, path, **kwargs)
            self._handle_error(resp)
            return resp
        except GateError:
            raise
        except Exception as e:
            raise _transport_error(e, context, AuthBackendError) from e

    async def sign_up(
        self, email: str, password: str, redirect_to: str | None = None
    ) -> AuthResponse:
        """ユーザーを登録する。メール確認が必要な場合 session は None。"""
        params = {"redirect_to": redirect_to} if redirect_to else None
        resp = await self._request(
            "POST",
            "/auth/v1/signup",
            "sign_up",
            json={"email": email, "password": password},
            params=params,
        )
        data: dict[str, Any] = resp.json()
        if "access_token" in data:
            self._session = AuthSession.from_dict(data)
            return AuthResponse(user=self._session.user, session=self._session)
        user_data = data.get("user", data)
        return AuthResponse(user=User.from_dict(user_data) if user_data.get("id") else None)

    async def sign_in_with_password(self, email: str, password: str) -> AuthResponse:
        """メールアドレスとパスワードでサインインする。"""
        resp = await self._request(
            "POST",
            "/auth/v1/token",
            "sign_in",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        self._session = AuthSession.from_dict(resp.json())
        return AuthResponse(user=self._session.user, session=self._session)

    async def get_session(self) -> AuthSession | None:
        return self._session

    async def sign_out(self) -> None:
        """サインアウトする。セッションがない場合は何もしない。"""
        if self._session is None:
            return
        token = self._session.access_token
        self._session = None
        await self._request("POST", "/auth/v1/logout", "sign_out", headers=self._bearer(token))

    async def reset_password_for_email(self, email: str, redirect_to: str | None = None) -> None:
        """パスワードリセットメールを要求する。"""
        params = {"redirect_to": redirect_to} if redirect_to else None
        await self._request(
            "POST",
            "/auth/v1/recover",
            "reset_password_for_email",
            json={"email": email},
            params=params,
        )

    async def update_user(self, access_token: str, password: str) -> User:
        """リセットトークンでパスワードを更新する。"""
        resp = await self._request(
            "PUT",
            "/auth/v1/user",
            "update_user",
            json={"password": password},
            headers=self._bearer(access_token),
        )
        return User.from_dict(resp.json())


class SupabasePersistenceClient(_SupabaseBase, PersistenceClient):
    """httpx を使った PostgREST クライアント。

    auth が渡された場合、現在のセッションのアクセストークンで行レベル
    セキュリティを通す。
    """

    def __init__(self, config: BackendSection, auth: AuthClient | None = None) -> None:
        super().__init__(config)
        self._auth = auth

    async def _auth_headers(self) -> dict[str, str]:
        if self._auth is None:
            return {}
        session = await self._auth.get_session()
        return self._bearer(session.access_token) if session is not None else {}

    def _handle_error(self, resp: httpx.Response) -> None:
        if resp.status_code >= 400:
            raise BackendError(_error_message(resp), status=resp.status_code)

    async def _request(
        self,
        method: str,
        path: str,
        context: str,
        **kwargs: Any,
    ) -> Any:
        headers = {**kwargs.pop("headers", {}), **await self._auth_headers()}
        try:
            async with self._make_client() as client:
                resp = await client.request(method, path, headers=headers, **kwargs)
            self._handle_error(resp)
            return resp.json()
        except GateError:
            raise
        except Exception as e:
            raise _transport_error(e, context) from e

    async def insert_application(self, row: dict[str, Any]) -> ApplicationRecord:
        """applications に 1 行挿入し、作成された行を返す。"""
        data = await self._request(
            "POST",
            "/rest/v1/applications",
            "insert_application",
            json=[row],
            headers={"Prefer": "return=representation"},
        )
        if not data:
            raise BackendError("insert_application: empty response")
        return ApplicationRecord.from_dict(data[0])

    async def list_applications(self, user_id: str | None = None) -> list[ApplicationRecord]:
        params = {"select": "*", "order": "created_at.desc"}
        if user_id is not None:
            params["user_id"] = f"eq.{user_id}"
        data = await self._request("GET", "/rest/v1/applications", "list_applications", params=params)
        return [ApplicationRecord.from_dict(row) for row in data]

    async def get_profile(self, user_id: str) -> Profile | None:
        data = await self._request(
            "GET",
            "/rest/v1/profiles",
            "get_profile",
            params={"select": "*", "user_id": f"eq.{user_id}"},
        )
        return Profile.from_dict(data[0]) if data else None

    async def list_application_stats(self) -> list[ApplicationStats]:
        data = await self._request(
            "GET",
            "/rest/v1/application_stats",
            "list_application_stats",
            params={"select": "*", "order": "month_year.desc"},
        )
        return [ApplicationStats.from_dict(row) for row in data]
