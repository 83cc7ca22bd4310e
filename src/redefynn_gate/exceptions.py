"""gate の例外型定義"""

from __future__ import annotations

from collections.abc import Sequence


class GateError(Exception):
    """gate のエラー基底クラス。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class GateErrorCodes:
    """GateError のエラーコード定数。"""

    VALIDATION_FAILED: str = "VALIDATION_FAILED"
    RATE_LIMITED: str = "RATE_LIMITED"
    AUTHENTICATION_REQUIRED: str = "AUTHENTICATION_REQUIRED"
    BACKEND_ERROR: str = "BACKEND_ERROR"


class ValidationFailed(GateError):
    """One or more field checks failed."""

    def __init__(self, errors: Sequence[str]) -> None:
        self.errors: tuple[str, ...] = tuple(errors)
        super().__init__(GateErrorCodes.VALIDATION_FAILED, ", ".join(self.errors))


class RateLimited(GateError):
    """Too many attempts for one key inside its window."""

    def __init__(self, retry_after_minutes: int, message: str | None = None) -> None:
        self.retry_after_minutes = retry_after_minutes
        super().__init__(
            GateErrorCodes.RATE_LIMITED,
            message
            or f"Too many attempts. Please wait {retry_after_minutes} minutes before trying again.",
        )


class AuthenticationRequired(GateError):
    """The caller has no authenticated identity."""

    def __init__(self, message: str = "Please sign in to continue.") -> None:
        super().__init__(GateErrorCodes.AUTHENTICATION_REQUIRED, message)


class BackendError(GateError):
    """A persistence or auth collaborator returned a failure.

    Collaborators raise it with the raw backend text; the gate re-raises a
    copy whose message has been through ``get_secure_error_message``.
    """

    name = "BackendError"

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        status: int | None = None,
    ) -> None:
        super().__init__(GateErrorCodes.BACKEND_ERROR, message, cause=cause)
        self.status = status


class AuthBackendError(BackendError):
    """Failure reported by the hosted auth provider."""

    name = "AuthError"


class ConfigError(Exception):
    """設定読み込みエラー。"""

    def __init__(
        self,
        code: str,
        message: str,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return f"{self.code}: {super().__str__()}"


class ConfigErrorCodes:
    """ConfigError のエラーコード定数。"""

    READ_FILE: str = "READ_FILE_ERROR"
    PARSE_YAML: str = "PARSE_YAML_ERROR"
    VALIDATION: str = "VALIDATION_ERROR"
