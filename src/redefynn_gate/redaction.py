"""Map backend errors to user-safe messages."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import DEFAULT_ERROR_MESSAGES, ErrorMessagesSection
from .exceptions import AuthBackendError

_AUTH_ERROR_NAME = "AuthError"
_INVALID_CREDENTIALS = "Invalid login credentials"

# str/bytes/numbers are not error objects
_SCALAR_TYPES = (str, bytes, int, float, complex)


def _message_of(error: Any) -> str:
    if isinstance(error, Mapping):
        message = error.get("message")
    else:
        message = getattr(error, "message", None)
        if message is None and isinstance(error, BaseException):
            message = str(error)
    return message if isinstance(message, str) else ""


def _is_auth_error(error: Any) -> bool:
    if isinstance(error, AuthBackendError):
        return True
    if isinstance(error, Mapping):
        return error.get("name") == _AUTH_ERROR_NAME
    return getattr(error, "name", None) == _AUTH_ERROR_NAME


def get_secure_error_message(
    error: Any,
    messages: ErrorMessagesSection = DEFAULT_ERROR_MESSAGES,
) -> str:
    """Return a message that is safe to show to the end user.

    Database and infrastructure errors collapse to a small fixed vocabulary.
    Auth provider messages pass through unchanged. Never raises.
    """
    if error is None or isinstance(error, _SCALAR_TYPES):
        return messages.unexpected

    try:
        message = _message_of(error)
        if "duplicate key" in message or "unique constraint" in message:
            return messages.duplicate
        if "permission denied" in message or "unauthorized" in message:
            return messages.permission
        if "connection" in message or "network" in message:
            return messages.network
        if "timeout" in message:
            return messages.timeout
        if message and (_is_auth_error(error) or _INVALID_CREDENTIALS in message):
            return message
    except Exception:
        return messages.fallback
    return messages.fallback
