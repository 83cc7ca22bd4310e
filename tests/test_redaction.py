"""get_secure_error_message unit tests."""

from types import SimpleNamespace

import pytest

from redefynn_gate import AuthBackendError, BackendError, get_secure_error_message
from redefynn_gate.config import ErrorMessagesSection


@pytest.mark.parametrize("error", [None, "duplicate key", b"boom", 42, 1.5, True])
def test_non_object_input_returns_unexpected(error: object) -> None:
    assert get_secure_error_message(error) == "An unexpected error occurred"


@pytest.mark.parametrize("error", [{}, {"code": "23505"}, object(), SimpleNamespace(detail="x")])
def test_object_without_message_returns_fallback(error: object) -> None:
    assert get_secure_error_message(error) == "An error occurred. Please try again"


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        (
            'duplicate key value violates unique constraint "applications_pkey"',
            "This record already exists",
        ),
        ("unique constraint failed", "This record already exists"),
        ("permission denied for table applications", "You do not have permission to perform this action"),
        ("unauthorized", "You do not have permission to perform this action"),
        ("connection refused", "Network connection error. Please try again"),
        ("network unreachable", "Network connection error. Please try again"),
        ("statement timeout", "Request timed out. Please try again"),
        ('relation "public.secret_table" does not exist', "An error occurred. Please try again"),
    ],
)
def test_backend_messages_are_redacted(message: str, expected: str) -> None:
    assert get_secure_error_message(BackendError(message)) == expected
    assert get_secure_error_message({"message": message}) == expected


def test_priority_order() -> None:
    # duplicate beats network, network beats timeout
    assert get_secure_error_message({"message": "duplicate key on network"}) == "This record already exists"
    assert (
        get_secure_error_message({"message": "connection timeout"})
        == "Network connection error. Please try again"
    )


def test_auth_errors_pass_through() -> None:
    assert get_secure_error_message(AuthBackendError("User already registered")) == "User already registered"
    assert get_secure_error_message({"name": "AuthError", "message": "Email not confirmed"}) == (
        "Email not confirmed"
    )
    assert get_secure_error_message(SimpleNamespace(name="AuthError", message="Signups disabled")) == (
        "Signups disabled"
    )


def test_invalid_credentials_pass_through_untagged() -> None:
    assert get_secure_error_message(ValueError("Invalid login credentials")) == "Invalid login credentials"


def test_auth_error_infrastructure_text_is_still_redacted() -> None:
    assert (
        get_secure_error_message(AuthBackendError("sign_in: network connection failed: boom"))
        == "Network connection error. Please try again"
    )


def test_plain_exception_uses_str() -> None:
    assert get_secure_error_message(RuntimeError("read timeout")) == "Request timed out. Please try again"
    assert get_secure_error_message(RuntimeError("kaboom")) == "An error occurred. Please try again"


def test_never_raises_on_hostile_object() -> None:
    class Hostile:
        @property
        def message(self) -> str:
            raise RuntimeError("no")

    assert get_secure_error_message(Hostile()) == "An error occurred. Please try again"


def test_non_string_message_is_ignored() -> None:
    assert get_secure_error_message({"message": 500}) == "An error occurred. Please try again"


def test_custom_messages() -> None:
    messages = ErrorMessagesSection(fallback="Something broke")
    assert get_secure_error_message({"message": "x"}, messages) == "Something broke"
