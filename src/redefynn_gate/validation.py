"""Field validation rules."""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from .config import DEFAULT_INPUT_LIMITS, InputLimits
from .models import ApplicationInput, ValidationResult

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_LETTER_RE = re.compile(r"[a-zA-Z]")
_DIGIT_RE = re.compile(r"[0-9]")


def validate_email(email: Any, limits: InputLimits = DEFAULT_INPUT_LIMITS) -> ValidationResult:
    """Validate email presence, length and format."""
    if not email or not isinstance(email, str):
        return ValidationResult.failed("Email is required")

    trimmed = email.strip()
    if len(trimmed) > limits.email_max_length:
        return ValidationResult.failed("Email address too long")
    if not _EMAIL_RE.match(trimmed):
        return ValidationResult.failed("Invalid email format")
    return ValidationResult.ok()


def validate_password(password: Any, limits: InputLimits = DEFAULT_INPUT_LIMITS) -> ValidationResult:
    """Validate password length and that it mixes letters and digits."""
    if not password or not isinstance(password, str):
        return ValidationResult.failed("Password is required")
    if len(password) < limits.password_min_length:
        return ValidationResult.failed(
            f"Password must be at least {limits.password_min_length} characters long"
        )
    if len(password) > limits.password_max_length:
        return ValidationResult.failed("Password too long")
    if not (_LETTER_RE.search(password) and _DIGIT_RE.search(password)):
        return ValidationResult.failed("Password must contain at least one letter and one number")
    return ValidationResult.ok()


def validate_password_confirmation(
    password: Any,
    confirm_password: Any,
    limits: InputLimits = DEFAULT_INPUT_LIMITS,
) -> ValidationResult:
    """Validate a new password typed twice."""
    if password != confirm_password:
        return ValidationResult.failed("Passwords don't match")
    return validate_password(password, limits)


def _check_text(
    errors: list[str],
    value: Any,
    min_length: int | None,
    max_length: int,
    required: str,
    too_short: str,
    too_long: str,
) -> None:
    if not value or not isinstance(value, str):
        errors.append(required)
        return
    length = len(value.strip())
    if min_length is not None and length < min_length:
        errors.append(too_short)
    elif length > max_length:
        errors.append(too_long)


def validate_application_data(
    data: ApplicationInput | Mapping[str, Any],
    limits: InputLimits = DEFAULT_INPUT_LIMITS,
) -> ValidationResult:
    """Validate every application field and collect all failures in field order."""
    fields = data.to_dict() if isinstance(data, ApplicationInput) else data
    errors: list[str] = []

    _check_text(
        errors,
        fields.get("name"),
        limits.name_min_length,
        limits.name_max_length,
        "Name is required",
        f"Name must be at least {limits.name_min_length} characters",
        "Name too long",
    )

    age = fields.get("age")
    if not isinstance(age, int) or isinstance(age, bool):
        errors.append("Age is required")
    elif age < limits.age_min or age > limits.age_max:
        errors.append(f"Age must be between {limits.age_min} and {limits.age_max}")

    _check_text(
        errors,
        fields.get("address"),
        limits.address_min_length,
        limits.address_max_length,
        "Address is required",
        "Please provide a complete address",
        "Address too long",
    )
    _check_text(
        errors,
        fields.get("annual_income"),
        None,
        limits.annual_income_max_length,
        "Annual income is required",
        "",
        "Annual income format too long",
    )
    _check_text(
        errors,
        fields.get("job_description"),
        limits.job_description_min_length,
        limits.job_description_max_length,
        "Job description is required",
        "Please provide a more detailed job description",
        "Job description too long",
    )

    return ValidationResult(is_valid=not errors, errors=tuple(errors))
