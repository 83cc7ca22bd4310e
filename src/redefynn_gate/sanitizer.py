"""Free-text sanitization."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Any

from .models import ApplicationInput

_ANGLE_BRACKETS_RE = re.compile(r"[<>]")
_JS_PROTOCOL_RE = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r"on\w+=", re.IGNORECASE | re.ASCII)


def sanitize_input(value: Any) -> str:
    """Strip angle brackets, ``javascript:`` and inline ``on*=`` handlers.

    Denylist only; encoding on output remains the real defense. The protocol
    and handler passes repeat until the text is stable, so removing one match
    cannot leave a new one behind.
    """
    if not value or not isinstance(value, str):
        return ""

    text = _ANGLE_BRACKETS_RE.sub("", value.strip())
    while True:
        stripped = _EVENT_HANDLER_RE.sub("", _JS_PROTOCOL_RE.sub("", text))
        if stripped == text:
            return text
        text = stripped


def sanitize_application(data: ApplicationInput) -> ApplicationInput:
    """Return a copy with every free-text field sanitized. Age passes through."""
    return replace(
        data,
        name=sanitize_input(data.name),
        address=sanitize_input(data.address),
        annual_income=sanitize_input(data.annual_income),
        job_description=sanitize_input(data.job_description),
    )
