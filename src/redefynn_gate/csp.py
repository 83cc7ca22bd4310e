"""Content Security Policy header generation."""

from __future__ import annotations

import base64
import secrets
from collections.abc import Mapping
from typing import Any

from .config import GateConfig

_BASE_DIRECTIVES: dict[str, list[str]] = {
    "default-src": ["'self'"],
    "script-src": ["'self'"],
    "style-src": ["'self'", "'unsafe-inline'", "https://fonts.googleapis.com"],
    "font-src": ["'self'", "https://fonts.gstatic.com"],
    "img-src": ["'self'", "data:", "https:"],
    "connect-src": ["'self'"],
    "object-src": ["'none'"],
    "base-uri": ["'self'"],
    "form-action": ["'self'"],
    "frame-ancestors": ["'none'"],
    "upgrade-insecure-requests": [],
}

# Directives that are valid without a source list.
_VALUELESS = {"upgrade-insecure-requests"}


def build_csp_directives(config: GateConfig) -> dict[str, list[str]]:
    directives = {name: list(sources) for name, sources in _BASE_DIRECTIVES.items()}
    if config.is_development():
        directives["script-src"] += ["'unsafe-inline'", "'unsafe-eval'"]
    backend = config.backend.url.rstrip("/")
    if backend:
        directives["script-src"].append(backend)
        directives["connect-src"].append(backend)
        if backend.startswith("https://"):
            directives["connect-src"].append("wss://" + backend.removeprefix("https://"))
    return directives


def build_csp_header(config: GateConfig) -> str:
    parts = []
    for name, sources in build_csp_directives(config).items():
        if sources:
            parts.append(f"{name} {' '.join(sources)}")
        elif name in _VALUELESS:
            parts.append(name)
    header = "; ".join(parts)
    if config.csp.report_uri:
        header += f"; report-uri {config.csp.report_uri}"
    return header


def csp_header_name(config: GateConfig) -> str:
    """Report-only while developing."""
    if config.is_development():
        return "Content-Security-Policy-Report-Only"
    return "Content-Security-Policy"


def generate_nonce(config: GateConfig) -> str:
    if config.is_development():
        return ""
    return base64.b64encode(secrets.token_bytes(16)).decode("ascii")


# browser report keys -> event detail keys
_REPORT_FIELDS = {
    "document-uri": "document_uri",
    "violated-directive": "violated_directive",
    "blocked-uri": "blocked_uri",
    "line-number": "line_number",
    "source-file": "source_file",
    "script-sample": "script_sample",
}


def parse_csp_report(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Extract the known fields of a ``report-uri`` POST body.

    Accepts the ``{"csp-report": {...}}`` envelope browsers send as well as
    a bare report. Unknown keys are dropped. Returns ``{}`` when nothing
    usable is present.
    """
    report = payload.get("csp-report", payload)
    if not isinstance(report, Mapping):
        return {}
    details: dict[str, Any] = {}
    for key, field in _REPORT_FIELDS.items():
        value = report.get(key, report.get(field))
        if value is not None:
            details[field] = value
    return details
