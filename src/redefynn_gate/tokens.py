"""Password reset link parsing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs, urlparse

import jwt


@dataclass(frozen=True)
class ResetTokens:
    """Tokens carried by a password reset link."""

    access_token: str
    refresh_token: str


def parse_reset_link(url: str) -> ResetTokens | None:
    """Extract ``access_token`` and ``refresh_token`` from the query or fragment.

    The auth provider puts them in the fragment; some mail clients rewrite
    it into the query string. Returns None when either token is missing.
    """
    if not url or not isinstance(url, str):
        return None
    parsed = urlparse(url)
    params: dict[str, list[str]] = {}
    for part in (parsed.query, parsed.fragment):
        for key, values in parse_qs(part).items():
            params.setdefault(key, values)

    access = (params.get("access_token") or [""])[0]
    refresh = (params.get("refresh_token") or [""])[0]
    if not access or not refresh:
        return None
    return ResetTokens(access_token=access, refresh_token=refresh)


def read_unverified_claims(token: str) -> dict[str, Any] | None:
    """Decode a JWT without checking its signature; the auth provider does that.

    Returns None for an opaque (non-JWT) token. Raises
    ``jwt.ExpiredSignatureError`` when ``exp`` has passed.
    """
    try:
        claims: dict[str, Any] = jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": True},
            algorithms=["HS256", "RS256", "ES256"],
        )
    except jwt.ExpiredSignatureError:
        raise
    except jwt.PyJWTError:
        return None
    return claims
