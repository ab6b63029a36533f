"""Helpers for safe debug logging.

Requests to the Local Hub carry device net tokens, bearer access tokens
and client secrets. This module redacts those fields before payloads are
written to DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "token",
        "access_token",
        "refresh_token",
        "client_secret",
        "password",
        "authorization",
    }
)
_REDACTED = "<redacted>"


def _redact_text(value: str, max_string: int) -> str:
    if value.lower().startswith("bearer "):
        return f"Bearer {_REDACTED}"
    if len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"
    return value


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs.

    Mapping keys are matched case-insensitively against the sensitive
    set; bearer credentials are masked wherever they appear as strings.
    """
    if _depth > 20:
        return "<max-depth>"
    if value is None or isinstance(value, (int, float, bool)):
        return value
    if isinstance(value, str):
        return _redact_text(value, max_string)
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {
            str(k): (
                _REDACTED
                if str(k).lower() in _SENSITIVE_VALUE_KEYS
                else redact_for_log(v, max_string=max_string, _depth=_depth + 1)
            )
            for k, v in value.items()
        }

    if isinstance(value, Sequence):
        return [redact_for_log(v, max_string=max_string, _depth=_depth + 1) for v in value]

    return repr(value)
