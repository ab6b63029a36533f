"""Normalization helpers.

Centralizes defensive parsing of loosely-typed hub payloads: number and
string coercion, ordered fallback lookups across nesting levels, and
timestamp parsing/rendering.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, tzinfo
from typing import Any

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000

# ISO-8601 variants seen in ``reportAt`` / ``stateChangedAt``.
_ISO_PATTERNS: tuple[str, ...] = (
    "%Y-%m-%dT%H:%M:%S.%fZ",
    "%Y-%m-%dT%H:%M:%SZ",
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
)


def safe_float(value: Any) -> float | None:
    # bool is an int subclass; a flag is never a reading.
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "" or value == "--":
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def safe_int(value: Any) -> int | None:
    parsed = safe_float(value)
    if parsed is None:
        return None
    return int(parsed)


def safe_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def as_mapping(value: Any) -> Mapping[str, Any]:
    """Return *value* when it is a mapping, otherwise an empty one."""
    return value if isinstance(value, Mapping) else {}


def first_present(lookups: Iterable[tuple[Mapping[str, Any], str]]) -> Any:
    """Return the first non-``None`` value from ordered ``(mapping, key)`` pairs.

    Falsy values such as ``0`` or ``False`` count as present; only a
    missing key or an explicit ``None`` falls through to the next pair.
    """
    for source, key in lookups:
        value = source.get(key)
        if value is not None:
            return value
    return None


def _from_epoch(value: int | float) -> datetime:
    ts = float(value)
    if abs(ts) >= _MS_THRESHOLD:
        ts /= 1000.0
    return datetime.fromtimestamp(ts, tz=UTC)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an epoch number, numeric string or ISO-8601 string to an aware datetime.

    Epoch values at or above 10^12 are treated as milliseconds, smaller
    ones as seconds. ISO strings ending in ``Z`` are UTC. Returns ``None``
    when nothing matches.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
    try:
        if isinstance(value, (int, float)):
            return _from_epoch(value)
        if not isinstance(value, str):
            return None
        text = value.strip()
        if text.lstrip("-").isdigit():
            return _from_epoch(int(text))
    except (OverflowError, OSError, ValueError):
        return None

    for pattern in _ISO_PATTERNS:
        try:
            parsed = datetime.strptime(text, pattern)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed
    return None


def format_timestamp(value: Any, fmt: str, tz: tzinfo | None = None) -> str | None:
    """Render a raw timestamp in the display format.

    Unparseable input is passed through as ``str(value)``; ``None`` stays
    ``None``.
    """
    if value is None:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        return str(value)
    try:
        return parsed.astimezone(tz or UTC).strftime(fmt)
    except (OverflowError, OSError, ValueError):
        return str(value)
