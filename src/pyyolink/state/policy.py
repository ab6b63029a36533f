"""Deterministic memoization policy.

This module contains *no* payload parsing. The ingestion layer is
responsible for producing typed values; the policy only decides whether
a candidate value must be written and re-notified.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pyyolink.state.events import ALWAYS_LIVE, Attribute


def is_always_live(attribute: Attribute) -> bool:
    return attribute in ALWAYS_LIVE


def should_emit(
    *,
    attribute: Attribute,
    current: Any,
    incoming: Any,
    force: bool = False,
) -> bool:
    """Decide whether *incoming* must be persisted and notified.

    Policy:
    - always-live attributes and forced updates always emit;
    - otherwise emit only when the value differs from the stored one.
    """
    if force or is_always_live(attribute):
        return True
    return current != incoming


def stringify(value: Any) -> str | None:
    """Render an attribute value the way hosts display it."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)
