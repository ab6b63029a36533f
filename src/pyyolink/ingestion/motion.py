"""Motion state derivation.

Payloads signal motion in several ways: an explicit ``motion`` field
(bool, number or text), a device ``state`` of ``"alert"``, or a nested
``alarm.motion`` flag. The first usable signal wins; no signal at all
means inactive.
"""

from __future__ import annotations

from collections.abc import Mapping
from numbers import Number
from typing import Any

from pyyolink.models.reading import MotionState

_ACTIVE_TOKENS = frozenset({"true", "active", "motion", "detected", "1"})
_INACTIVE_TOKENS = frozenset({"false", "inactive", "clear", "0", "none"})


def _from_motion_value(motion_val: Any) -> MotionState | None:
    if motion_val is None:
        return None
    if isinstance(motion_val, bool):
        return MotionState.ACTIVE if motion_val else MotionState.INACTIVE
    if isinstance(motion_val, Number):
        try:
            return MotionState.ACTIVE if int(motion_val) != 0 else MotionState.INACTIVE  # type: ignore[call-overload]
        except (TypeError, ValueError, OverflowError):
            return None
    try:
        text = str(motion_val).lower()
    except Exception:
        return None
    if text in _ACTIVE_TOKENS:
        return MotionState.ACTIVE
    if text in _INACTIVE_TOKENS:
        return MotionState.INACTIVE
    return None


def derive_motion(
    motion_val: Any = None,
    state_str: str | None = None,
    state_block: Mapping[str, Any] | None = None,
) -> MotionState:
    """Resolve the canonical motion state. Never raises, never returns ``None``."""
    explicit = _from_motion_value(motion_val)
    if explicit is not None:
        return explicit

    if isinstance(state_str, str) and state_str.lower() == "alert":
        return MotionState.ACTIVE

    alarm = state_block.get("alarm") if isinstance(state_block, Mapping) else None
    if isinstance(alarm, Mapping) and alarm.get("motion") is True:
        return MotionState.ACTIVE

    return MotionState.INACTIVE
