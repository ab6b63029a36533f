from __future__ import annotations

import itertools
from typing import Any

import pytest

from pyyolink.ingestion.motion import derive_motion
from pyyolink.models.reading import MotionState

ACTIVE = MotionState.ACTIVE
INACTIVE = MotionState.INACTIVE


@pytest.mark.parametrize(
    ("motion_val", "state_str", "state_block", "expected"),
    [
        (True, None, None, ACTIVE),
        (False, "alert", None, INACTIVE),  # explicit signal wins over state
        (1, None, None, ACTIVE),
        (0, "alert", None, INACTIVE),
        (0.0, None, None, INACTIVE),
        (2.5, None, None, ACTIVE),
        ("Detected", None, None, ACTIVE),
        ("motion", None, None, ACTIVE),
        ("1", None, None, ACTIVE),
        ("CLEAR", "alert", None, INACTIVE),
        ("none", None, None, INACTIVE),
        ("0", None, None, INACTIVE),
        ("weird", "alert", None, ACTIVE),  # unknown text falls through
        ("weird", None, None, INACTIVE),
        (None, "ALERT", None, ACTIVE),
        (None, "normal", {"alarm": {"motion": True}}, ACTIVE),
        (None, None, {"alarm": {"motion": "true"}}, INACTIVE),  # only a real boolean counts
        (None, None, {"alarm": True}, INACTIVE),
        (None, None, {"alarm": {"motion": False}}, INACTIVE),
        (None, "normal", {}, INACTIVE),
        (None, None, None, INACTIVE),
    ],
)
def test_resolution_order(motion_val: Any, state_str: Any, state_block: Any, expected: MotionState) -> None:
    assert derive_motion(motion_val, state_str, state_block) is expected


def test_derivation_is_total() -> None:
    class _Opaque:
        def __str__(self) -> str:
            raise RuntimeError("no text form")

    motion_values: list[Any] = [None, True, False, 0, 3, float("nan"), "", "active", "x", [], {}, _Opaque()]
    state_values: list[Any] = [None, "", "alert", "normal", 5]
    blocks: list[Any] = [None, {}, {"alarm": None}, {"alarm": {"motion": True}}, "alert", ["alarm"]]

    for motion_val, state_str, block in itertools.product(motion_values, state_values, blocks):
        result = derive_motion(motion_val, state_str, block)
        assert result in (ACTIVE, INACTIVE)


@pytest.mark.parametrize(
    ("motion_val", "state_str", "expected"),
    [
        (" active ", "alert", ACTIVE),
        (" active ", None, INACTIVE),
        ("active", None, ACTIVE),
        (None, " alert ", INACTIVE),
    ],
)
def test_tokens_are_matched_without_trimming(motion_val: Any, state_str: Any, expected: MotionState) -> None:
    assert derive_motion(motion_val, state_str, None) is expected
