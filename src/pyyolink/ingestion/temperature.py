"""Temperature normalization.

The Local API reports °C, but some MotionSensor firmware sends °F minus
136 instead. A strongly negative value that becomes a plausible room
temperature once 136 is added is decoded as Fahrenheit first; everything
else is taken as °C. Example: raw ``-57`` -> 79 °F -> 26.1 °C.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pyyolink._constants import (
    FAHRENHEIT_OFFSET,
    OFFSET_TRIGGER_BELOW_C,
    PLAUSIBLE_FAHRENHEIT_MAX,
    PLAUSIBLE_FAHRENHEIT_MIN,
    fahrenheit_to_celsius,
)
from pyyolink.ingestion.normalize import safe_float

_logger = logging.getLogger(__name__)


def is_fahrenheit_offset_encoded(value: float) -> bool:
    """Return ``True`` when *value* looks like ``°F - 136`` rather than °C."""
    if value >= OFFSET_TRIGGER_BELOW_C:
        return False
    candidate = value + FAHRENHEIT_OFFSET
    return PLAUSIBLE_FAHRENHEIT_MIN <= candidate <= PLAUSIBLE_FAHRENHEIT_MAX


def to_celsius(value: float) -> float:
    """Undo the Fahrenheit-offset encoding when present."""
    if is_fahrenheit_offset_encoded(value):
        return fahrenheit_to_celsius(value + FAHRENHEIT_OFFSET)
    return value


def normalize_temperature(
    raw: Any,
    convert: Callable[[float], float] | None = None,
) -> float | None:
    """Coerce, correct and convert a raw temperature reading.

    Returns ``None`` when *raw* is not a number. When *convert* raises,
    the corrected °C value is returned instead.
    """
    value = safe_float(raw)
    if value is None:
        return None

    celsius = to_celsius(value)
    if celsius != value:
        _logger.debug("Temp normalized (F-136): raw=%s => f=%s => c=%s", raw, value + FAHRENHEIT_OFFSET, celsius)

    if convert is None:
        return celsius
    try:
        return float(convert(celsius))
    except Exception as exc:
        _logger.warning("Temperature conversion failed (%s); using raw °C", exc)
        return celsius
