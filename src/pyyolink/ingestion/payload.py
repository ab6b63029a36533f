"""Poll and push payload normalization.

Both transports carry the same device facts in different places:

* poll (``<type>.getState``) nests readings one level deeper, under
  ``data.state``;
* push (MQTT ``Report``/``Alert``/``StatusChange``) puts most readings
  directly in ``data`` and may send ``data.state`` either as a plain
  string (``"normal"``/``"alert"``) or as a nested object.

Each logical field is read through an explicit, ordered lookup chain.
The result is a :class:`pyyolink.models.reading.Reading`, or ``None``
when the payload belongs to another device.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Mapping
from datetime import UTC, tzinfo
from typing import Any

from pyyolink._constants import DEFAULT_DATETIME_FORMAT
from pyyolink.ingestion.motion import derive_motion
from pyyolink.ingestion.normalize import as_mapping, first_present, format_timestamp, safe_int, safe_str
from pyyolink.ingestion.temperature import normalize_temperature
from pyyolink.models.envelopes import PollResponse, PushEnvelope
from pyyolink.models.reading import MotionState, RadioLink, Reading
from pyyolink.state.events import IngestionSource

_logger = logging.getLogger(__name__)

_TEMPERATURE_KEYS: tuple[str, ...] = ("temperature", "temp", "devTemperature")


@dataclasses.dataclass(frozen=True)
class NormalizeContext:
    """Collaborators and display settings used while normalizing."""

    convert_temperature: Callable[[float], float] | None = None
    battery_percent: Callable[[Any], int | None] | None = None
    datetime_format: str = DEFAULT_DATETIME_FORMAT
    time_zone: tzinfo = UTC


def _text(value: Any) -> str | None:
    if value is None or isinstance(value, Mapping):
        return None
    return safe_str(value)


def _upper(value: Any) -> str | None:
    text = _text(value)
    return text.upper() if text else None


def _scalar(value: Any) -> float | int | str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        return value
    return None


def _battery_percent(raw: Any, context: NormalizeContext) -> int | None:
    if raw is None or context.battery_percent is None:
        return None
    try:
        percent = safe_int(context.battery_percent(raw))
    except Exception as exc:
        _logger.warning("Battery level mapping failed for %r (%s)", raw, exc)
        return None
    if percent is None or not 0 <= percent <= 100:
        return None
    return percent


def _radio_link(data: Mapping[str, Any]) -> RadioLink | None:
    lora = data.get("loraInfo")
    if not isinstance(lora, Mapping):
        return None
    return RadioLink.model_validate(dict(lora))


def _build_reading(
    *,
    source: IngestionSource,
    device_id: str | None,
    data: Mapping[str, Any],
    temperature_raw: Any,
    battery_raw: Any,
    device_state: str | None,
    firmware: str | None,
    motion: MotionState,
    context: NormalizeContext,
) -> Reading:
    temperature_value = None
    if temperature_raw is not None:
        temperature_value = normalize_temperature(temperature_raw, context.convert_temperature)

    return Reading(
        source=source,
        device_id=device_id,
        temperature_raw=_scalar(temperature_raw),
        temperature_value=temperature_value,
        battery_raw=battery_raw,
        battery_percent=_battery_percent(battery_raw, context),
        firmware_version=firmware,
        device_state=device_state,
        motion_state=motion,
        reported_at=format_timestamp(data.get("reportAt"), context.datetime_format, context.time_zone),
        changed_at=format_timestamp(data.get("stateChangedAt"), context.datetime_format, context.time_zone),
        radio_link=_radio_link(data),
    )


def normalize_poll_payload(
    response: Mapping[str, Any],
    *,
    device_id: str,
    context: NormalizeContext,
) -> Reading | None:
    """Normalize a successful ``getState`` response.

    The hub answers the device we asked for, so a response without any
    device identifier is accepted; one naming a different device is not.
    """
    envelope = PollResponse.model_validate(dict(response))
    data = as_mapping(envelope.data)
    block = as_mapping(data.get("state"))

    seen_id = envelope.target_device or _text(envelope.raw.get("deviceId")) or _text(data.get("deviceId"))
    if seen_id is not None and seen_id != device_id:
        _logger.debug("Ignoring poll response for device %s (expected %s)", seen_id, device_id)
        return None

    temperature_raw = first_present(
        [(block, key) for key in _TEMPERATURE_KEYS] + [(data, key) for key in _TEMPERATURE_KEYS]
    )
    device_state = _text(block.get("state"))

    return _build_reading(
        source=IngestionSource.POLL,
        device_id=seen_id or device_id,
        data=data,
        temperature_raw=temperature_raw,
        battery_raw=block.get("battery"),
        device_state=device_state,
        firmware=_upper(block.get("version")),
        motion=derive_motion(block.get("motion"), device_state, block),
        context=context,
    )


def push_device_id(payload: Mapping[str, Any]) -> str | None:
    """Device a push report belongs to, or ``None`` when it names none."""
    return _text(payload.get("deviceId"))


def normalize_push_payload(
    payload: Mapping[str, Any],
    *,
    device_id: str,
    context: NormalizeContext,
) -> Reading | None:
    """Normalize an MQTT report. Reports without a matching ``deviceId`` are dropped."""
    seen_id = push_device_id(payload)
    if seen_id is None or seen_id != device_id:
        _logger.debug("Ignoring push report for device %s (expected %s)", seen_id, device_id)
        return None

    envelope = PushEnvelope.model_validate(dict(payload))

    data = as_mapping(envelope.data)
    raw_state = data.get("state")
    block = as_mapping(raw_state)
    device_state = raw_state if isinstance(raw_state, str) else _text(block.get("state"))

    temperature_raw = first_present(
        (
            (data, "temperature"),
            (data, "temp"),
            (block, "temperature"),
            (block, "temp"),
            (data, "devTemperature"),
            (block, "devTemperature"),
        )
    )
    motion_val = first_present(((data, "motion"), (block, "motion")))

    return _build_reading(
        source=IngestionSource.PUSH,
        device_id=seen_id,
        data=data,
        temperature_raw=temperature_raw,
        battery_raw=first_present(((data, "battery"), (block, "battery"))),
        device_state=device_state,
        firmware=_upper(data.get("version") or block.get("version")),
        motion=derive_motion(motion_val, device_state, block or data),
        context=context,
    )


def normalize_payload(
    payload: Mapping[str, Any],
    source: IngestionSource,
    *,
    device_id: str,
    context: NormalizeContext,
) -> Reading | None:
    """Dispatch to the poll or push normalizer by transport tag."""
    if source == IngestionSource.POLL:
        return normalize_poll_payload(payload, device_id=device_id, context=context)
    return normalize_push_payload(payload, device_id=device_id, context=context)
