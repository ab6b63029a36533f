"""Collaborator contracts consumed by the ingestion core.

Each contract is a structural :class:`typing.Protocol` so hosts can pass
plain functions or their own objects. Default implementations cover the
common case of a standalone client.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Awaitable, Mapping
from datetime import tzinfo
from typing import Any, Protocol
from zoneinfo import ZoneInfo

from pyyolink._constants import (
    battery_level_to_percent,
    celsius_to_fahrenheit,
)
from pyyolink.config import YoLinkConfig
from pyyolink.ingestion.normalize import safe_int
from pyyolink.models.requests import FetchRequest
from pyyolink.state.events import Notification


class Fetcher(Protocol):
    """Performs a device call; may be sync or async."""

    def __call__(self, request: FetchRequest) -> Mapping[str, Any] | None | Awaitable[Mapping[str, Any] | None]: ...


class TemperatureConverter(Protocol):
    def __call__(self, celsius: float) -> float: ...


class BatteryMapper(Protocol):
    def __call__(self, raw: Any) -> int | None: ...


class NotificationSink(Protocol):
    def __call__(self, notification: Notification) -> None: ...


class DisplayFormat(Protocol):
    @property
    def datetime_format(self) -> str: ...

    @property
    def temperature_scale(self) -> str: ...

    @property
    def time_zone(self) -> tzinfo: ...


@dataclasses.dataclass(frozen=True)
class ScaleConverter:
    """Convert °C readings into the display scale (``"C"`` or ``"F"``)."""

    scale: str = "C"

    def __call__(self, celsius: float) -> float:
        if self.scale.upper() == "F":
            return celsius_to_fahrenheit(celsius)
        return celsius


def battery_level_percent(raw: Any) -> int | None:
    """Default battery mapper: YoLink level 0-4 to percent."""
    level = safe_int(raw)
    if level is None:
        return None
    return battery_level_to_percent(level)


@dataclasses.dataclass(frozen=True)
class StaticDisplayFormat:
    datetime_format: str
    temperature_scale: str
    time_zone: tzinfo

    @classmethod
    def from_config(cls, config: YoLinkConfig) -> StaticDisplayFormat:
        return cls(
            datetime_format=config.datetime_format,
            temperature_scale=config.temperature_scale,
            time_zone=ZoneInfo(config.time_zone),
        )
