"""Canonical reading produced from any poll or push payload."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pyyolink.ingestion.normalize import safe_int, safe_str
from pyyolink.models._base import YoLinkBaseModel
from pyyolink.state.events import IngestionSource


class MotionState(StrEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class RadioLink(YoLinkBaseModel):
    """LoRa hop metadata from ``data.loraInfo``.

    Parameters
    ----------
    network_type : str or None
        ``devNetType`` (e.g. ``"A"``, ``"D"``).
    signal_dbm : int or None
        Received signal strength in dBm.
    gateway_count : int or None
        Number of gateways that heard the device.
    gateway_id : str or None
        Id of the gateway that forwarded the report.
    """

    network_type: str | None = Field(default=None, alias="devNetType")
    signal_dbm: int | None = Field(default=None, alias="signal")
    gateway_count: int | None = Field(default=None, alias="gateways")
    gateway_id: str | None = Field(default=None, alias="gatewayId")

    @field_validator("signal_dbm", "gateway_count", mode="before")
    @classmethod
    def _coerce_int(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("network_type", "gateway_id", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)

    @property
    def signal_text(self) -> str | None:
        """Signal rendered for display, e.g. ``"-78 dBm"``."""
        if self.signal_dbm is None:
            return None
        return f"{self.signal_dbm} dBm"


class Reading(BaseModel):
    """Schema-stable reading; every field except ``motion_state`` is optional."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    source: IngestionSource
    device_id: str | None = None
    temperature_raw: float | int | str | None = None
    temperature_value: float | None = None
    battery_raw: Any = None
    battery_percent: int | None = Field(default=None, ge=0, le=100)
    firmware_version: str | None = None
    device_state: str | None = None
    motion_state: MotionState = MotionState.INACTIVE
    reported_at: str | None = None
    changed_at: str | None = None
    radio_link: RadioLink | None = None
