"""Attribute identifiers and change notifications.

All ingestion paths (poll, push) end up as :class:`Notification` objects
emitted by the state broker. Only the state/store layer creates them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IngestionSource(StrEnum):
    POLL = "poll"
    PUSH = "push"


class Attribute(StrEnum):
    """Externally observable device attributes, by host attribute name."""

    ONLINE = "online"
    DEVICE_ID = "devId"
    FIRMWARE = "firmware"
    LAST_POLL = "lastPoll"
    LAST_RESPONSE = "lastResponse"
    REPORT_AT = "reportAt"
    STATE_CHANGED_AT = "stateChangedAt"
    STATE = "state"
    TEMPERATURE = "temperature"
    BATTERY = "battery"
    MOTION = "motion"
    NETWORK_TYPE = "loraDevNetType"
    SIGNAL = "signal"
    GATEWAYS = "gateways"
    GATEWAY_ID = "gatewayId"


#: Live telemetry: re-notified on every ingestion regardless of equality.
ALWAYS_LIVE: frozenset[Attribute] = frozenset(
    {
        Attribute.TEMPERATURE,
        Attribute.MOTION,
        Attribute.SIGNAL,
        Attribute.LAST_RESPONSE,
        Attribute.LAST_POLL,
    }
)


class Notification(BaseModel):
    """A change notification handed to the notification sink."""

    model_config = ConfigDict(frozen=True)

    device_id: str | None = Field(default=None, description="Device the attribute belongs to")
    attribute: Attribute
    value: str | None = Field(default=None, description="Stringified attribute value")
    unit: str | None = None
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("observed_at")
    @classmethod
    def _ensure_tz_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value
