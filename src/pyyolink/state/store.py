"""Per-device state record and memoization broker.

The broker is the only component allowed to mutate :class:`DeviceState`.
Every write goes through a compare-and-set that emits a
:class:`Notification` exactly when the stored value changes (or the
attribute is live telemetry, or the caller forces it).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from pyyolink.models.reading import MotionState
from pyyolink.state.events import Attribute, Notification
from pyyolink.state.policy import should_emit, stringify

_logger = logging.getLogger(__name__)

NotificationCallback = Callable[[Notification], None]


def _utcnow() -> datetime:
    return datetime.now(UTC)


class DeviceState(BaseModel):
    """Last-known value of every observable attribute of one device."""

    model_config = ConfigDict(extra="forbid")

    online: bool | None = None
    device_id: str | None = None
    firmware: str | None = None
    last_poll: str | None = None
    last_response: str | None = None
    reported_at: str | None = None
    state_changed_at: str | None = None
    device_state: str | None = None
    temperature: float | None = None
    battery: int | None = None
    motion: MotionState | None = None
    network_type: str | None = None
    signal: str | None = None
    gateways: int | None = None
    gateway_id: str | None = None

    # Not broadcast to the host.
    token: str | None = None
    debug: bool = False


_SLOTS: dict[Attribute, str] = {
    Attribute.ONLINE: "online",
    Attribute.DEVICE_ID: "device_id",
    Attribute.FIRMWARE: "firmware",
    Attribute.LAST_POLL: "last_poll",
    Attribute.LAST_RESPONSE: "last_response",
    Attribute.REPORT_AT: "reported_at",
    Attribute.STATE_CHANGED_AT: "state_changed_at",
    Attribute.STATE: "device_state",
    Attribute.TEMPERATURE: "temperature",
    Attribute.BATTERY: "battery",
    Attribute.MOTION: "motion",
    Attribute.NETWORK_TYPE: "network_type",
    Attribute.SIGNAL: "signal",
    Attribute.GATEWAYS: "gateways",
    Attribute.GATEWAY_ID: "gateway_id",
}


class StateBroker:
    """Compare-and-set-with-notify over a :class:`DeviceState` record.

    Runs on a single thread (the device's event loop); callers on other
    threads must hand work over with ``loop.call_soon_threadsafe``.
    """

    def __init__(
        self,
        *,
        device_id: str | None = None,
        sink: NotificationCallback | None = None,
        state: DeviceState | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._device_id = device_id
        self._sink = sink
        self._state = state if state is not None else DeviceState()
        self._clock = clock

    @property
    def state(self) -> DeviceState:
        """Live state record. Treat as read-only; use :meth:`snapshot` to keep a copy."""
        return self._state

    def snapshot(self) -> DeviceState:
        return self._state.model_copy(deep=True)

    def get(self, attribute: Attribute) -> Any:
        return getattr(self._state, _SLOTS[attribute])

    def remember(
        self,
        attribute: Attribute,
        value: Any,
        unit: str | None = None,
        *,
        force: bool = False,
    ) -> bool:
        """Persist *value* and notify when it changed (or when forced).

        Returns ``True`` when a notification was emitted.
        """
        slot = _SLOTS[attribute]
        current = getattr(self._state, slot)
        if not should_emit(attribute=attribute, current=current, incoming=value, force=force):
            return False

        setattr(self._state, slot, value)
        self._emit(
            Notification(
                device_id=self._device_id,
                attribute=attribute,
                value=stringify(value),
                unit=unit,
                observed_at=self._clock(),
            )
        )
        return True

    def mark_online(self, online: bool) -> bool:
        return self.remember(Attribute.ONLINE, online)

    def record_response(self, text: str) -> bool:
        """Record the human-readable outcome of the last ingestion attempt."""
        return self.remember(Attribute.LAST_RESPONSE, text)

    def store_token(self, token: str | None) -> None:
        self._state.token = token

    def set_debug(self, enabled: bool) -> None:
        self._state.debug = enabled

    def clear(self) -> None:
        """Drop the whole record (device removal)."""
        self._state = DeviceState()

    def _emit(self, notification: Notification) -> None:
        if self._sink is None:
            return
        try:
            self._sink(notification)
        except Exception:
            _logger.warning("Notification sink failed for %s", notification.attribute, exc_info=True)
