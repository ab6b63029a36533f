"""Motion sensor device facade.

Owns one device's state broker and poll scheduler and exposes the three
ingestion entry points: :meth:`MotionSensor.ingest_poll`,
:meth:`MotionSensor.ingest_push` and :meth:`MotionSensor.poll`. None of
them raises on bad payloads or transport failures; the outcome always
ends up in the ``lastResponse`` attribute.
"""

from __future__ import annotations

import asyncio
import inspect
import json
import logging
import time
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any

from pyyolink.collaborators import (
    BatteryMapper,
    DisplayFormat,
    Fetcher,
    NotificationSink,
    ScaleConverter,
    StaticDisplayFormat,
    TemperatureConverter,
    battery_level_percent,
)
from pyyolink.config import YoLinkConfig
from pyyolink.exceptions import YoLinkConfigError
from pyyolink.ingestion.normalize import format_timestamp
from pyyolink.ingestion.outcome import FetchOutcome, FetchResult, classify_exception, classify_response
from pyyolink.ingestion.payload import (
    NormalizeContext,
    normalize_poll_payload,
    normalize_push_payload,
    push_device_id,
)
from pyyolink.models.reading import Reading
from pyyolink.models.requests import FetchRequest
from pyyolink.scheduler import PollScheduler
from pyyolink.state.events import Attribute, IngestionSource
from pyyolink.state.store import DeviceState, StateBroker

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _decode_push(raw_payload: Any) -> Mapping[str, Any]:
    if isinstance(raw_payload, (bytes, bytearray)):
        raw_payload = raw_payload.decode("utf-8")
    if isinstance(raw_payload, str):
        raw_payload = json.loads(raw_payload)
    if not isinstance(raw_payload, Mapping):
        raise ValueError(f"push payload is not an object: {type(raw_payload).__name__}")
    return raw_payload


class MotionSensor:
    """A YoLink motion sensor fed by Local Hub polls and MQTT reports.

    Polls are dispatched on the running event loop (or the *loop* passed
    in), so :meth:`setup` and :meth:`poll` belong in async code.

    Usage::

        sensor = MotionSensor(config, fetcher=transport, sink=print)
        sensor.setup()              # remembers devId, resets, force-polls
        sensor.ingest_push(message)  # from the MQTT runtime
    """

    def __init__(
        self,
        config: YoLinkConfig,
        *,
        fetcher: Fetcher | None = None,
        sink: NotificationSink | None = None,
        convert_temperature: TemperatureConverter | None = None,
        battery_percent: BatteryMapper | None = battery_level_percent,
        display: DisplayFormat | None = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = _utcnow,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._config = config
        self._fetcher = fetcher
        self._display = display or StaticDisplayFormat.from_config(config)
        self._convert = convert_temperature or ScaleConverter(self._display.temperature_scale)
        self._battery_percent = battery_percent
        self._wall_clock = wall_clock
        self._broker = StateBroker(device_id=config.device_id, sink=sink, clock=wall_clock)
        self._broker.set_debug(config.debug)
        self._scheduler = PollScheduler(
            self.fetch_state,
            min_interval=config.min_poll_interval,
            delay=config.poll_delay,
            clock=clock,
            loop=loop,
        )

    @property
    def config(self) -> YoLinkConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def state(self) -> DeviceState:
        return self._broker.state

    @property
    def broker(self) -> StateBroker:
        return self._broker

    @property
    def scheduler(self) -> PollScheduler:
        return self._scheduler

    @property
    def is_setup(self) -> bool:
        return bool(self._config.device_id and self._broker.state.token)

    def snapshot(self) -> DeviceState:
        return self._broker.snapshot()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def setup(self) -> None:
        """Record device identity and credentials, then reset."""
        self._broker.store_token(self._config.token)
        self._broker.remember(Attribute.DEVICE_ID, self._config.device_id)
        self._log_debug(
            "Setup: device=%s name=%s hub=%s token_set=%s",
            self._config.device_id,
            self._config.name,
            self._config.hub_host,
            bool(self._config.token),
        )
        self.reset()

    def update(self, *, debug: bool | None = None) -> None:
        """Apply changed preferences."""
        if debug is not None:
            self._broker.set_debug(debug)

    def reset(self) -> None:
        self._broker.record_response("Reset completed")
        self.poll(force=True)

    def remove(self) -> None:
        """Tear down the device record."""
        self._scheduler.close()
        _logger.warning("Device '%s' removed", self._config.name)
        self._broker.clear()

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def poll(self, force: bool = False) -> bool:
        """Request a poll; returns ``True`` when the rate limiter accepted it."""
        try:
            accepted = self._scheduler.poll(force)
        except RuntimeError as exc:
            _logger.warning("%s poll not scheduled: %s", self._config.name, exc)
            return False
        if accepted:
            self._broker.remember(Attribute.LAST_POLL, self._format_now())
        return accepted

    def refresh(self) -> bool:
        return self.poll(force=True)

    async def fetch_state(self) -> None:
        """Call the fetcher for ``<type>.getState`` and ingest the answer."""
        self._log_debug("%s fetch_state()", self._config.name)
        try:
            if self._fetcher is None:
                raise YoLinkConfigError("No fetcher configured")
            request = FetchRequest(
                method=self._config.poll_method,
                target_device=self._config.device_id,
                token=self._broker.state.token or self._config.token,
            )
            response = self._fetcher(request)
            if inspect.isawaitable(response):
                response = await response
        except Exception as exc:
            self._record_exception(classify_exception(exc))
            return
        self.ingest_poll(response)

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def ingest_poll(self, raw_response: Any) -> Reading | None:
        """Ingest a ``getState`` response. Returns the applied reading, if any."""
        try:
            result = classify_response(raw_response)
            if result.outcome == FetchOutcome.EXCEPTION:
                self._record_exception(result)
                return None

            reading: Reading | None = None
            if result.outcome == FetchOutcome.SUCCESS:
                reading = normalize_poll_payload(raw_response, device_id=self._config.device_id, context=self._context())
                if reading is None:
                    return None
                self._apply_reading(reading)
                self._broker.mark_online(True)
            elif result.outcome == FetchOutcome.FAILURE:
                self._broker.mark_online(False)
                _logger.warning("Polling error: %s", result.code)

            self._broker.record_response(result.describe())
            return reading
        except Exception as exc:
            self._record_exception(classify_exception(exc))
            return None

    def ingest_push(self, raw_payload: Any) -> Reading | None:
        """Ingest an MQTT report (JSON text, bytes or an already-decoded mapping)."""
        try:
            payload = _decode_push(raw_payload)
            if push_device_id(payload) != self._config.device_id:
                return None
            # Online as soon as the id matches, before the body is parsed.
            self._broker.mark_online(True)
            reading = normalize_push_payload(payload, device_id=self._config.device_id, context=self._context())
            if reading is None:
                return None
            self._apply_reading(reading)
            self._broker.record_response("MQTT Success")
            return reading
        except Exception as exc:
            _logger.warning("%s push processing error: %s", self._config.name, exc)
            self._broker.record_response("MQTT Exception")
            return None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _context(self) -> NormalizeContext:
        return NormalizeContext(
            convert_temperature=self._convert,
            battery_percent=self._battery_percent,
            datetime_format=self._display.datetime_format,
            time_zone=self._display.time_zone,
        )

    def _format_now(self) -> str | None:
        return format_timestamp(self._wall_clock(), self._display.datetime_format, self._display.time_zone)

    def _record_exception(self, result: FetchResult) -> None:
        self._broker.record_response(result.describe())
        _logger.error("%s fetch_state() exception: %s", self._config.name, result.message)

    def _apply_reading(self, reading: Reading) -> None:
        broker = self._broker
        poll = reading.source == IngestionSource.POLL

        if reading.temperature_value is not None:
            broker.remember(Attribute.TEMPERATURE, reading.temperature_value, self._display.temperature_scale)
        if reading.battery_percent is not None:
            # Poll results re-announce battery every time; reports only on change.
            broker.remember(Attribute.BATTERY, reading.battery_percent, "%", force=poll)
        broker.remember(Attribute.MOTION, reading.motion_state)

        if poll or reading.device_state:
            broker.remember(Attribute.STATE, reading.device_state)
        if reading.firmware_version:
            broker.remember(Attribute.FIRMWARE, reading.firmware_version)
        if reading.reported_at:
            broker.remember(Attribute.REPORT_AT, reading.reported_at)
        if reading.changed_at:
            broker.remember(Attribute.STATE_CHANGED_AT, reading.changed_at)

        link = reading.radio_link
        if link is not None:
            if link.network_type:
                broker.remember(Attribute.NETWORK_TYPE, link.network_type)
            if link.signal_text is not None:
                broker.remember(Attribute.SIGNAL, link.signal_text)
            if link.gateway_count is not None:
                broker.remember(Attribute.GATEWAYS, link.gateway_count)
            if link.gateway_id is not None:
                broker.remember(Attribute.GATEWAY_ID, link.gateway_id)

        self._log_debug(
            "Parsed(%s): tempRaw=%s => temp=%s%s batt=%s(%s%%) motion=%s state=%s signal=%s",
            reading.source,
            reading.temperature_raw,
            reading.temperature_value,
            self._display.temperature_scale,
            reading.battery_raw,
            reading.battery_percent,
            reading.motion_state,
            reading.device_state,
            link.signal_dbm if link is not None else None,
        )

    def _log_debug(self, msg: str, *args: Any) -> None:
        if self._broker.state.debug:
            _logger.debug(msg, *args)
