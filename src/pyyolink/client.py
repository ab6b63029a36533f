"""High-level async client for one motion sensor behind a YoLink Local Hub."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from pyyolink._mqtt import LocalHubMqttRuntime, PushMessage, mqtt_settings_from_config
from pyyolink._transport import LocalHubTransport
from pyyolink.collaborators import (
    BatteryMapper,
    DisplayFormat,
    NotificationSink,
    TemperatureConverter,
    battery_level_percent,
)
from pyyolink.config import YoLinkConfig
from pyyolink.device import MotionSensor
from pyyolink.exceptions import YoLinkError

_logger = logging.getLogger(__name__)


class YoLinkLocalClient:
    """Async client wiring the Local Hub HTTP API and MQTT broker to a :class:`MotionSensor`.

    Usage::

        async with YoLinkLocalClient(config, sink=print) as client:
            client.sensor.refresh()
    """

    def __init__(
        self,
        config: YoLinkConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        sink: NotificationSink | None = None,
        convert_temperature: TemperatureConverter | None = None,
        battery_percent: BatteryMapper | None = battery_level_percent,
        display: DisplayFormat | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._sink = sink
        self._convert_temperature = convert_temperature
        self._battery_percent = battery_percent
        self._display = display
        self._transport: LocalHubTransport | None = None
        self._sensor: MotionSensor | None = None
        self._mqtt_runtime: LocalHubMqttRuntime | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> YoLinkLocalClient:
        self._loop = asyncio.get_running_loop()
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = LocalHubTransport(self._config, self._http_session)
        self._sensor = MotionSensor(
            self._config,
            fetcher=self._transport,
            sink=self._sink,
            convert_temperature=self._convert_temperature,
            battery_percent=self._battery_percent,
            display=self._display,
            loop=self._loop,
        )
        await self._start_mqtt()
        self._sensor.setup()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self._stop_mqtt()
        if self._sensor is not None:
            self._sensor.scheduler.close()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._loop = None

    @property
    def sensor(self) -> MotionSensor:
        if self._sensor is None:
            raise YoLinkError("Client not initialized. Use 'async with YoLinkLocalClient(...) as client:'")
        return self._sensor

    @property
    def mqtt_running(self) -> bool:
        return self._mqtt_runtime is not None and self._mqtt_runtime.is_running

    # ------------------------------------------------------------------
    # MQTT
    # ------------------------------------------------------------------

    async def _start_mqtt(self) -> None:
        """Best-effort MQTT startup (failures must not break polling)."""
        if not self._config.mqtt_enabled or self._loop is None:
            return
        try:
            settings = mqtt_settings_from_config(self._config)
            runtime = LocalHubMqttRuntime(
                loop=self._loop,
                on_message=self._on_push_message,
                keepalive=self._config.mqtt_keepalive,
                logger=_logger,
            )
            await self._loop.run_in_executor(None, runtime.start, settings)
            self._mqtt_runtime = runtime
        except Exception:
            _logger.warning("MQTT startup failed; continuing with polling only", exc_info=True)

    async def _stop_mqtt(self) -> None:
        runtime = self._mqtt_runtime
        self._mqtt_runtime = None
        if runtime is None or self._loop is None:
            return
        try:
            await self._loop.run_in_executor(None, runtime.stop)
        except Exception:
            _logger.debug("MQTT runtime stop failed", exc_info=True)

    def _on_push_message(self, message: PushMessage) -> None:
        if self._sensor is None:
            return
        topic_device = message.device_id
        if topic_device is not None and topic_device != self._config.device_id:
            _logger.debug("Ignoring report on %s", message.topic)
            return
        self._sensor.ingest_push(message.payload)
