"""Local Hub MQTT connection settings and runtime."""

from __future__ import annotations

import asyncio
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, cast

import paho.mqtt.client as mqtt

from pyyolink.config import YoLinkConfig
from pyyolink.exceptions import YoLinkConfigError


@dataclass(frozen=True)
class MqttSettings:
    """Broker/session data required to connect to the Local Hub broker."""

    broker_host: str
    broker_port: int
    topic: str
    client_id: str
    username: str
    password: str


@dataclass(frozen=True)
class PushMessage:
    """One raw MQTT report as received; decoding happens in the device."""

    topic: str
    payload: bytes

    @property
    def device_id(self) -> str | None:
        return device_id_from_topic(self.topic)


def build_report_topic(subnet_id: str, device_id: str = "+") -> str:
    return f"ylsubnet/{subnet_id}/{device_id}/report"


def device_id_from_topic(topic: str) -> str | None:
    parts = topic.split("/")
    if len(parts) == 4 and parts[0] == "ylsubnet" and parts[3] == "report" and parts[2]:
        return parts[2]
    return None


def mqtt_settings_from_config(config: YoLinkConfig) -> MqttSettings:
    """Build broker settings; the hub authenticates MQTT with the API client credentials."""
    missing = [
        name
        for name, value in (
            ("hub_host", config.hub_host),
            ("subnet_id", config.subnet_id),
            ("client_id", config.client_id),
            ("client_secret", config.client_secret),
        )
        if not value
    ]
    if missing:
        raise YoLinkConfigError(f"MQTT requires: {', '.join(missing)}")
    assert config.hub_host and config.subnet_id and config.client_id and config.client_secret  # noqa: S101
    return MqttSettings(
        broker_host=config.hub_host,
        broker_port=config.mqtt_port,
        topic=build_report_topic(config.subnet_id, config.device_id),
        client_id=f"pyyolink_{config.device_id}_{secrets.token_hex(4)}",
        username=config.client_id,
        password=config.client_secret,
    )


class LocalHubMqttRuntime:
    """Threaded paho-mqtt session that hands raw reports to an asyncio loop.

    paho runs its network loop on its own thread; every report is passed
    to *on_message* on *loop* via ``call_soon_threadsafe``.
    """

    def __init__(
        self,
        *,
        loop: asyncio.AbstractEventLoop,
        on_message: Callable[[PushMessage], None],
        keepalive: int = 60,
        logger: logging.Logger | None = None,
    ) -> None:
        self._loop = loop
        self._on_report = on_message
        self._keepalive = keepalive
        self._log = logger or logging.getLogger(__name__)
        self._paho: mqtt.Client | None = None
        self._settings: MqttSettings | None = None
        self._connected = False

    @property
    def is_running(self) -> bool:
        return self._paho is not None

    @property
    def is_connected(self) -> bool:
        """Whether the broker accepted the last connection attempt."""
        return self._connected

    def start(self, settings: MqttSettings) -> None:
        """Connect to the hub broker and start paho's network thread."""
        self.stop()
        self._log.debug(
            "Connecting to hub broker %s:%s as %s (topic %s)",
            settings.broker_host,
            settings.broker_port,
            settings.client_id,
            settings.topic,
        )

        paho = mqtt.Client(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=settings.client_id,
        )
        paho.enable_logger(self._log)
        paho.username_pw_set(settings.username, settings.password)
        paho.on_connect = self._on_connect
        paho.on_message = self._on_message
        paho.on_disconnect = self._on_disconnect

        self._settings = settings
        paho.connect(settings.broker_host, settings.broker_port, keepalive=self._keepalive)
        paho.loop_start()
        self._paho = paho

    def stop(self) -> None:
        """Disconnect and join the network thread. Safe to call repeatedly."""
        paho, self._paho = self._paho, None
        self._settings = None
        if paho is None:
            return
        try:
            if self._connected:
                paho.disconnect()
        finally:
            self._connected = False
            paho.loop_stop()
            self._log.debug("Hub broker session closed")

    # paho callbacks, invoked on the network thread

    def _on_connect(self, client: mqtt.Client, _userdata: Any, _flags: Any, reason_code: Any, _props: Any) -> None:
        if reason_code.is_failure:
            self._log.warning("Hub broker refused connection: %s", reason_code)
            return
        self._connected = True
        settings = self._settings
        if settings is not None:
            # Subscriptions do not survive a reconnect; renew on every CONNACK.
            client.subscribe(settings.topic, qos=0)
            self._log.debug("Subscribed to %s", settings.topic)

    def _on_disconnect(self, _client: mqtt.Client, _userdata: Any, _flags: Any, reason_code: Any, _props: Any) -> None:
        was_connected, self._connected = self._connected, False
        if was_connected and self._paho is not None:
            self._log.info("Hub broker connection lost (%s); paho will reconnect", reason_code)

    def _on_message(self, _client: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
        self._log.debug("Report on %s (%d bytes)", msg.topic, len(msg.payload))
        message = PushMessage(topic=msg.topic, payload=bytes(msg.payload))
        try:
            self._loop.call_soon_threadsafe(self._on_report, message)
        except RuntimeError:
            self._log.debug("Event loop closed; dropping report on %s", msg.topic)
