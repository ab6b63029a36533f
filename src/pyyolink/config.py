"""Client configuration for pyyolink."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyyolink._constants import (
    DEFAULT_DATETIME_FORMAT,
    DEFAULT_DEVICE_TYPE,
    DEFAULT_HUB_PORT,
    DEFAULT_MQTT_PORT,
    DEFAULT_TIME_ZONE,
    MIN_POLL_INTERVAL_SECONDS,
    POLL_DELAY_SECONDS,
    TEMPERATURE_SCALES,
)
from pyyolink.exceptions import YoLinkConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class YoLinkConfig:
    """Device and Local Hub configuration.

    Parameters
    ----------
    device_id : str
        YoLink device id (``deviceId`` / ``targetDevice``).
    token : str
        Per-device net token sent in every ``getState`` request.
    name : str
        Display name, used in log messages.
    device_type : str
        YoLink device type; the poll method is ``<device_type>.getState``.
    hub_host : str or None
        Local Hub IP address or host name.
    hub_port : int
        Local Hub HTTP API port.
    client_id : str or None
        Local API client id (OAuth client credentials, also the MQTT user).
    client_secret : str or None
        Local API client secret (also the MQTT password).
    subnet_id : str or None
        Local Hub subnet id, used to build the MQTT report topic.
    mqtt_enabled : bool
        Subscribe to the hub's MQTT broker for push reports.
    mqtt_port : int
        Local Hub MQTT port.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    temperature_scale : str
        ``"C"`` or ``"F"``; readings are converted into this scale.
    datetime_format : str
        ``strftime`` pattern for ``reportAt``/``stateChangedAt``/``lastPoll``.
    time_zone : str
        IANA time zone used to render timestamps.
    min_poll_interval : float
        Seconds that must elapse between two accepted non-forced polls.
    poll_delay : float
        Seconds between accepting a poll and dispatching the fetch.
    request_timeout : float
        HTTP request timeout in seconds.
    debug : bool
        Enable parse-trace debug logging for this device.
    """

    device_id: str
    token: str
    name: str = DEFAULT_DEVICE_TYPE
    device_type: str = DEFAULT_DEVICE_TYPE
    hub_host: str | None = None
    hub_port: int = DEFAULT_HUB_PORT
    client_id: str | None = None
    client_secret: str | None = None
    subnet_id: str | None = None
    mqtt_enabled: bool = True
    mqtt_port: int = DEFAULT_MQTT_PORT
    mqtt_keepalive: int = 60
    temperature_scale: str = "C"
    datetime_format: str = DEFAULT_DATETIME_FORMAT
    time_zone: str = DEFAULT_TIME_ZONE
    min_poll_interval: float = MIN_POLL_INTERVAL_SECONDS
    poll_delay: float = POLL_DELAY_SECONDS
    request_timeout: float = 10.0
    debug: bool = False

    def __post_init__(self) -> None:
        scale = str(self.temperature_scale).strip().upper()
        if scale not in TEMPERATURE_SCALES:
            raise YoLinkConfigError(f"temperature_scale must be 'C' or 'F', got {self.temperature_scale!r}")
        object.__setattr__(self, "temperature_scale", scale)
        if self.min_poll_interval < 0:
            raise YoLinkConfigError("min_poll_interval must be >= 0")

    @property
    def poll_method(self) -> str:
        return f"{self.device_type}.getState"

    @property
    def hub_base_url(self) -> str:
        if not self.hub_host:
            raise YoLinkConfigError("hub_host is required for Local Hub access")
        return f"http://{self.hub_host}:{self.hub_port}"

    @classmethod
    def from_env(cls, **overrides: Any) -> YoLinkConfig:
        """Create configuration from environment variables.

        Reads ``YOLINK_DEVICE_ID``, ``YOLINK_TOKEN`` and the optional
        ``YOLINK_*`` variables below. Explicit keyword arguments override
        environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "YOLINK_DEVICE_ID": "device_id",
            "YOLINK_TOKEN": "token",
            "YOLINK_NAME": "name",
            "YOLINK_DEVICE_TYPE": "device_type",
            "YOLINK_HUB_HOST": "hub_host",
            "YOLINK_CLIENT_ID": "client_id",
            "YOLINK_CLIENT_SECRET": "client_secret",
            "YOLINK_SUBNET_ID": "subnet_id",
            "YOLINK_TEMPERATURE_SCALE": "temperature_scale",
            "YOLINK_DATETIME_FORMAT": "datetime_format",
            "YOLINK_TIME_ZONE": "time_zone",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_INT_MAP = {
            "YOLINK_HUB_PORT": "hub_port",
            "YOLINK_MQTT_PORT": "mqtt_port",
            "YOLINK_MQTT_KEEPALIVE": "mqtt_keepalive",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = int(val)

        _ENV_FLOAT_MAP = {
            "YOLINK_MIN_POLL_INTERVAL": "min_poll_interval",
            "YOLINK_POLL_DELAY": "poll_delay",
            "YOLINK_REQUEST_TIMEOUT": "request_timeout",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = float(val)

        if "mqtt_enabled" not in overrides:
            config_kwargs["mqtt_enabled"] = _env_bool(env.get("YOLINK_MQTT_ENABLED"), True)

        if "debug" not in overrides:
            config_kwargs["debug"] = _env_bool(env.get("YOLINK_DEBUG"), False)

        config_kwargs.update(overrides)

        missing = [name for name in ("device_id", "token") if not config_kwargs.get(name)]
        if missing:
            raise YoLinkConfigError(f"Missing required configuration: {', '.join(missing)}")

        return cls(**config_kwargs)
