"""Internal constants shared across the library."""

#: ``code`` value the Local Hub returns for a successful call.
SUCCESS_CODE = "000000"
#: Codes the hub uses when the bearer access token is missing or expired.
TOKEN_EXPIRED_CODES: frozenset[str] = frozenset({"010104", "020104"})

DEFAULT_HUB_PORT = 1080
DEFAULT_MQTT_PORT = 18080
TOKEN_ENDPOINT = "/open/yolink/token"
API_ENDPOINT = "/open/yolink/v2/api"

DEFAULT_DEVICE_TYPE = "MotionSensor"
DEFAULT_DATETIME_FORMAT = "%m/%d/%Y %I:%M:%S %p"
DEFAULT_TIME_ZONE = "UTC"

# ------------------------------------------------------------------
# Polling
# ------------------------------------------------------------------

MIN_POLL_INTERVAL_SECONDS = 5.0
POLL_DELAY_SECONDS = 1.0

# ------------------------------------------------------------------
# Temperature (some firmware reports °F - 136 instead of °C)
# ------------------------------------------------------------------

FAHRENHEIT_OFFSET = 136.0
OFFSET_TRIGGER_BELOW_C = -20.0
PLAUSIBLE_FAHRENHEIT_MIN = 32.0
PLAUSIBLE_FAHRENHEIT_MAX = 122.0

TEMPERATURE_SCALES: frozenset[str] = frozenset({"C", "F"})


def fahrenheit_to_celsius(value: float) -> float:
    return (value - 32.0) * (5.0 / 9.0)


def celsius_to_fahrenheit(value: float) -> float:
    return value * (9.0 / 5.0) + 32.0


# ------------------------------------------------------------------
# YoLink battery level (0-4) -> percent
# ------------------------------------------------------------------

_BATTERY_LEVEL_TO_PERCENT: dict[int, int] = {0: 0, 1: 25, 2: 50, 3: 75, 4: 100}


def battery_level_to_percent(level: int) -> int | None:
    """Map a YoLink battery level (0-4) to a percentage, ``None`` when unmapped."""
    return _BATTERY_LEVEL_TO_PERCENT.get(level)
