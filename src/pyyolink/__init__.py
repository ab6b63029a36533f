"""pyyolink - Async Python ingestion for YoLink motion sensors via the Local Hub."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyyolink")
except PackageNotFoundError:
    __version__ = "0+local"
from pyyolink.client import YoLinkLocalClient
from pyyolink.collaborators import ScaleConverter, StaticDisplayFormat, battery_level_percent
from pyyolink.config import YoLinkConfig
from pyyolink.device import MotionSensor
from pyyolink.exceptions import (
    YoLinkApiError,
    YoLinkAuthenticationError,
    YoLinkConfigError,
    YoLinkError,
    YoLinkTransportError,
)
from pyyolink.ingestion.motion import derive_motion
from pyyolink.ingestion.outcome import FetchOutcome, FetchResult
from pyyolink.ingestion.temperature import normalize_temperature
from pyyolink.models import FetchRequest, MotionState, RadioLink, Reading
from pyyolink.scheduler import PollScheduler
from pyyolink.state.events import Attribute, IngestionSource, Notification
from pyyolink.state.store import DeviceState, StateBroker

__all__ = [
    "__version__",
    "Attribute",
    "DeviceState",
    "FetchOutcome",
    "FetchRequest",
    "FetchResult",
    "IngestionSource",
    "MotionSensor",
    "MotionState",
    "Notification",
    "PollScheduler",
    "RadioLink",
    "Reading",
    "ScaleConverter",
    "StateBroker",
    "StaticDisplayFormat",
    "YoLinkApiError",
    "YoLinkAuthenticationError",
    "YoLinkConfig",
    "YoLinkConfigError",
    "YoLinkError",
    "YoLinkLocalClient",
    "YoLinkTransportError",
    "battery_level_percent",
    "derive_motion",
    "normalize_temperature",
]
