"""Data models for YoLink Local Hub payloads and canonical readings."""

from pyyolink.models._base import YoLinkBaseModel
from pyyolink.models.envelopes import PollResponse, PushEnvelope
from pyyolink.models.reading import MotionState, RadioLink, Reading
from pyyolink.models.requests import FetchRequest

__all__ = [
    "FetchRequest",
    "MotionState",
    "PollResponse",
    "PushEnvelope",
    "RadioLink",
    "Reading",
    "YoLinkBaseModel",
]
