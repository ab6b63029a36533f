"""Outer envelopes of Local Hub poll responses and MQTT reports.

Only the envelope keys are typed; ``data`` stays an untyped tree because
its shape varies by model and firmware.
"""

from __future__ import annotations

from typing import Any

from pydantic import field_validator

from pyyolink.ingestion.normalize import safe_int, safe_str
from pyyolink.models._base import YoLinkBaseModel


class PollResponse(YoLinkBaseModel):
    """Response to ``<type>.getState``.

    Parameters
    ----------
    code : str or None
        ``"000000"`` on success, an error code otherwise.
    desc : str or None
        Human-readable status (``"Success"``, error text).
    method : str or None
        Echo of the request method.
    target_device : str or None
        Device the response belongs to, when the hub echoes it.
    data : Any
        Device payload (``{"state": {...}, "loraInfo": {...}, ...}``).
    """

    code: str | None = None
    desc: str | None = None
    msg: str | None = None
    method: str | None = None
    target_device: str | None = None
    data: Any = None

    @field_validator("code", "desc", "msg", "method", "target_device", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)

    @property
    def message(self) -> str | None:
        return self.desc or self.msg


class PushEnvelope(YoLinkBaseModel):
    """MQTT report envelope (``Report`` / ``Alert`` / ``StatusChange``)."""

    event: str | None = None
    device_id: str | None = None
    msgid: str | None = None
    time: int | None = None
    data: Any = None

    @field_validator("event", "device_id", "msgid", mode="before")
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        return safe_str(value)

    @field_validator("time", mode="before")
    @classmethod
    def _coerce_time(cls, value: Any) -> int | None:
        return safe_int(value)
