"""Pydantic request models sent to the Local Hub."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class FetchRequest(BaseModel):
    """Request descriptor for a device call (``{method, targetDevice, token}``)."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )

    method: str
    target_device: str
    token: str

    @field_validator("method", "target_device")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("must be non-empty")
        return value

    def to_payload(self) -> dict[str, Any]:
        """Wire body for ``POST /open/yolink/v2/api``."""
        return self.model_dump(by_alias=True, exclude_none=True)
