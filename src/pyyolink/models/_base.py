"""Base model for Local Hub payload envelopes.

Hub JSON uses camelCase keys and, depending on firmware, sends ``""``,
``"--"`` or ``"null"`` where a value is simply not available. Models
built on :class:`YoLinkBaseModel` map camelCase keys onto snake_case
fields, treat those placeholders as absent, and keep the untouched
payload available as :attr:`YoLinkBaseModel.raw` for keys they do not type.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr, model_validator
from pydantic.alias_generators import to_camel

_PLACEHOLDERS = frozenset({"", "--", "NaN", "nan", "null"})


def _is_placeholder(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in _PLACEHOLDERS
    return isinstance(value, float) and math.isnan(value)


class YoLinkBaseModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    _raw: dict[str, Any] = PrivateAttr(default_factory=dict)

    @property
    def raw(self) -> dict[str, Any]:
        """Payload exactly as received, placeholders included."""
        return self._raw

    @model_validator(mode="wrap")
    @classmethod
    def _drop_placeholders(cls, values: Any, handler: Any) -> Any:
        if not isinstance(values, dict):
            return handler(values)
        model = handler({key: value for key, value in values.items() if not _is_placeholder(value)})
        model._raw = dict(values)
        return model
