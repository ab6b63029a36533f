"""Fetch outcome classification.

Every poll result is classified before normalization into an explicit
result type, so the device facade never has to inspect raw codes or let
an exception escape an ingestion entry point.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyyolink._constants import SUCCESS_CODE
from pyyolink.ingestion.normalize import safe_str
from pyyolink.models.envelopes import PollResponse


class FetchOutcome(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"
    NO_RESPONSE = "no_response"
    EXCEPTION = "exception"


class FetchResult(BaseModel):
    """Classified result of one poll attempt."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    outcome: FetchOutcome
    code: str | None = None
    message: str | None = None
    response: dict[str, Any] = Field(default_factory=dict)
    error: BaseException | None = Field(default=None, exclude=True)

    @property
    def is_success(self) -> bool:
        return self.outcome == FetchOutcome.SUCCESS

    def describe(self) -> str:
        """Human-readable outcome, as shown in ``lastResponse``."""
        if self.outcome == FetchOutcome.SUCCESS:
            return "Poll Success"
        if self.outcome == FetchOutcome.NO_RESPONSE:
            return "No response from Local API"
        if self.outcome == FetchOutcome.FAILURE:
            text = f"Polling error: {self.code}"
            return f"{text} ({self.message})" if self.message else text
        if self.error is not None:
            return f"Exception {type(self.error).__name__}: {self.error}"
        return f"Exception {self.message}"


def is_successful(response: Mapping[str, Any]) -> bool:
    return safe_str(response.get("code")) == SUCCESS_CODE


def classify_response(response: Any) -> FetchResult:
    """Classify a fetch return value by its status code."""
    if not response:
        return FetchResult(outcome=FetchOutcome.NO_RESPONSE)
    if not isinstance(response, Mapping):
        return FetchResult(
            outcome=FetchOutcome.EXCEPTION,
            message=f"unexpected response type {type(response).__name__}",
        )

    envelope = PollResponse.model_validate(dict(response))
    outcome = FetchOutcome.SUCCESS if envelope.code == SUCCESS_CODE else FetchOutcome.FAILURE
    return FetchResult(outcome=outcome, code=envelope.code, message=envelope.message, response=dict(response))


def classify_exception(exc: BaseException) -> FetchResult:
    return FetchResult(outcome=FetchOutcome.EXCEPTION, message=str(exc), error=exc)
