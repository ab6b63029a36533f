from __future__ import annotations

import pytest

from pyyolink.ingestion.outcome import FetchOutcome, classify_exception, classify_response, is_successful


def test_success_code() -> None:
    result = classify_response({"code": "000000", "desc": "Success", "data": {}})
    assert result.outcome == FetchOutcome.SUCCESS
    assert result.is_success
    assert result.describe() == "Poll Success"
    assert is_successful({"code": "000000"})


def test_error_code_is_failure() -> None:
    result = classify_response({"code": "000201", "desc": "Cannot connect to the device"})
    assert result.outcome == FetchOutcome.FAILURE
    assert result.code == "000201"
    assert result.describe() == "Polling error: 000201 (Cannot connect to the device)"


def test_numeric_code_is_not_success() -> None:
    result = classify_response({"code": 0})
    assert result.outcome == FetchOutcome.FAILURE
    assert result.describe() == "Polling error: 0"


@pytest.mark.parametrize("response", [None, {}, ""])
def test_empty_response(response: object) -> None:
    result = classify_response(response)
    assert result.outcome == FetchOutcome.NO_RESPONSE
    assert result.describe() == "No response from Local API"


def test_non_mapping_response() -> None:
    result = classify_response(["000000"])
    assert result.outcome == FetchOutcome.EXCEPTION
    assert result.describe() == "Exception unexpected response type list"


def test_exception_result() -> None:
    result = classify_exception(TimeoutError("boom"))
    assert result.outcome == FetchOutcome.EXCEPTION
    assert not result.is_success
    assert result.describe() == "Exception TimeoutError: boom"
    assert "error" not in result.model_dump()
