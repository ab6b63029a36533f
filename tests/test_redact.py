from __future__ import annotations

from pyyolink._redact import redact_for_log


def test_redact_for_log_redacts_credentials() -> None:
    payload = {
        "method": "MotionSensor.getState",
        "targetDevice": "d88b4c0100000001",
        "token": "NET-TOKEN",
        "client_secret": "secret",
        "nested": {"Access_Token": "AT", "password": "pw"},
    }

    redacted = redact_for_log(payload)
    assert redacted["method"] == "MotionSensor.getState"
    assert redacted["targetDevice"] == "d88b4c0100000001"
    assert redacted["token"] == "<redacted>"
    assert redacted["client_secret"] == "<redacted>"
    assert redacted["nested"]["Access_Token"] == "<redacted>"
    assert redacted["nested"]["password"] == "<redacted>"


def test_redact_for_log_masks_bearer_strings() -> None:
    redacted = redact_for_log({"headers": ["Bearer abc.def", "text/plain"]})
    assert redacted["headers"] == ["Bearer <redacted>", "text/plain"]


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_passes_scalars_and_summarizes_bytes() -> None:
    assert redact_for_log(None) is None
    assert redact_for_log(42) == 42
    assert redact_for_log(b"\x00\x01") == "<bytes:2b>"
