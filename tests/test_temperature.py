from __future__ import annotations

import logging

import pytest

from pyyolink.collaborators import ScaleConverter
from pyyolink.ingestion.temperature import is_fahrenheit_offset_encoded, normalize_temperature, to_celsius


def test_offset_encoded_value_is_decoded_from_fahrenheit() -> None:
    # -57 + 136 = 79 °F = 26.11 °C
    assert normalize_temperature(-57) == pytest.approx(26.111, abs=0.001)


def test_offset_encoded_value_converted_to_display_scale() -> None:
    assert normalize_temperature(-57, ScaleConverter("F")) == pytest.approx(79.0)
    assert normalize_temperature(-57, ScaleConverter("C")) == pytest.approx(26.111, abs=0.001)


def test_numeric_string_is_coerced() -> None:
    assert normalize_temperature("21.5") == 21.5
    assert normalize_temperature(" -57 ") == pytest.approx(26.111, abs=0.001)


@pytest.mark.parametrize("raw", ["abc", "", "--", True, float("nan"), {"value": 3}, [1]])
def test_unparseable_values_return_none(raw: object) -> None:
    assert normalize_temperature(raw) is None


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (-15.0, -15.0),  # cold but plausible °C
        (-20.0, -20.0),  # boundary: not strictly below -20
        (-110.0, -110.0),  # candidate 26 °F is below the plausible band
        (25.0, 25.0),
        (0, 0.0),
    ],
)
def test_valid_celsius_readings_are_not_corrected(raw: float, expected: float) -> None:
    assert normalize_temperature(raw) == expected


def test_correction_band_matches_predicate_across_range() -> None:
    value = -150.0
    while value <= 60.0:
        expected = value < -20 and 32 <= value + 136 <= 122
        assert is_fahrenheit_offset_encoded(value) is expected
        if expected:
            assert to_celsius(value) == pytest.approx((value + 136 - 32) * 5 / 9)
        else:
            assert to_celsius(value) == value
        value += 0.5


def test_band_edges() -> None:
    assert is_fahrenheit_offset_encoded(-104.0)  # 32 °F
    assert not is_fahrenheit_offset_encoded(-104.5)
    assert is_fahrenheit_offset_encoded(-20.5)
    assert not is_fahrenheit_offset_encoded(-14.0)


def test_converter_failure_falls_back_to_celsius(caplog: pytest.LogCaptureFixture) -> None:
    def _broken(_celsius: float) -> float:
        raise RuntimeError("scale unavailable")

    with caplog.at_level(logging.WARNING):
        assert normalize_temperature(-57, _broken) == pytest.approx(26.111, abs=0.001)
    assert "conversion failed" in caplog.text
