from __future__ import annotations

import copy
from typing import Any

import pytest

DEVICE_ID = "d88b4c0100000001"

_POLL_RESPONSE: dict[str, Any] = {
    "code": "000000",
    "time": 1709296245000,
    "msgid": 1709296245000,
    "method": "MotionSensor.getState",
    "desc": "Success",
    "data": {
        "online": True,
        "deviceId": DEVICE_ID,
        "state": {
            "alertInterval": 1,
            "battery": 4,
            "devTemperature": 23,
            "ledAlarm": True,
            "nomotionDelay": 1,
            "sensitivity": 2,
            "state": "normal",
            "version": "040a",
        },
        "reportAt": "2024-03-01T12:30:45.000Z",
        "stateChangedAt": 1709296200000,
        "loraInfo": {
            "devNetType": "A",
            "signal": -78,
            "gatewayId": "d88b4c1603000002",
            "gateways": 1,
        },
    },
}

_PUSH_REPORT: dict[str, Any] = {
    "event": "MotionSensor.Report",
    "time": 1709296245000,
    "msgid": "1709296245000",
    "deviceId": DEVICE_ID,
    "data": {
        "state": "normal",
        "battery": 3,
        "version": "0410",
        "devTemperature": 21,
        "ledAlarm": True,
        "alertInterval": 1,
        "nomotionDelay": 1,
        "sensitivity": 2,
        "loraInfo": {"devNetType": "A", "signal": -80, "gatewayId": "d88b4c1603000002", "gateways": 2},
        "stateChangedAt": 1709296200000,
    },
}


@pytest.fixture
def device_id() -> str:
    return DEVICE_ID


@pytest.fixture
def poll_response() -> dict[str, Any]:
    return copy.deepcopy(_POLL_RESPONSE)


@pytest.fixture
def push_report() -> dict[str, Any]:
    return copy.deepcopy(_PUSH_REPORT)
