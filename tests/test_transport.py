from __future__ import annotations

import json
from typing import Any

import aiohttp
import pytest

from pyyolink._transport import LocalHubTransport
from pyyolink.config import YoLinkConfig
from pyyolink.device import MotionSensor
from pyyolink.exceptions import YoLinkAuthenticationError, YoLinkConfigError, YoLinkTransportError
from pyyolink.models.requests import FetchRequest

_TOKEN_OK = {"access_token": "AT-1", "token_type": "bearer", "expires_in": 7200}


def _config(**overrides: Any) -> YoLinkConfig:
    values: dict[str, Any] = {
        "device_id": "d88b4c0100000001",
        "token": "net-token",
        "hub_host": "10.0.0.5",
        "client_id": "client",
        "client_secret": "secret",
    }
    values.update(overrides)
    return YoLinkConfig(**values)


def _request() -> FetchRequest:
    return FetchRequest(method="MotionSensor.getState", target_device="d88b4c0100000001", token="net-token")


class _FakeResponse:
    def __init__(self, status: int, body: Any) -> None:
        self.status = status
        self._text = body if isinstance(body, str) else json.dumps(body)

    async def text(self) -> str:
        return self._text

    async def __aenter__(self) -> _FakeResponse:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None


class _FakeSession:
    """Replays canned ``(status, body)`` pairs and records every POST."""

    def __init__(self, *responses: tuple[int, Any] | BaseException) -> None:
        self._responses = list(responses)
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def post(self, url: str, **kwargs: Any) -> _FakeResponse:
        self.calls.append((url, kwargs))
        item = self._responses.pop(0)
        if isinstance(item, BaseException):
            raise item
        status, body = item
        return _FakeResponse(status, body)


@pytest.mark.asyncio
async def test_call_fetches_token_then_posts_request() -> None:
    session = _FakeSession((200, _TOKEN_OK), (200, {"code": "000000", "data": {}}))
    transport = LocalHubTransport(_config(), session)  # type: ignore[arg-type]

    response = await transport.call(_request())

    assert response["code"] == "000000"
    token_url, token_kwargs = session.calls[0]
    assert token_url == "http://10.0.0.5:1080/open/yolink/token"
    assert token_kwargs["data"]["grant_type"] == "client_credentials"
    assert token_kwargs["data"]["client_secret"] == "secret"

    api_url, api_kwargs = session.calls[1]
    assert api_url == "http://10.0.0.5:1080/open/yolink/v2/api"
    assert api_kwargs["json"] == {
        "method": "MotionSensor.getState",
        "targetDevice": "d88b4c0100000001",
        "token": "net-token",
    }
    assert api_kwargs["headers"]["Authorization"] == "Bearer AT-1"
    assert transport.has_valid_token


@pytest.mark.asyncio
async def test_access_token_is_reused() -> None:
    session = _FakeSession((200, _TOKEN_OK), (200, {"code": "000000"}), (200, {"code": "000000"}))
    transport = LocalHubTransport(_config(), session)  # type: ignore[arg-type]

    await transport.call(_request())
    await transport.call(_request())

    assert len(session.calls) == 3


@pytest.mark.asyncio
async def test_expired_access_token_is_refreshed_once() -> None:
    session = _FakeSession(
        (200, _TOKEN_OK),
        (200, {"code": "010104", "desc": "Token is expired"}),
        (200, {**_TOKEN_OK, "access_token": "AT-2"}),
        (200, {"code": "000000"}),
    )
    transport = LocalHubTransport(_config(), session)  # type: ignore[arg-type]

    response = await transport.call(_request())

    assert response["code"] == "000000"
    assert session.calls[3][1]["headers"]["Authorization"] == "Bearer AT-2"


@pytest.mark.asyncio
async def test_repeated_token_rejection_raises() -> None:
    session = _FakeSession(
        (200, _TOKEN_OK),
        (200, {"code": "010104"}),
        (200, _TOKEN_OK),
        (200, {"code": "020104"}),
    )
    transport = LocalHubTransport(_config(), session)  # type: ignore[arg-type]

    with pytest.raises(YoLinkAuthenticationError) as exc_info:
        await transport.call(_request())
    assert exc_info.value.code == "020104"


@pytest.mark.asyncio
async def test_rejected_client_credentials_raise() -> None:
    session = _FakeSession((200, {"code": "010000", "msg": "invalid client"}))
    transport = LocalHubTransport(_config(), session)  # type: ignore[arg-type]

    with pytest.raises(YoLinkAuthenticationError, match="invalid client"):
        await transport.fetch_access_token()


@pytest.mark.asyncio
async def test_missing_credentials_raise_config_error() -> None:
    transport = LocalHubTransport(_config(client_secret=None), _FakeSession())  # type: ignore[arg-type]
    with pytest.raises(YoLinkConfigError):
        await transport.call(_request())


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("reply", "status_code"),
    [
        ((500, "internal error"), 500),
        ((200, "<html>"), None),
        ((200, "[1, 2]"), None),
        (aiohttp.ClientConnectionError("refused"), None),
        (TimeoutError(), None),
    ],
)
async def test_http_failures_raise_transport_error(reply: Any, status_code: int | None) -> None:
    transport = LocalHubTransport(_config(), _FakeSession(reply))  # type: ignore[arg-type]

    with pytest.raises(YoLinkTransportError) as exc_info:
        await transport.fetch_access_token()
    assert exc_info.value.status_code == status_code
    assert exc_info.value.endpoint == "/open/yolink/token"


@pytest.mark.asyncio
async def test_transport_serves_as_device_fetcher(poll_response: dict[str, Any]) -> None:
    session = _FakeSession((200, _TOKEN_OK), (200, poll_response))
    config = _config(poll_delay=0.0)
    sensor = MotionSensor(config, fetcher=LocalHubTransport(config, session))  # type: ignore[arg-type]

    await sensor.fetch_state()

    assert sensor.state.last_response == "Poll Success"
    assert sensor.state.online is True


@pytest.mark.asyncio
async def test_transport_failure_surfaces_in_last_response() -> None:
    session = _FakeSession((503, "busy"))
    config = _config()
    sensor = MotionSensor(config, fetcher=LocalHubTransport(config, session))  # type: ignore[arg-type]

    await sensor.fetch_state()

    assert sensor.state.last_response is not None
    assert sensor.state.last_response.startswith("Exception YoLinkTransportError: HTTP 503")
