"""HTTP transport for the YoLink Local Hub API."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping
from typing import Any

import aiohttp

from pyyolink._constants import API_ENDPOINT, TOKEN_ENDPOINT, TOKEN_EXPIRED_CODES
from pyyolink._redact import redact_for_log
from pyyolink.config import YoLinkConfig
from pyyolink.exceptions import YoLinkAuthenticationError, YoLinkConfigError, YoLinkTransportError
from pyyolink.ingestion.normalize import safe_float, safe_str
from pyyolink.models.requests import FetchRequest

_logger = logging.getLogger(__name__)

# Refresh the access token this many seconds before the hub expires it.
_TOKEN_EXPIRY_MARGIN_S = 60.0


class LocalHubTransport:
    """Client-credentials authenticated JSON transport to the Local Hub.

    Instances are callable with a :class:`FetchRequest`, so a transport can
    be handed to :class:`pyyolink.device.MotionSensor` as its fetcher.
    """

    def __init__(
        self,
        config: YoLinkConfig,
        http_session: aiohttp.ClientSession,
    ) -> None:
        self._config = config
        self._http = http_session
        self._access_token: str | None = None
        self._token_expires_at: float = 0.0

    @property
    def has_valid_token(self) -> bool:
        return self._access_token is not None and time.monotonic() < self._token_expires_at

    def invalidate_token(self) -> None:
        self._access_token = None
        self._token_expires_at = 0.0

    async def fetch_access_token(self) -> str:
        """Obtain a bearer token with the configured client credentials."""
        if not self._config.client_id or not self._config.client_secret:
            raise YoLinkConfigError("client_id and client_secret are required for Local Hub access")

        form = {
            "grant_type": "client_credentials",
            "client_id": self._config.client_id,
            "client_secret": self._config.client_secret,
        }
        body = await self._post(TOKEN_ENDPOINT, data=form)

        token = safe_str(body.get("access_token"))
        if not token:
            raise YoLinkAuthenticationError(
                f"Token request rejected: {body.get('msg') or body.get('desc') or body}",
                code=safe_str(body.get("code")) or "",
                endpoint=TOKEN_ENDPOINT,
            )
        expires_in = safe_float(body.get("expires_in")) or 3600.0
        self._access_token = token
        self._token_expires_at = time.monotonic() + max(expires_in - _TOKEN_EXPIRY_MARGIN_S, 0.0)
        return token

    async def _ensure_token(self) -> str:
        if self._access_token is not None and self.has_valid_token:
            return self._access_token
        return await self.fetch_access_token()

    async def call(self, request: FetchRequest) -> dict[str, Any]:
        """Send a device request, refreshing the access token once if the hub rejects it."""
        response = await self._call_once(request)
        if safe_str(response.get("code")) in TOKEN_EXPIRED_CODES:
            _logger.debug("Access token rejected (code=%s); refreshing", response.get("code"))
            self.invalidate_token()
            response = await self._call_once(request)
            code = safe_str(response.get("code"))
            if code in TOKEN_EXPIRED_CODES:
                raise YoLinkAuthenticationError(
                    "Access token rejected after refresh",
                    code=code or "",
                    endpoint=API_ENDPOINT,
                )
        return response

    async def __call__(self, request: FetchRequest) -> dict[str, Any]:
        return await self.call(request)

    async def _call_once(self, request: FetchRequest) -> dict[str, Any]:
        token = await self._ensure_token()
        return await self._post(
            API_ENDPOINT,
            json_body=request.to_payload(),
            headers={"Authorization": f"Bearer {token}"},
        )

    async def _post(
        self,
        endpoint: str,
        *,
        json_body: Mapping[str, Any] | None = None,
        data: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> dict[str, Any]:
        url = f"{self._config.hub_base_url}{endpoint}"
        _logger.debug("POST %s body=%s", url, redact_for_log(json_body if json_body is not None else data))

        timeout = aiohttp.ClientTimeout(total=self._config.request_timeout)
        try:
            async with self._http.post(
                url,
                json=json_body,
                data=data,
                headers=dict(headers or {}),
                timeout=timeout,
            ) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise YoLinkTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except YoLinkTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise YoLinkTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body_json = json.loads(text)
        except json.JSONDecodeError as exc:
            raise YoLinkTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

        if not isinstance(body_json, dict):
            raise YoLinkTransportError(
                f"Unexpected JSON payload from {endpoint}: {text[:64]}",
                endpoint=endpoint,
            )

        _logger.debug("Response %s: %s", endpoint, redact_for_log(body_json))
        return body_json
