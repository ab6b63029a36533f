"""Custom exception hierarchy for pyyolink."""

from __future__ import annotations


class YoLinkError(Exception):
    """Base exception for all pyyolink errors."""


class YoLinkConfigError(YoLinkError):
    """Invalid or missing configuration."""


class YoLinkTransportError(YoLinkError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class YoLinkApiError(YoLinkError):
    """Local Hub returned a non-success code (application-level error)."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.endpoint = endpoint
        super().__init__(message)


class YoLinkAuthenticationError(YoLinkApiError):
    """Access token request rejected or token expired.

    Raised when the hub refuses the client credentials, or when a call
    keeps failing with a token-expired code after one refresh.
    """
