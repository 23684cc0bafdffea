"""Errors raised while querying the upstream rates API."""

from __future__ import annotations


class ProviderError(Exception):
    """Raised when the upstream rates API cannot fulfill a request."""


class NetworkError(ProviderError):
    """Raised when the transport could not complete the request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(ProviderError):
    """Raised when the response body does not have the expected rate-point shape."""

    def __init__(self, message: str, *, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index
