"""Shared HTTP client wrapper with timeout, retries, backoff, and jitter."""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests
from requests import Response, Session
from requests.exceptions import JSONDecodeError, RequestException

logger = logging.getLogger(__name__)


class HTTPClientError(RuntimeError):
    """Raised when the HTTP client cannot satisfy a request."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResponseDecodeError(HTTPClientError):
    """Raised when the server answered but the body is not valid JSON."""


@dataclass(frozen=True)
class HTTPClientConfig:
    """Configuration for the shared HTTP client."""

    base_url: str
    timeout: float = 5.0
    max_retries: int = 1
    backoff_seconds: float = 0.5
    backoff_jitter: float = 0.2


class HTTPClient:
    """Small HTTP client that applies timeout and retry/backoff/jitter policies."""

    def __init__(
        self,
        config: HTTPClientConfig,
        session: Optional[Session] = None,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        return self._config.base_url.rstrip("/")

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        url = self.build_url(path)
        attempt = 0
        last_error: Optional[Exception] = None
        last_status: Optional[int] = None

        while attempt < self._config.max_retries:
            attempt += 1
            try:
                response = self._session.get(url, params=params, timeout=self._config.timeout)
                return self._handle_response(response)
            except ResponseDecodeError:
                raise
            except (RequestException, HTTPClientError) as exc:
                last_error = exc
                last_status = getattr(exc, "status_code", None)
                if attempt >= self._config.max_retries:
                    break
                sleep_for = self._compute_backoff(attempt)
                logger.warning(
                    "HTTP request to %s failed (attempt %s/%s): %s. Retrying in %.2fs.",
                    url,
                    attempt,
                    self._config.max_retries,
                    exc,
                    sleep_for,
                )
                time.sleep(sleep_for)

        raise HTTPClientError(
            f"Failed to fetch {url}: {last_error}", status_code=last_status
        ) from last_error

    def build_url(self, path: str) -> str:
        suffix = path.lstrip("/")
        if not suffix:
            return self.base_url
        return f"{self.base_url}/{suffix}"

    def _compute_backoff(self, attempt: int) -> float:
        base = self._config.backoff_seconds * (2 ** (attempt - 1))
        jitter = random.uniform(-self._config.backoff_jitter, self._config.backoff_jitter)
        delay = max(base + jitter, 0.0)
        return delay

    @staticmethod
    def _handle_response(response: Response) -> Any:
        status = response.status_code
        if status >= 500:
            raise HTTPClientError(f"Server error {status}", status_code=status)
        if status >= 400:
            raise HTTPClientError(f"Client error {status}: {response.text}", status_code=status)

        try:
            payload = response.json()
        except (JSONDecodeError, ValueError) as exc:
            raise ResponseDecodeError("Invalid JSON response", status_code=status) from exc

        return payload
