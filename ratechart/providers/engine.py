"""Rate query engine for the NBRB rate dynamics API."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import date, timedelta
from typing import Any

from marshmallow import ValidationError

from .base import MalformedResponseError, NetworkError
from .http_client import HTTPClient, HTTPClientConfig, HTTPClientError, ResponseDecodeError
from .schemas import RateEndpoint, RateSeries, RawRatePointSchema

logger = logging.getLogger(__name__)

Clock = Callable[[], date]

_point_schema = RawRatePointSchema()


class RateQueryEngine:
    """Build date-bounded requests and normalize responses into a RateSeries."""

    def __init__(self, client: HTTPClient, clock: Clock = date.today) -> None:
        self._client = client
        self._clock = clock

    @classmethod
    def from_config(cls, config: Mapping[str, Any], clock: Clock = date.today) -> RateQueryEngine:
        client_config = HTTPClientConfig(
            base_url=str(config.get("RATES_API_BASE_URL")),
            timeout=float(config.get("REQUEST_TIMEOUT_SECONDS", 5)),
            max_retries=int(config.get("RATES_API_MAX_RETRIES", 1)),
            backoff_seconds=float(config.get("RATES_API_BACKOFF_SECONDS", 0.5)),
        )
        return cls(HTTPClient(client_config), clock=clock)

    def compute_date(self, offset_days: int) -> str:
        """Return today's local date shifted by ``offset_days`` as ``YYYY-MM-DD``."""

        return (self._clock() + timedelta(days=offset_days)).isoformat()

    def build_endpoint(self, currency_id: str, start_date: str, end_date: str) -> RateEndpoint:
        return RateEndpoint(
            base_url=self._client.base_url,
            currency_id=currency_id,
            start_date=start_date,
            end_date=end_date,
        )

    def fetch_series(self, currency_id: str, start_date: str, end_date: str) -> RateSeries:
        """Fetch the rate dynamics for a currency between two dates (inclusive).

        Raises:
            NetworkError: The request could not be completed.
            MalformedResponseError: The body is not a list of rate records.
        """

        endpoint = self.build_endpoint(currency_id, start_date, end_date)
        try:
            payload = self._client.get(endpoint.path, params=endpoint.params)
        except ResponseDecodeError as exc:
            raise MalformedResponseError(f"Response from {endpoint.url} is not JSON") from exc
        except HTTPClientError as exc:
            raise NetworkError(str(exc), status_code=exc.status_code) from exc

        series = self.normalize(payload)
        logger.debug("Fetched %s points from %s", len(series), endpoint.url)
        return series

    @staticmethod
    def normalize(payload: Any) -> RateSeries:
        """Project a raw response body into a RateSeries, preserving order."""

        if not isinstance(payload, list):
            raise MalformedResponseError(
                f"Expected a JSON array of rate records, got {type(payload).__name__}"
            )

        dates: list[str] = []
        values: list[float] = []
        for index, record in enumerate(payload):
            if not isinstance(record, dict):
                raise MalformedResponseError(
                    f"Rate record {index} is not an object", index=index
                )
            try:
                point = _point_schema.load(record)
            except ValidationError as exc:
                raise MalformedResponseError(
                    f"Rate record {index} is invalid: {exc.messages}", index=index
                ) from exc
            dates.append(point["timestamp"][:10])
            values.append(point["rate"])

        return RateSeries(dates=dates, values=values)
