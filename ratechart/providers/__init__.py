"""Rate query engine and data structures for the rate dynamics API."""

from .base import MalformedResponseError, NetworkError, ProviderError
from .engine import RateQueryEngine
from .http_client import HTTPClient, HTTPClientConfig, HTTPClientError
from .schemas import RateEndpoint, RateSeries, RawRatePointSchema

__all__ = [
    "HTTPClient",
    "HTTPClientConfig",
    "HTTPClientError",
    "MalformedResponseError",
    "NetworkError",
    "ProviderError",
    "RateEndpoint",
    "RateQueryEngine",
    "RateSeries",
    "RawRatePointSchema",
]
