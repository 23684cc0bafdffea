"""Application configuration classes."""

from __future__ import annotations

import os

DEFAULT_CURRENCY_CHOICES = "145:USD,292:EUR,298:RUB,293:PLN,290:UAH,143:GBP,130:CHF,304:CNY"


def _get_env(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value is not None else default


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "ratechart"
    REQUEST_TIMEOUT_SECONDS = float(_get_env("REQUEST_TIMEOUT_SECONDS", "5"))
    RATES_API_BASE_URL = _get_env(
        "RATES_API_BASE_URL", "https://www.nbrb.by/API/ExRates/Rates/Dynamics"
    )
    RATES_API_MAX_RETRIES = int(_get_env("RATES_API_MAX_RETRIES", "1"))
    RATES_API_BACKOFF_SECONDS = float(_get_env("RATES_API_BACKOFF_SECONDS", "0.5"))
    DEFAULT_CURRENCY_ID = _get_env("DEFAULT_CURRENCY_ID", "145")
    DEFAULT_CURRENCY_NAME = _get_env("DEFAULT_CURRENCY_NAME", "USD")
    DEFAULT_WINDOW_DAYS = int(_get_env("DEFAULT_WINDOW_DAYS", "7"))
    CHART_QUOTE_LABEL = _get_env("CHART_QUOTE_LABEL", "BYN")
    CURRENCY_CHOICES = _get_env("CURRENCY_CHOICES", DEFAULT_CURRENCY_CHOICES)
    LOG_LEVEL = _get_env("LOG_LEVEL", "INFO")
    LOG_JSON_ENABLED = _get_env("LOG_JSON_ENABLED", "false").lower() == "true"
    LOG_FORMAT = _get_env("LOG_FORMAT", "%(asctime)s %(levelname)s [%(name)s] %(message)s")


class DevelopmentConfig(BaseConfig):
    """Configuration for local development."""

    DEBUG = True
    TESTING = False


class ProductionConfig(BaseConfig):
    """Configuration for production deployments."""

    DEBUG = False
    TESTING = False


class TestingConfig(BaseConfig):
    """Configuration for the test suite."""

    DEBUG = False
    TESTING = True


CONFIG_BY_ENV = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
}


def get_config(config_name: str | None = None) -> type[BaseConfig]:
    """Return the config class for the requested environment.

    Args:
        config_name: Optional explicit config identifier. If omitted, the
            APP_ENV environment variable is consulted.

    Raises:
        KeyError: If the requested configuration is not defined.
        ValueError: If the selected configuration holds unusable values.
    """

    env_candidate = config_name if config_name is not None else os.getenv("APP_ENV", "development")
    env_name = (env_candidate or "development").lower()
    try:
        config_cls = CONFIG_BY_ENV[env_name]
    except KeyError as exc:
        raise KeyError(f"Unknown APP_ENV '{env_name}'") from exc

    _validate_query_settings(config_cls)
    return config_cls


def _validate_query_settings(config_cls: type[BaseConfig]) -> None:
    if config_cls.REQUEST_TIMEOUT_SECONDS <= 0:
        raise ValueError(
            f"REQUEST_TIMEOUT_SECONDS must be positive, got {config_cls.REQUEST_TIMEOUT_SECONDS}"
        )
    if config_cls.RATES_API_MAX_RETRIES < 1:
        raise ValueError(
            f"RATES_API_MAX_RETRIES must be at least 1, got {config_cls.RATES_API_MAX_RETRIES}"
        )
    if config_cls.DEFAULT_WINDOW_DAYS < 0:
        raise ValueError(
            f"DEFAULT_WINDOW_DAYS cannot be negative, got {config_cls.DEFAULT_WINDOW_DAYS}"
        )
    if not config_cls.DEFAULT_CURRENCY_ID.strip():
        raise ValueError("DEFAULT_CURRENCY_ID must be provided")
