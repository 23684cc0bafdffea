from __future__ import annotations

import pytest

import config


def test_get_config_defaults_to_development(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)

    assert config.get_config() is config.DevelopmentConfig


def test_get_config_reads_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "Production")

    assert config.get_config() is config.ProductionConfig


def test_get_config_rejects_unknown_env():
    with pytest.raises(KeyError):
        config.get_config("staging")


def test_default_query_settings():
    cfg = config.get_config("testing")

    assert cfg.TESTING is True
    assert cfg.RATES_API_BASE_URL == "https://www.nbrb.by/API/ExRates/Rates/Dynamics"
    assert cfg.RATES_API_MAX_RETRIES == 1
    assert cfg.DEFAULT_CURRENCY_ID == "145"
    assert cfg.DEFAULT_WINDOW_DAYS == 7


@pytest.mark.parametrize(
    ("attribute", "value"),
    [
        ("REQUEST_TIMEOUT_SECONDS", 0),
        ("RATES_API_MAX_RETRIES", 0),
        ("DEFAULT_WINDOW_DAYS", -1),
        ("DEFAULT_CURRENCY_ID", " "),
    ],
)
def test_get_config_validates_query_settings(monkeypatch, attribute, value):
    monkeypatch.setattr(config.TestingConfig, attribute, value)

    with pytest.raises(ValueError):
        config.get_config("testing")
