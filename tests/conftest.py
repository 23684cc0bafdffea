"""Shared pytest fixtures."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from datetime import date
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from ratechart import create_app  # noqa: E402
from ratechart.providers import RateQueryEngine  # noqa: E402
from ratechart.services import init_coordinator  # noqa: E402

BASE_URL = "https://www.nbrb.by/API/ExRates/Rates/Dynamics"
TODAY = date(2024, 3, 15)


@pytest.fixture()
def app() -> Iterator:
    """Flask application pinned to a fixed clock, with a fresh coordinator per test."""

    flask_app = create_app("testing")
    flask_app.config["RATES_API_BASE_URL"] = BASE_URL
    flask_app.extensions["rate_engine"] = RateQueryEngine.from_config(
        flask_app.config, clock=lambda: TODAY
    )
    init_coordinator(flask_app)

    yield flask_app


@pytest.fixture()
def client(app):
    """Provide a Flask test client."""

    with app.test_client() as client:
        yield client
