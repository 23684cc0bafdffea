from __future__ import annotations

import responses
from responses import matchers

from tests.conftest import BASE_URL
from tests.fixtures import load_json


@responses.activate
def test_show_rates_prints_default_window(app):
    responses.add(
        responses.GET,
        f"{BASE_URL}/145",
        json=load_json("nbrb_dynamics_usd.json"),
        match=[
            matchers.query_param_matcher({"startDate": "2024-03-08", "endDate": "2024-03-15"})
        ],
    )

    result = app.test_cli_runner().invoke(args=["show-rates"])

    assert result.exit_code == 0, result.output
    assert "2024-03-08 3.2689" in result.output
    assert "2024-03-15 3.2633" in result.output


@responses.activate
def test_show_rates_reports_upstream_failure(app):
    responses.add(responses.GET, f"{BASE_URL}/298", status=500)

    result = app.test_cli_runner().invoke(
        args=["show-rates", "--currency", "298", "--start", "2024-03-01", "--end", "2024-03-02"]
    )

    assert result.exit_code == 1
    assert "Server error 500" in result.output


def test_show_rates_rejects_inverted_window(app):
    result = app.test_cli_runner().invoke(
        args=["show-rates", "--start", "2024-03-10", "--end", "2024-03-02"]
    )

    assert result.exit_code == 2


def test_show_rates_rejects_bad_date(app):
    result = app.test_cli_runner().invoke(args=["show-rates", "--start", "10/03/2024"])

    assert result.exit_code == 2
