"""CLI for printing a rate series without the web adapter."""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from ratechart.providers import ProviderError, RateQueryEngine
from ratechart.providers.schemas import parse_date_bound


def _date_option(ctx, param, value):
    if value is None:
        return None
    try:
        parse_date_bound(value)
    except ValueError as exc:
        raise click.BadParameter("expected a YYYY-MM-DD date") from exc
    return value


@click.command("show-rates")
@click.option("--currency", default=None, help="Upstream currency id (defaults to DEFAULT_CURRENCY_ID)")
@click.option("--start", default=None, callback=_date_option, help="Start date, YYYY-MM-DD")
@click.option("--end", default=None, callback=_date_option, help="End date, YYYY-MM-DD")
@with_appcontext
def show_rates(currency: str | None, start: str | None, end: str | None) -> None:
    """Print the rate dynamics for a currency and date window."""

    config = current_app.config
    engine: RateQueryEngine = current_app.extensions.get("rate_engine") or RateQueryEngine.from_config(
        config
    )
    currency_id = currency or str(config.get("DEFAULT_CURRENCY_ID", "145"))
    start_date = start or engine.compute_date(-int(config.get("DEFAULT_WINDOW_DAYS", 7)))
    end_date = end or engine.compute_date(0)
    if start_date > end_date:
        raise click.BadParameter("start date must not be after end date", param_hint="--start")

    try:
        series = engine.fetch_series(currency_id, start_date, end_date)
    except ProviderError as exc:
        raise click.ClickException(str(exc)) from exc

    for day, value in zip(series.dates, series.values):
        click.echo(f"{day} {value}")
    click.echo(f"{len(series)} points for {currency_id} ({start_date}..{end_date})", err=True)
