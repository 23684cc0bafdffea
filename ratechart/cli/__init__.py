"""CLI entry points."""

from __future__ import annotations

from flask import Flask

from .show_rates import show_rates


def register_cli(app: Flask) -> None:
    """Register CLI commands on the given Flask app."""

    app.cli.add_command(show_rates)
