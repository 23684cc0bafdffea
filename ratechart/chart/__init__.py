"""Chart blueprint exposing the last rendered series."""

from __future__ import annotations

from flask_smorest import Blueprint

blp = Blueprint("Chart", __name__, description="Rendered rate chart")

from . import routes  # noqa: E402,F401
