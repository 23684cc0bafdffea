"""Selection blueprint turning HTTP calls into coordinator intents."""

from __future__ import annotations

from flask_smorest import Blueprint

blp = Blueprint("Selection", __name__, description="Currency and date window selection")

from . import routes  # noqa: E402,F401
