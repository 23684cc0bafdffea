"""Application factory for the rate chart service."""

from __future__ import annotations

from flask import Flask
from flask_smorest import Api

from config import get_config
from .cli import register_cli


def create_app(config_name: str | None = None) -> Flask:
    """Application factory adhering to the Flask app factory pattern."""

    app = Flask(__name__)
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    _configure_logging(app)
    _configure_api(app)
    api = _register_extensions(app)
    _register_blueprints(app, api)
    _register_error_handlers(app)

    register_cli(app)
    return app


def _configure_logging(app: Flask) -> None:
    from .logging import init_request_logging, setup_logging

    if not app.config.get("TESTING"):
        setup_logging(app)
    init_request_logging(app)


def _configure_api(app: Flask) -> None:
    app.config.setdefault("API_TITLE", "Rate Chart API")
    app.config.setdefault("API_VERSION", "v1")
    app.config.setdefault("OPENAPI_VERSION", "3.0.3")
    app.config.setdefault("OPENAPI_URL_PREFIX", "/docs")
    app.config.setdefault("OPENAPI_SWAGGER_UI_PATH", "/")
    app.config.setdefault(
        "OPENAPI_SWAGGER_UI_URL",
        "https://cdn.jsdelivr.net/npm/swagger-ui-dist/",
    )


def _register_extensions(app: Flask) -> Api:
    """Build the rate engine and selection coordinator and attach them to the app."""

    from .services import init_coordinator

    init_coordinator(app)

    api = Api(app)
    app.extensions["smorest_api"] = api
    return api


def _register_blueprints(app: Flask, api: Api) -> None:
    """Register Flask blueprints."""

    from .chart import blp as chart_blp
    from .health import blp as health_blp
    from .selection import blp as selection_blp

    api.register_blueprint(health_blp, url_prefix="/health")
    api.register_blueprint(selection_blp, url_prefix="/selection")
    api.register_blueprint(chart_blp, url_prefix="/chart")


def _register_error_handlers(app: Flask) -> None:
    """Register global error handlers."""

    from .errors import register_error_handlers

    register_error_handlers(app)
