"""Entry point for running the rate chart Flask app."""

from __future__ import annotations

import os

from dotenv import load_dotenv

PROJECT_ROOT = os.path.abspath(os.path.dirname(__file__))


def _prepare_environment(project_root: str | None = None) -> None:
    """Load environment variables from a local .env file if present."""

    env_file = os.path.join(project_root or PROJECT_ROOT, ".env")
    if os.path.exists(env_file):
        load_dotenv(env_file)


def main() -> None:
    """Create the Flask app and run the development server."""

    _prepare_environment()

    # Config classes read the environment when ratechart is first imported.
    from ratechart import create_app

    config_name = os.getenv("APP_ENV")
    app = create_app(config_name=config_name)

    host = os.getenv("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_RUN_PORT", "5000"))
    debug = app.config.get("DEBUG", False)

    app.run(host=host, port=port, debug=debug, threaded=True)


if __name__ == "__main__":
    main()
