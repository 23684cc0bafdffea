"""Log formatting and request correlation for the rate chart service.

Rate queries and HTTP requests log through the standard library with a
fixed set of structured fields passed as ``extra=``. Both formatters know
that field set: the JSON formatter emits it as keys, the plain formatter
appends it as ``key=value`` pairs after the message.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from datetime import datetime, timezone
from typing import Any

from flask import g, has_request_context, request
from werkzeug.exceptions import HTTPException

REQUEST_ID_HEADER = "X-Request-ID"

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Structured fields in output order. Anything else passed as ``extra=`` is ignored.
LOG_FIELDS = (
    "event",
    "request_id",
    "sequence",
    "currency_id",
    "start_date",
    "end_date",
    "status",
    "duration_ms",
    "method",
    "route",
    "client_ip",
    "error",
)

QUIET_LOGGERS = ("urllib3", "werkzeug")


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    """Return the service fields present on ``record``, in ``LOG_FIELDS`` order."""

    fields: dict[str, Any] = {}
    for name in LOG_FIELDS:
        value = getattr(record, name, None)
        if value is not None:
            fields[name] = value if isinstance(value, (str, int, float, bool)) else str(value)
    return fields


class JSONLogFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message and service fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(record_fields(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"))


class QueryLogFormatter(logging.Formatter):
    """Plain text formatter that appends service fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = record_fields(record)
        if not fields:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in fields.items())
        head, sep, tail = line.partition("\n")
        return f"{head} {pairs}{sep}{tail}"


def setup_logging(app) -> None:
    """Install a single stream handler on the root logger from the app's LOG_* settings."""

    if app.extensions.get("ratechart.logging"):
        return

    level = logging.getLevelName(str(app.config.get("LOG_LEVEL") or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)
    if app.config.get("LOG_JSON_ENABLED"):
        handler.setFormatter(JSONLogFormatter())
    else:
        handler.setFormatter(QueryLogFormatter(app.config.get("LOG_FORMAT") or DEFAULT_LOG_FORMAT))

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        quiet = logging.getLogger(name)
        quiet.handlers = []
        quiet.setLevel(max(level, logging.WARNING))
    app.logger.handlers = []
    app.logger.setLevel(level)
    app.logger.propagate = True

    app.extensions["ratechart.logging"] = True


def init_request_logging(app) -> None:
    """Tag each request with a correlation id and log one line when it ends."""

    if app.extensions.get("ratechart.request_logging"):
        return

    @app.before_request
    def _begin_request():
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        g.request_started = time.perf_counter()
        g.request_logged = False

    @app.after_request
    def _after_request(response):
        if getattr(g, "request_id", None):
            response.headers.setdefault(REQUEST_ID_HEADER, g.request_id)
        _log_request_end(app, response.status_code)
        return response

    @app.teardown_request
    def _teardown_request(exc: BaseException | None):
        if exc is not None:
            status = exc.code if isinstance(exc, HTTPException) and exc.code else 500
            _log_request_end(app, status, error=exc)

    app.extensions["ratechart.request_logging"] = True


def query_log_extra(
    *,
    currency_id: str,
    start_date: str,
    end_date: str,
    sequence: int,
    status: str,
    duration_ms: float | None,
    error: str | None = None,
) -> dict[str, Any]:
    """Structured fields attached to every rate query log line."""

    return _compact(
        event="rates.query",
        currency_id=currency_id,
        start_date=start_date,
        end_date=end_date,
        sequence=sequence,
        status=status,
        duration_ms=_round_ms(duration_ms),
        request_id=getattr(g, "request_id", None) if has_request_context() else None,
        error=error,
    )


def _log_request_end(app, status: int, error: BaseException | None = None) -> None:
    # after_request and teardown can both fire for one request; log it once.
    if getattr(g, "request_logged", True):
        return
    g.request_logged = True

    started = getattr(g, "request_started", None)
    extra = _compact(
        event="request.failed" if error is not None else "request.completed",
        request_id=getattr(g, "request_id", None),
        method=request.method,
        route=request.url_rule.rule if request.url_rule else request.path,
        status=status,
        duration_ms=_round_ms((time.perf_counter() - started) * 1000 if started else None),
        client_ip=request.remote_addr,
        error=str(error) if error is not None else None,
    )
    if error is not None:
        app.logger.error("Request failed", extra=extra)
    else:
        app.logger.info("Request handled", extra=extra)


def _round_ms(value: float | None) -> float | None:
    return round(value, 3) if value is not None else None


def _compact(**fields: Any) -> dict[str, Any]:
    return {key: value for key, value in fields.items() if value is not None and value != ""}
