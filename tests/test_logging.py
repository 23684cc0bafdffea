from __future__ import annotations

import json
import logging
from contextlib import contextmanager

import pytest
from flask import Flask

from ratechart.logging import (
    REQUEST_ID_HEADER,
    JSONLogFormatter,
    QueryLogFormatter,
    init_request_logging,
    query_log_extra,
    setup_logging,
)


class _MemoryHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@contextmanager
def isolate_logging():
    root = logging.getLogger()
    previous_handlers = root.handlers[:]
    previous_level = root.level
    try:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        yield root
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in previous_handlers:
            root.addHandler(handler)
        root.setLevel(previous_level)


def _record(msg="Rendered %s points", args=(8,), **fields):
    record = logging.LogRecord(
        name="ratechart.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=args,
        exc_info=None,
    )
    for key, value in fields.items():
        setattr(record, key, value)
    return record


def test_json_log_formatter_keeps_only_service_fields():
    record = _record(currency_id="145", sequence=3, status="success", color="blue")

    payload = json.loads(JSONLogFormatter().format(record))

    assert payload["message"] == "Rendered 8 points"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "ratechart.test"
    assert "timestamp" in payload
    assert payload["currency_id"] == "145"
    assert payload["sequence"] == 3
    assert "color" not in payload
    assert "lineno" not in payload


def test_query_log_formatter_appends_fields_in_order():
    formatter = QueryLogFormatter("%(levelname)s %(message)s")
    record = _record(status="stale", currency_id="292", sequence=4, event="rates.query")

    line = formatter.format(record)

    assert line == "INFO Rendered 8 points event=rates.query sequence=4 currency_id=292 status=stale"


def test_query_log_formatter_leaves_plain_records_alone():
    formatter = QueryLogFormatter("%(message)s")

    assert formatter.format(_record("ready", ())) == "ready"


def test_setup_logging_enables_json_formatter_when_configured():
    app = Flask(__name__)
    app.config["LOG_JSON_ENABLED"] = True
    app.config["LOG_LEVEL"] = "DEBUG"

    with isolate_logging():
        setup_logging(app)
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert app.logger.level == logging.DEBUG
        assert isinstance(root.handlers[0].formatter, JSONLogFormatter)


def test_setup_logging_uses_plain_formatter_by_default():
    app = Flask(__name__)
    app.config["LOG_JSON_ENABLED"] = False
    app.config["LOG_LEVEL"] = "WARNING"
    app.config["LOG_FORMAT"] = "%(levelname)s:%(message)s"

    with isolate_logging():
        setup_logging(app)
        root = logging.getLogger()
        assert root.level == logging.WARNING
        handler = root.handlers[0]
        assert isinstance(handler.formatter, QueryLogFormatter)
        assert handler.formatter._style._fmt == "%(levelname)s:%(message)s"


def test_request_logging_propagates_request_id():
    app = Flask(__name__)
    app.config["TESTING"] = True

    @app.route("/ok")
    def ok():  # pragma: no cover - invoked via test client
        return "ok", 200

    with isolate_logging():
        init_request_logging(app)
        handler = _MemoryHandler()
        handler.setLevel(logging.INFO)
        logging.getLogger().addHandler(handler)
        app.logger.setLevel(logging.INFO)
        response = app.test_client().get("/ok", headers={REQUEST_ID_HEADER: "req-42"})

    assert response.headers[REQUEST_ID_HEADER] == "req-42"
    records = [record for record in handler.records if record.getMessage() == "Request handled"]
    assert records
    assert records[0].request_id == "req-42"
    assert records[0].status == 200
    assert records[0].event == "request.completed"
    assert records[0].route == "/ok"


def _request_records(handler):
    return [record for record in handler.records if getattr(record, "event", "").startswith("request.")]


def _capture(app):
    handler = _MemoryHandler()
    handler.setLevel(logging.INFO)
    logging.getLogger().addHandler(handler)
    app.logger.setLevel(logging.INFO)
    return handler


def test_unhandled_error_is_logged_once():
    app = Flask(__name__)

    @app.route("/boom")
    def boom():
        raise RuntimeError("kaboom")

    with isolate_logging():
        init_request_logging(app)
        handler = _capture(app)
        response = app.test_client().get("/boom")

    assert response.status_code == 500
    records = _request_records(handler)
    assert len(records) == 1
    assert records[0].status == 500


def test_propagated_error_is_logged_as_failed_request():
    app = Flask(__name__)
    app.config["TESTING"] = True

    @app.route("/boom")
    def boom():
        raise RuntimeError("kaboom")

    with isolate_logging():
        init_request_logging(app)
        handler = _capture(app)
        with pytest.raises(RuntimeError):
            app.test_client().get("/boom")

    records = _request_records(handler)
    assert [record.event for record in records] == ["request.failed"]
    assert records[0].status == 500
    assert records[0].error == "kaboom"
    assert records[0].levelno == logging.ERROR


def test_query_log_extra_drops_empty_fields():
    extra = query_log_extra(
        currency_id="145",
        start_date="2024-03-08",
        end_date="2024-03-15",
        sequence=3,
        status="success",
        duration_ms=12.34567,
    )

    assert extra == {
        "event": "rates.query",
        "currency_id": "145",
        "start_date": "2024-03-08",
        "end_date": "2024-03-15",
        "sequence": 3,
        "status": "success",
        "duration_ms": 12.346,
    }


def test_query_log_extra_carries_request_id_inside_requests():
    app = Flask(__name__)

    with isolate_logging():
        init_request_logging(app)

        @app.route("/q")
        def query():
            return query_log_extra(
                currency_id="145",
                start_date="2024-03-08",
                end_date="2024-03-15",
                sequence=1,
                status="error",
                duration_ms=None,
                error="timed out",
            )

        payload = app.test_client().get("/q", headers={REQUEST_ID_HEADER: "abc"}).get_json()

    assert payload["request_id"] == "abc"
    assert payload["error"] == "timed out"
    assert "duration_ms" not in payload
