"""Application-wide error utilities and handlers."""

from __future__ import annotations

from typing import Any

from flask import Flask, jsonify

from ratechart.services.coordinator import InvalidSelectionError


class APIError(Exception):
    """Base class for API-level errors."""

    status_code: int = 400

    def __init__(
        self, message: str, *, status_code: int | None = None, payload: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload or {}


class ValidationError(APIError):
    """Error raised for validation failures."""

    status_code = 422


class UpstreamError(APIError):
    """Error raised when the rates API could not produce a series."""

    status_code = 502


DEFAULT_STATUS_MESSAGES: dict[int, str] = {
    400: "Request could not be processed.",
    404: "Resource not found.",
    422: "Submitted data is invalid.",
    502: "Upstream rates API unavailable.",
}


def register_error_handlers(app: Flask) -> None:
    """Attach error handlers to the Flask application."""

    @app.errorhandler(APIError)
    def handle_api_error(error: APIError):
        message = error.message or DEFAULT_STATUS_MESSAGES.get(error.status_code, "Request failed.")
        response: dict[str, Any] = {"message": message}
        response.update(error.payload)

        field = error.payload.get("field")
        if field and "field_errors" not in response:
            response["field_errors"] = {str(field): [message]}

        return jsonify(response), error.status_code

    @app.errorhandler(InvalidSelectionError)
    def handle_invalid_selection(error: InvalidSelectionError):
        return handle_api_error(ValidationError(str(error), payload={"field": error.field}))
