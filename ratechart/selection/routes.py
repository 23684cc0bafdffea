"""Route handlers for selection intents."""

from __future__ import annotations

from dataclasses import asdict

from flask import current_app
from flask.views import MethodView

from ratechart.errors import APIError, UpstreamError
from ratechart.schemas import (
    CurrencyChoiceRequestSchema,
    DateChangeRequestSchema,
    SelectionStateSchema,
)
from ratechart.services.coordinator import QueryOutcome, SelectionCoordinator

from . import blp


def _coordinator() -> SelectionCoordinator:
    coordinator = current_app.extensions.get("selection_coordinator")
    if coordinator is None:
        raise APIError("Selection coordinator unavailable.", status_code=503)
    return coordinator


def _state(coordinator: SelectionCoordinator, outcome: QueryOutcome | None) -> dict:
    if outcome is QueryOutcome.FAILED:
        failure = coordinator.last_failure
        message = failure.message if failure else "Rate query failed."
        raise UpstreamError(message, payload={"outcome": outcome.value})

    return {
        "selection": asdict(coordinator.selection),
        "currencies": coordinator.catalog.options(),
        "outcome": outcome.value if outcome is not None else None,
        "sequence": coordinator.issued_sequence,
    }


@blp.route("")
class SelectionState(MethodView):
    @blp.response(200, SelectionStateSchema())
    def get(self):
        coordinator = _coordinator()
        outcome = None if coordinator.initialized else coordinator.initialize()
        return _state(coordinator, outcome)


@blp.route("/currency")
class CurrencyChoice(MethodView):
    @blp.arguments(CurrencyChoiceRequestSchema)
    @blp.response(200, SelectionStateSchema())
    def post(self, data):
        coordinator = _coordinator()
        outcome = coordinator.on_currency_chosen(data["id"], data.get("name"))
        return _state(coordinator, outcome)


@blp.route("/start-date")
class StartDateChange(MethodView):
    @blp.arguments(DateChangeRequestSchema)
    @blp.response(200, SelectionStateSchema())
    def post(self, data):
        coordinator = _coordinator()
        outcome = coordinator.on_start_date_changed(data["value"])
        return _state(coordinator, outcome)


@blp.route("/end-date")
class EndDateChange(MethodView):
    @blp.arguments(DateChangeRequestSchema)
    @blp.response(200, SelectionStateSchema())
    def post(self, data):
        coordinator = _coordinator()
        outcome = coordinator.on_end_date_changed(data["value"])
        return _state(coordinator, outcome)
