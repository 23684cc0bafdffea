"""Route handlers for the rendered chart."""

from __future__ import annotations

from flask import current_app
from flask.views import MethodView

from ratechart.errors import APIError
from ratechart.schemas import ChartSchema
from ratechart.services.chart_sink import ChartSnapshotSink
from ratechart.services.coordinator import SelectionCoordinator

from . import blp


@blp.route("")
class Chart(MethodView):
    @blp.response(200, ChartSchema())
    def get(self):
        coordinator: SelectionCoordinator | None = current_app.extensions.get(
            "selection_coordinator"
        )
        sink: ChartSnapshotSink | None = current_app.extensions.get("chart_sink")
        if coordinator is None or sink is None:
            raise APIError("Chart unavailable.", status_code=503)

        coordinator.ensure_initialized()
        snapshot = sink.snapshot
        rendered = coordinator.last_rendered
        if snapshot is None:
            return {
                "status": "empty",
                "labels": [],
                "data": [],
                "label": None,
                "sequence": None,
                "error": sink.error,
            }

        return {
            "status": "ok",
            "labels": list(snapshot.labels),
            "data": list(snapshot.data),
            "label": snapshot.label,
            "sequence": rendered.sequence if rendered is not None else None,
            "error": sink.error,
        }
