from __future__ import annotations

from ratechart.services.chart_sink import ChartSnapshotSink


def test_sink_starts_empty():
    sink = ChartSnapshotSink()

    assert sink.snapshot is None
    assert sink.error is None


def test_render_replaces_snapshot_and_clears_error():
    sink = ChartSnapshotSink()
    sink.render(["2024-03-08"], [3.26], "USD/BYN")
    sink.notify_failure("timed out")

    assert sink.snapshot.labels == ("2024-03-08",)
    assert sink.error == "timed out"

    sink.render(["2024-03-09", "2024-03-10"], [3.27, 3.28], "EUR/BYN")

    assert sink.snapshot.labels == ("2024-03-09", "2024-03-10")
    assert sink.snapshot.data == (3.27, 3.28)
    assert sink.snapshot.label == "EUR/BYN"
    assert sink.error is None


def test_failure_keeps_last_snapshot():
    sink = ChartSnapshotSink()
    sink.render(["2024-03-08"], [3.26], "USD/BYN")

    sink.notify_failure("Server error 503")

    assert sink.snapshot.label == "USD/BYN"
    assert sink.error == "Server error 503"
