"""Rendering sinks that receive finished rate series."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol


class RenderingSink(Protocol):
    def render(self, dates: Sequence[str], values: Sequence[float], series_label: str) -> None:
        ...

    def notify_failure(self, message: str) -> None:
        ...


@dataclass(frozen=True)
class ChartSnapshot:
    labels: tuple[str, ...]
    data: tuple[float, ...]
    label: str


class ChartSnapshotSink:
    """Keeps the most recently rendered chart and the latest failure message."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._snapshot: ChartSnapshot | None = None
        self._error: str | None = None

    def render(self, dates: Sequence[str], values: Sequence[float], series_label: str) -> None:
        with self._lock:
            self._snapshot = ChartSnapshot(
                labels=tuple(dates),
                data=tuple(values),
                label=series_label,
            )
            self._error = None

    def notify_failure(self, message: str) -> None:
        with self._lock:
            self._error = message

    @property
    def snapshot(self) -> ChartSnapshot | None:
        return self._snapshot

    @property
    def error(self) -> str | None:
        return self._error
