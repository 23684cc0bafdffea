"""Selection coordinator keeping currency and date window consistent."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from time import perf_counter
from typing import Any

from ratechart.logging import query_log_extra
from ratechart.providers import ProviderError, RateQueryEngine, RateSeries
from ratechart.providers.schemas import parse_date_bound

from .chart_sink import RenderingSink
from .currency_catalog import CurrencyCatalog

logger = logging.getLogger(__name__)


class InvalidSelectionError(ValueError):
    """Raised when an intent carries a value that cannot become part of the selection."""

    def __init__(self, message: str, *, field: str) -> None:
        super().__init__(message)
        self.field = field


class QueryOutcome(str, Enum):
    RENDERED = "rendered"
    STALE = "stale"
    FAILED = "failed"


@dataclass
class Selection:
    """Current currency and date window, plus the bounds offered to the date inputs."""

    currency_id: str
    currency_name: str
    start_date: str
    end_date: str
    start_max: str | None = None
    end_min: str | None = None
    end_max: str | None = None


@dataclass(frozen=True)
class QueryTicket:
    """Snapshot of the selection a query was issued for."""

    sequence: int
    currency_id: str
    currency_name: str
    start_date: str
    end_date: str


@dataclass(frozen=True)
class QueryFailure:
    ticket: QueryTicket
    message: str
    error_type: str


class SelectionCoordinator:
    """Apply user intents to the selection and forward fresh series to a sink.

    Each intent issues a ticket with a monotonically increasing sequence
    number before fetching. Only the result of the latest issued ticket
    reaches the sink; older results that complete late are dropped.
    """

    def __init__(
        self,
        engine: RateQueryEngine,
        sink: RenderingSink,
        catalog: CurrencyCatalog | None = None,
        *,
        default_currency_id: str = "145",
        default_currency_name: str | None = None,
        window_days: int = 7,
        quote_label: str = "BYN",
    ) -> None:
        self._engine = engine
        self._sink = sink
        self._catalog = catalog or CurrencyCatalog()
        self._default_currency_id = default_currency_id
        self._catalog.register(default_currency_id, default_currency_name)
        self._window_days = window_days
        self._quote_label = quote_label
        self._lock = threading.Lock()
        self._selection: Selection | None = None
        self._issued = 0
        self._last_rendered: QueryTicket | None = None
        self._last_failure: QueryFailure | None = None

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        engine: RateQueryEngine,
        sink: RenderingSink,
        catalog: CurrencyCatalog | None = None,
    ) -> SelectionCoordinator:
        return cls(
            engine,
            sink,
            catalog,
            default_currency_id=str(config.get("DEFAULT_CURRENCY_ID", "145")),
            default_currency_name=config.get("DEFAULT_CURRENCY_NAME") or None,
            window_days=int(config.get("DEFAULT_WINDOW_DAYS", 7)),
            quote_label=str(config.get("CHART_QUOTE_LABEL", "BYN")),
        )

    @property
    def catalog(self) -> CurrencyCatalog:
        return self._catalog

    @property
    def initialized(self) -> bool:
        return self._issued > 0

    @property
    def selection(self) -> Selection:
        with self._lock:
            return replace(self._current())

    @property
    def last_rendered(self) -> QueryTicket | None:
        return self._last_rendered

    @property
    def last_failure(self) -> QueryFailure | None:
        return self._last_failure

    @property
    def issued_sequence(self) -> int:
        return self._issued

    def initialize(self) -> QueryOutcome:
        """Reset to the default currency and window, then query and render."""

        with self._lock:
            self._selection = self._default_selection()
            ticket = self._issue()
        return self._run(ticket)

    def ensure_initialized(self) -> None:
        if not self.initialized:
            self.initialize()

    def on_currency_chosen(self, currency_id: str, display_name: str | None = None) -> QueryOutcome:
        """Switch to a configured currency, optionally labeled with ``display_name``.

        The label only applies to this selection; the catalog keeps its
        configured names.
        """

        currency_id = str(currency_id).strip()
        if not currency_id:
            raise InvalidSelectionError("Currency id is required.", field="id")
        if currency_id not in self._catalog:
            raise InvalidSelectionError(f"Unknown currency id '{currency_id}'.", field="id")

        with self._lock:
            selection = self._current()
            self._catalog.activate(currency_id)
            selection.currency_id = currency_id
            selection.currency_name = display_name or self._catalog.display_name(currency_id)
            ticket = self._issue()
        return self._run(ticket)

    def on_start_date_changed(self, new_start: str) -> QueryOutcome:
        start = self._parse(new_start, field="start_date")

        with self._lock:
            selection = self._current()
            self._check_ceiling(start, selection, field="start_date")
            selection.start_date = new_start
            if start > parse_date_bound(selection.end_date):
                selection.end_date = new_start
            self._sync_bounds(selection)
            ticket = self._issue()
        return self._run(ticket)

    def on_end_date_changed(self, new_end: str) -> QueryOutcome:
        end = self._parse(new_end, field="end_date")

        with self._lock:
            selection = self._current()
            self._check_ceiling(end, selection, field="end_date")
            selection.end_date = new_end
            if end < parse_date_bound(selection.start_date):
                selection.start_date = new_end
            self._sync_bounds(selection)
            ticket = self._issue()
        return self._run(ticket)

    def _default_selection(self) -> Selection:
        self._catalog.activate(self._default_currency_id)
        today = self._engine.compute_date(0)
        return Selection(
            currency_id=self._default_currency_id,
            currency_name=self._catalog.display_name(self._default_currency_id),
            start_date=self._engine.compute_date(-self._window_days),
            end_date=today,
            start_max=today,
            end_max=today,
        )

    def _current(self) -> Selection:
        if self._selection is None:
            self._selection = self._default_selection()
        return self._selection

    @staticmethod
    def _sync_bounds(selection: Selection) -> None:
        # Each date input is bounded by the other's current value.
        selection.end_min = selection.start_date
        selection.start_max = selection.end_date

    @staticmethod
    def _check_ceiling(value: date, selection: Selection, *, field: str) -> None:
        if selection.end_max is not None and value > parse_date_bound(selection.end_max):
            raise InvalidSelectionError(
                f"'{field}' cannot be later than {selection.end_max}.", field=field
            )

    def _issue(self) -> QueryTicket:
        self._issued += 1
        selection = self._current()
        return QueryTicket(
            sequence=self._issued,
            currency_id=selection.currency_id,
            currency_name=selection.currency_name,
            start_date=selection.start_date,
            end_date=selection.end_date,
        )

    def _run(self, ticket: QueryTicket) -> QueryOutcome:
        start = perf_counter()
        try:
            series = self._engine.fetch_series(ticket.currency_id, ticket.start_date, ticket.end_date)
        except ProviderError as exc:
            return self._fail(ticket, exc, (perf_counter() - start) * 1000)
        return self._deliver(ticket, series, (perf_counter() - start) * 1000)

    def _deliver(self, ticket: QueryTicket, series: RateSeries, duration: float) -> QueryOutcome:
        with self._lock:
            if ticket.sequence != self._issued:
                logger.debug(
                    "Discarding superseded rate query #%s (latest #%s)",
                    ticket.sequence,
                    self._issued,
                    extra=self._log_extra(ticket, "stale", duration),
                )
                return QueryOutcome.STALE

            self._sink.render(series.dates, series.values, self._label(ticket))
            self._last_rendered = ticket
            self._last_failure = None

        logger.info(
            "Rendered %s rate points for %s",
            len(series),
            ticket.currency_name,
            extra=self._log_extra(ticket, "success", duration),
        )
        return QueryOutcome.RENDERED

    def _fail(self, ticket: QueryTicket, exc: ProviderError, duration: float) -> QueryOutcome:
        with self._lock:
            if ticket.sequence != self._issued:
                logger.debug(
                    "Ignoring failure of superseded rate query #%s: %s",
                    ticket.sequence,
                    exc,
                    extra=self._log_extra(ticket, "stale", duration, error=str(exc)),
                )
                return QueryOutcome.STALE

            self._last_failure = QueryFailure(
                ticket=ticket, message=str(exc), error_type=type(exc).__name__
            )
            self._sink.notify_failure(str(exc))

        logger.warning(
            "Rate query for %s failed: %s",
            ticket.currency_name,
            exc,
            extra=self._log_extra(ticket, "error", duration, error=str(exc)),
        )
        return QueryOutcome.FAILED

    def _label(self, ticket: QueryTicket) -> str:
        return f"{ticket.currency_name}/{self._quote_label}"

    @staticmethod
    def _parse(value: str, *, field: str):
        try:
            return parse_date_bound(value)
        except (TypeError, ValueError) as exc:
            raise InvalidSelectionError(
                f"'{field}' must be a valid YYYY-MM-DD date, got {value!r}.", field=field
            ) from exc

    @staticmethod
    def _log_extra(
        ticket: QueryTicket, status: str, duration: float, error: str | None = None
    ) -> dict[str, Any]:
        return query_log_extra(
            currency_id=ticket.currency_id,
            start_date=ticket.start_date,
            end_date=ticket.end_date,
            sequence=ticket.sequence,
            status=status,
            duration_ms=duration,
            error=error,
        )


def init_coordinator(app) -> SelectionCoordinator:
    """Create the engine, catalog, sink and coordinator and store them on the app."""

    from .chart_sink import ChartSnapshotSink

    engine = app.extensions.get("rate_engine")
    if engine is None:
        engine = RateQueryEngine.from_config(app.config)
        app.extensions["rate_engine"] = engine

    catalog = CurrencyCatalog.from_choices(app.config.get("CURRENCY_CHOICES", ""))
    sink = ChartSnapshotSink()
    coordinator = SelectionCoordinator.from_config(app.config, engine, sink, catalog)

    app.extensions["currency_catalog"] = catalog
    app.extensions["chart_sink"] = sink
    app.extensions["selection_coordinator"] = coordinator
    return coordinator
