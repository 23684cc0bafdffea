"""Service layer modules."""

from .chart_sink import ChartSnapshot, ChartSnapshotSink, RenderingSink
from .coordinator import (
    InvalidSelectionError,
    QueryFailure,
    QueryOutcome,
    QueryTicket,
    Selection,
    SelectionCoordinator,
    init_coordinator,
)
from .currency_catalog import CurrencyCatalog, CurrencyOption, parse_choices
