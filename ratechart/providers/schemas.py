"""Value types and payload schemas for the rate dynamics API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Tuple
from urllib.parse import quote, urlencode

from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load, validates

DATE_FORMAT_LENGTH = 10


def parse_date_bound(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string, raising ValueError for anything else."""

    if not isinstance(value, str) or len(value) != DATE_FORMAT_LENGTH:
        raise ValueError(f"Expected a YYYY-MM-DD date, got {value!r}")
    return date.fromisoformat(value)


class RawRatePointSchema(Schema):
    """One record of the rate dynamics response.

    Only ``Cur_OfficialRate`` and ``Date`` are significant; the upstream also
    sends ``Cur_ID`` and is free to add fields, so unknown keys are ignored.
    """

    class Meta:
        unknown = EXCLUDE

    rate = fields.Float(required=True, data_key="Cur_OfficialRate", allow_nan=False)
    timestamp = fields.String(required=True, data_key="Date")

    @pre_load
    def _reject_textual_rates(self, data: Any, **kwargs) -> Any:
        # Float() would happily coerce "2.5"; the API sends JSON numbers.
        if isinstance(data, dict) and isinstance(data.get("Cur_OfficialRate"), str):
            raise ValidationError("Rate must be a number.", field_name="Cur_OfficialRate")
        return data

    @validates("timestamp")
    def _validate_timestamp(self, value: str, **kwargs) -> None:
        try:
            parse_date_bound(value[:DATE_FORMAT_LENGTH])
        except ValueError as exc:
            raise ValidationError("Timestamp must start with a YYYY-MM-DD date.") from exc


@dataclass(frozen=True)
class RateEndpoint:
    """Structured request target for one currency and date window."""

    base_url: str
    currency_id: str
    start_date: str
    end_date: str

    @property
    def path(self) -> str:
        return quote(str(self.currency_id), safe="")

    @property
    def params(self) -> Dict[str, str]:
        return {"startDate": self.start_date, "endDate": self.end_date}

    @property
    def url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.path}?{urlencode(self.params)}"


@dataclass(frozen=True)
class RateSeries:
    """Chronological dates aligned index-by-index with their rate values."""

    dates: Tuple[str, ...] = field(default_factory=tuple)
    values: Tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "dates", tuple(self.dates))
        object.__setattr__(self, "values", tuple(self.values))
        if len(self.dates) != len(self.values):
            raise ValueError(
                f"RateSeries requires aligned dates and values, got {len(self.dates)} dates "
                f"and {len(self.values)} values"
            )

    def __len__(self) -> int:
        return len(self.dates)
