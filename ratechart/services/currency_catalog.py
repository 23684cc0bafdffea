"""Catalog of selectable currencies with a single active entry."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CurrencyOption:
    currency_id: str
    name: str
    selected: bool = False


def parse_choices(raw: str) -> list[tuple[str, str]]:
    """Parse ``"145:USD,292:EUR"`` into ``[("145", "USD"), ("292", "EUR")]``."""

    choices: list[tuple[str, str]] = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        currency_id, sep, name = entry.partition(":")
        if not sep or not currency_id.strip() or not name.strip():
            raise ValueError(f"Invalid currency choice {entry!r}; expected 'id:name'")
        choices.append((currency_id.strip(), name.strip()))
    return choices


@dataclass
class CurrencyCatalog:
    """Known currencies keyed by upstream id, exactly one of them active."""

    names: dict[str, str] = field(default_factory=dict)
    active_id: str | None = None

    @classmethod
    def from_choices(cls, raw: str) -> CurrencyCatalog:
        return cls(names=dict(parse_choices(raw)))

    def __contains__(self, currency_id: object) -> bool:
        return currency_id in self.names

    def register(self, currency_id: str, name: str | None = None) -> None:
        """Add a configured currency; an existing entry keeps its name."""

        self.names.setdefault(currency_id, name or currency_id)

    def display_name(self, currency_id: str) -> str:
        return self.names[currency_id]

    def activate(self, currency_id: str) -> None:
        """Mark ``currency_id`` as the sole active entry."""

        if currency_id not in self.names:
            raise KeyError(currency_id)
        self.active_id = currency_id

    def options(self) -> list[CurrencyOption]:
        return [
            CurrencyOption(currency_id=currency_id, name=name, selected=currency_id == self.active_id)
            for currency_id, name in self.names.items()
        ]
