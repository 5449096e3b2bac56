"""
Static per-instrument reference data.

Metadata is read-only input to the dividend annualizer and the compound
simulator. It is validated once when a ``MetadataMap`` is built, so the
engine can rely on its schema instead of probing optional keys.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace

from ledger.core.constants import DEFAULT_DIVIDEND_FREQUENCY
from ledger.core.enums import InstrumentCategory
from ledger.core.exceptions.ledger import ValidationError
from ledger.core.utils.validation import validate_months, validate_symbol

# Labels accepted for each category, including the Chinese labels found in
# older backup files.
_CATEGORY_ALIASES: dict[str, InstrumentCategory] = {
    "market-cap": InstrumentCategory.MARKET_CAP,
    "市值型": InstrumentCategory.MARKET_CAP,
    "high-dividend": InstrumentCategory.HIGH_DIVIDEND,
    "高股息": InstrumentCategory.HIGH_DIVIDEND,
    "growth": InstrumentCategory.GROWTH,
    "成長型": InstrumentCategory.GROWTH,
    "active": InstrumentCategory.ACTIVE,
    "主動型": InstrumentCategory.ACTIVE,
    "bond": InstrumentCategory.BOND,
    "債券": InstrumentCategory.BOND,
}


def parse_category(label: str) -> InstrumentCategory:
    """Map a free-text category label onto ``InstrumentCategory``."""
    return _CATEGORY_ALIASES.get(label.strip().lower(), InstrumentCategory.OTHER)


@dataclass(frozen=True)
class InstrumentMetadata:
    """Reference data for one symbol."""

    symbol: str
    name: str = ""
    market: str = ""
    category: str = ""
    industry: str = ""
    frequency: int = DEFAULT_DIVIDEND_FREQUENCY
    ex_div_months: tuple[int, ...] = ()
    pay_months: tuple[int, ...] = ()
    default_yield: float | None = None
    payout_label: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbol", validate_symbol(self.symbol))
        if not isinstance(self.frequency, int) or isinstance(self.frequency, bool):
            raise ValidationError(f"Frequency for {self.symbol} must be an integer")
        if not 1 <= self.frequency <= 12:
            raise ValidationError(
                f"Frequency for {self.symbol} must be between 1 and 12, got {self.frequency}"
            )
        object.__setattr__(
            self, "ex_div_months", validate_months(self.ex_div_months, "ex-dividend month")
        )
        object.__setattr__(self, "pay_months", validate_months(self.pay_months, "payment month"))
        if self.default_yield is not None and self.default_yield < 0:
            raise ValidationError(f"Default yield for {self.symbol} must be non-negative")

    @property
    def category_kind(self) -> InstrumentCategory:
        return parse_category(self.category)

    @property
    def is_high_dividend(self) -> bool:
        return self.category_kind == InstrumentCategory.HIGH_DIVIDEND

    def is_ex_dividend_month(self, month: int) -> bool:
        return month in self.ex_div_months


@dataclass(frozen=True)
class MetadataMap:
    """Symbol-keyed collection of ``InstrumentMetadata``."""

    entries: dict[str, InstrumentMetadata] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for key, meta in self.entries.items():
            if key != meta.symbol:
                raise ValidationError(
                    f"Metadata key {key!r} does not match its symbol {meta.symbol!r}"
                )

    @classmethod
    def from_records(cls, records: Iterable[InstrumentMetadata]) -> "MetadataMap":
        """Build a map, rejecting duplicate symbols."""
        entries: dict[str, InstrumentMetadata] = {}
        for meta in records:
            if meta.symbol in entries:
                raise ValidationError(f"Duplicate metadata for symbol {meta.symbol}")
            entries[meta.symbol] = meta
        return cls(entries=entries)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self.entries

    def __iter__(self) -> Iterator[InstrumentMetadata]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, symbol: str) -> InstrumentMetadata | None:
        return self.entries.get(symbol)

    def frequency_for(self, symbol: str, default: int = DEFAULT_DIVIDEND_FREQUENCY) -> int:
        """Declared payouts per year, or ``default`` when the symbol is unknown."""
        meta = self.entries.get(symbol)
        return meta.frequency if meta is not None else default

    def with_entry(self, meta: InstrumentMetadata) -> "MetadataMap":
        """Return a copy with ``meta`` added or replaced."""
        return replace(self, entries={**self.entries, meta.symbol: meta})

    def merged_over(self, base: "MetadataMap") -> "MetadataMap":
        """Return ``base`` overridden by the entries of this map."""
        return MetadataMap(entries={**base.entries, **self.entries})
