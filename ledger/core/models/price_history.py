"""
Monthly historical price snapshots.

Snapshots are keyed by canonical ``YYYY-MM`` strings, which sort
chronologically as plain strings.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import date

from ledger.core.exceptions.ledger import ValidationError
from ledger.core.utils.validation import validate_month, validate_symbol, validate_year_month


def year_month_key(year: int, month: int) -> str:
    """Build the canonical snapshot key for a year and month.

    Examples:
        >>> year_month_key(2024, 3)
        '2024-03'
    """
    validate_month(month)
    return f"{year:04d}-{month:02d}"


def key_for_date(day: date) -> str:
    """Snapshot key of the month containing ``day``."""
    return year_month_key(day.year, day.month)


@dataclass(frozen=True)
class PriceHistory:
    """Sparse month -> closing price mapping for one instrument.

    ``prices`` is treated as read-only; updates go through ``with_prices``.
    """

    symbol: str
    prices: dict[str, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "symbol", validate_symbol(self.symbol))
        for key, price in self.prices.items():
            validate_year_month(key)
            if price < 0:
                raise ValidationError(f"Historical price for {self.symbol} {key} is negative")

    def price_for(self, key: str) -> float | None:
        """Exact snapshot for ``key``, if recorded."""
        return self.prices.get(key)

    def latest_at_or_before(self, key: str) -> float | None:
        """Most recent snapshot whose key is not after ``key``."""
        candidates = [k for k in self.prices if k <= key]
        if not candidates:
            return None
        return self.prices[max(candidates)]

    def latest(self) -> float | None:
        """Most recent snapshot overall."""
        if not self.prices:
            return None
        return self.prices[max(self.prices)]

    def with_prices(self, updates: dict[str, float]) -> "PriceHistory":
        """Return a copy with ``updates`` merged over the existing snapshots."""
        return replace(self, prices={**self.prices, **updates})


def index_price_histories(histories: Iterable[PriceHistory]) -> dict[str, PriceHistory]:
    """Index snapshot collections by symbol."""
    return {history.symbol: history for history in histories}
