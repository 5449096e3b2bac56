"""
Immutable aggregate of a whole portfolio.

The accounting engine and the editing operations only ever see a
``PortfolioSnapshot``; persistence loads and saves whole snapshots.
"""

from dataclasses import dataclass, field, replace

from ledger.core.exceptions.ledger import SymbolNotFoundError, ValidationError

from .budget import BudgetEntry, Donation
from .dividend import Dividend
from .holding import Holding
from .metadata import MetadataMap
from .price_history import PriceHistory
from .settings import Settings
from .strategy import Strategy


@dataclass(frozen=True)
class PortfolioSnapshot:
    """Every persisted collection of one portfolio, by value."""

    holdings: tuple[Holding, ...] = ()
    dividends: tuple[Dividend, ...] = ()
    donations: tuple[Donation, ...] = ()
    budget_entries: tuple[BudgetEntry, ...] = ()
    price_histories: dict[str, PriceHistory] = field(default_factory=dict)
    strategies: tuple[Strategy, ...] = ()
    settings: Settings = field(default_factory=Settings)
    metadata: MetadataMap = field(default_factory=MetadataMap)

    def __post_init__(self) -> None:
        for name in ("holdings", "dividends", "donations", "budget_entries", "strategies"):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

        symbols = [h.symbol for h in self.holdings]
        if len(symbols) != len(set(symbols)):
            raise ValidationError("Holding symbols must be unique")
        for key, history in self.price_histories.items():
            if key != history.symbol:
                raise ValidationError(
                    f"Price history key {key!r} does not match its symbol {history.symbol!r}"
                )

    @property
    def symbols(self) -> list[str]:
        return [h.symbol for h in self.holdings]

    def find_holding(self, symbol: str) -> Holding | None:
        for holding in self.holdings:
            if holding.symbol == symbol:
                return holding
        return None

    def get_holding(self, symbol: str) -> Holding:
        """Return the holding for ``symbol``.

        Raises:
            SymbolNotFoundError: If the symbol is not in the portfolio
        """
        holding = self.find_holding(symbol)
        if holding is None:
            raise SymbolNotFoundError(symbol)
        return holding

    def find_strategy(self, strategy_id: str) -> Strategy | None:
        return next((s for s in self.strategies if s.id == strategy_id), None)

    def dividends_for(self, symbol: str) -> list[Dividend]:
        return [d for d in self.dividends if d.symbol == symbol]

    def evolve(self, **changes) -> "PortfolioSnapshot":
        """Return a copy with the given collections replaced."""
        return replace(self, **changes)
