"""
Persistence and price-source interfaces.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ledger.core.models.snapshot import PortfolioSnapshot


class IPortfolioRepository(ABC):
    """Abstract interface for loading and saving whole portfolio snapshots."""

    @abstractmethod
    def load(self) -> PortfolioSnapshot:
        """Load the persisted snapshot; an empty snapshot when nothing is stored."""
        pass

    @abstractmethod
    def save(self, snapshot: PortfolioSnapshot) -> None:
        """Persist the snapshot, replacing what was stored before."""
        pass


class IPriceSource(ABC):
    """Abstract interface for fetching current instrument prices."""

    @abstractmethod
    def fetch_prices(self, symbols: Iterable[str]) -> dict[str, float]:
        """Return the latest price of each symbol the source knows.

        Symbols the source cannot price are left out of the result.
        """
        pass
