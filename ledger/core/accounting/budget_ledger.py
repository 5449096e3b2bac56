"""
Budget Ledger.

Merges manual budget entries, trades, distributions and donations into one
cash ledger with a running balance. The balance is a left fold over rows
sorted by date, so the order in which records were entered never changes
it; rows on the same day keep the merge order (manual entries, trades,
distributions, donations).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from ledger.core.enums import LedgerSource
from ledger.core.models.budget import BudgetEntry, Donation
from ledger.core.models.dividend import Dividend
from ledger.core.models.holding import Holding
from ledger.core.types.financial import ZERO
from ledger.core.utils.decorators import log_calculation


@dataclass(frozen=True)
class LedgerRow:
    id: str
    date: date
    description: str
    source: LedgerSource
    inflow: float
    outflow: float
    balance: float = ZERO

    @property
    def editable(self) -> bool:
        return self.source.is_editable


@dataclass(frozen=True)
class BudgetLedger:
    """Ledger rows in ascending date order with their running balances."""

    rows: tuple[LedgerRow, ...]
    total_inflow: float
    total_outflow: float
    final_balance: float

    def descending(self) -> list[LedgerRow]:
        """Rows newest first; balances are those of the ascending fold."""
        return list(reversed(self.rows))

    def filter_source(self, source: LedgerSource | str | None) -> list[LedgerRow]:
        """Newest-first rows of one source; ``None`` or ``"all"`` keeps every row."""
        if source is None or source == "all":
            return self.descending()
        wanted = LedgerSource(source)
        return [row for row in self.descending() if row.source == wanted]


def _trade_rows(holding: Holding) -> list[LedgerRow]:
    rows = []
    for transaction in holding.transactions:
        verb = "Buy" if transaction.is_buy else "Sell"
        amount = transaction.cash_amount()
        rows.append(
            LedgerRow(
                id=transaction.id,
                date=transaction.date,
                description=f"{verb} {holding.symbol} {holding.name}".rstrip(),
                source=LedgerSource.STOCK,
                inflow=ZERO if transaction.is_buy else amount,
                outflow=amount if transaction.is_buy else ZERO,
            )
        )
    return rows


def _normalize(
    budget_entries: Iterable[BudgetEntry],
    holdings: Iterable[Holding],
    dividends: Iterable[Dividend],
    donations: Iterable[Donation],
) -> list[LedgerRow]:
    rows = [
        LedgerRow(
            id=entry.id,
            date=entry.date,
            description=entry.description,
            source=LedgerSource.MANUAL,
            inflow=entry.inflow,
            outflow=entry.outflow,
        )
        for entry in budget_entries
    ]
    for holding in holdings:
        rows.extend(_trade_rows(holding))
    rows.extend(
        LedgerRow(
            id=dividend.id,
            date=dividend.date,
            description=f"Dividend {dividend.symbol}",
            source=LedgerSource.DIVIDEND,
            inflow=dividend.amount,
            outflow=ZERO,
        )
        for dividend in dividends
    )
    rows.extend(
        LedgerRow(
            id=donation.id,
            date=donation.date,
            description=f"Donation: {donation.description}",
            source=LedgerSource.DONATION,
            inflow=ZERO,
            outflow=donation.amount,
        )
        for donation in donations
    )
    return rows


@log_calculation
def build_budget_ledger(
    budget_entries: Iterable[BudgetEntry],
    holdings: Iterable[Holding],
    dividends: Iterable[Dividend],
    donations: Iterable[Donation],
) -> BudgetLedger:
    """Build the cash ledger with running balances.

    Returns:
        BudgetLedger with rows in ascending date order
    """
    rows = sorted(_normalize(budget_entries, holdings, dividends, donations), key=lambda r: r.date)

    balance = ZERO
    folded = []
    for row in rows:
        balance += row.inflow - row.outflow
        folded.append(
            LedgerRow(
                row.id, row.date, row.description, row.source, row.inflow, row.outflow, balance
            )
        )

    return BudgetLedger(
        rows=tuple(folded),
        total_inflow=sum(r.inflow for r in folded),
        total_outflow=sum(r.outflow for r in folded),
        final_balance=balance,
    )
