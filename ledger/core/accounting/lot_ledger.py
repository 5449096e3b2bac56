"""
FIFO Lot Ledger.

Replays a holding's transaction log in date order and matches every sell
against the oldest open buy lots. This is the single source of cost basis,
realized and unrealized profit for the rest of the engine.

Same-day transactions keep the order in which they appear in the stored
log; the sort key is ``(date, log index)`` so the replay is deterministic.
"""

from collections import deque
from dataclasses import dataclass
from datetime import date

from loguru import logger

from ledger.core.constants import LOT_EPSILON
from ledger.core.enums import OverSellPolicy
from ledger.core.exceptions.ledger import OverSellError
from ledger.core.models.holding import Holding
from ledger.core.models.transaction import Transaction
from ledger.core.types.financial import ZERO, buy_cost, percentage, safe_divide, sell_proceeds
from ledger.core.utils.decorators import log_calculation


@dataclass(frozen=True)
class OpenLot:
    """Remaining shares and cost of one buy after partial consumption."""

    transaction_id: str
    opened_on: date
    shares: float
    cost: float

    @property
    def average_cost(self) -> float:
        return safe_divide(self.cost, self.shares)


@dataclass(frozen=True)
class SellDetail:
    """Outcome of matching one sell against the open lots.

    ``excess_shares`` is non-zero only when the sell was larger than the
    shares open at its date; the excess carries no cost basis.
    """

    transaction: Transaction
    cost_consumed: float
    proceeds: float
    realized_pnl: float
    return_rate: float
    excess_shares: float = ZERO

    @property
    def date(self) -> date:
        return self.transaction.date

    def falls_in(self, year: int, month: int | None = None) -> bool:
        """Check whether the sell happened in ``year`` (and ``month`` when given)."""
        if self.date.year != year:
            return False
        return month is None or self.date.month == month


@dataclass(frozen=True)
class HoldingFinancials:
    """Aggregate cost-basis figures for one holding."""

    symbol: str
    current_price: float
    current_shares: float
    total_cost: float
    average_cost: float
    market_value: float
    unrealized_pnl: float
    unrealized_pnl_percent: float
    realized_pnl: float
    realized_pnl_percent: float
    total_shares_sold: float
    total_cost_consumed: float
    average_sell_cost: float
    total_proceeds: float
    has_sell: bool
    open_lots: tuple[OpenLot, ...] = ()
    sell_details: tuple[SellDetail, ...] = ()

    @property
    def is_held(self) -> bool:
        return self.current_shares > ZERO

    def realized_in(self, year: int, month: int | None = None) -> float:
        """Realized profit of the sells dated in ``year`` (and ``month``)."""
        return sum(d.realized_pnl for d in self.sell_details if d.falls_in(year, month))


def sorted_transactions(transactions: tuple[Transaction, ...]) -> list[Transaction]:
    """Transactions in replay order: by date, ties by position in the log."""
    indexed = sorted(enumerate(transactions), key=lambda item: (item[1].date, item[0]))
    return [transaction for _, transaction in indexed]


@dataclass
class _Lot:
    transaction_id: str
    opened_on: date
    shares: float
    cost: float


class _LotQueue:
    """Mutable FIFO queue used during a single replay."""

    def __init__(self) -> None:
        self._lots: deque[_Lot] = deque()

    def push(self, transaction: Transaction) -> None:
        self._lots.append(
            _Lot(
                transaction_id=transaction.id,
                opened_on=transaction.date,
                shares=transaction.shares,
                cost=buy_cost(transaction.shares, transaction.price, transaction.fees),
            )
        )

    @property
    def shares(self) -> float:
        return sum(lot.shares for lot in self._lots)

    def consume(self, shares: float) -> tuple[float, float]:
        """Take ``shares`` oldest-first and return ``(cost consumed, unmatched shares)``."""
        remaining = shares
        cost = ZERO
        while remaining > ZERO and self._lots:
            lot = self._lots[0]
            taken = min(remaining, lot.shares)
            portion = lot.cost * taken / lot.shares if lot.shares > ZERO else ZERO
            lot.shares -= taken
            remaining -= taken
            if lot.shares <= LOT_EPSILON:
                # Dust lots are closed out together with their residual cost
                cost += lot.cost
                self._lots.popleft()
            else:
                cost += portion
                lot.cost -= portion
        return cost, max(remaining, ZERO)

    def snapshot(self) -> tuple[OpenLot, ...]:
        return tuple(
            OpenLot(
                transaction_id=lot.transaction_id,
                opened_on=lot.opened_on,
                shares=lot.shares,
                cost=lot.cost,
            )
            for lot in self._lots
        )


@log_calculation
def compute_financials(
    holding: Holding,
    current_price: float | None = None,
    policy: OverSellPolicy = OverSellPolicy.ZERO_COST,
) -> HoldingFinancials:
    """Replay a holding's log through the FIFO lot queue.

    Args:
        holding: Holding whose transactions are replayed
        current_price: Price used for valuation; defaults to the holding's
            own current price
        policy: Treatment of sells larger than the open position

    Returns:
        HoldingFinancials for the holding

    Raises:
        OverSellError: If ``policy`` is REJECT and a sell exceeds the open shares
    """
    price = holding.current_price if current_price is None else current_price
    queue = _LotQueue()
    sell_details: list[SellDetail] = []

    for transaction in sorted_transactions(holding.transactions):
        if transaction.is_buy:
            queue.push(transaction)
            continue

        available = queue.shares
        if policy == OverSellPolicy.REJECT and transaction.shares - available > LOT_EPSILON:
            raise OverSellError(
                holding.symbol, transaction.shares, available, transaction.date.isoformat()
            )

        cost_consumed, excess = queue.consume(transaction.shares)
        if excess > LOT_EPSILON:
            logger.warning(
                f"Sell {transaction.id} of {holding.symbol} exceeds open shares by {excess:g}; "
                "excess treated as zero cost"
            )
        else:
            excess = ZERO
        proceeds = sell_proceeds(transaction.shares, transaction.price, transaction.fees)
        realized = proceeds - cost_consumed
        sell_details.append(
            SellDetail(
                transaction=transaction,
                cost_consumed=cost_consumed,
                proceeds=proceeds,
                realized_pnl=realized,
                return_rate=percentage(realized, cost_consumed),
                excess_shares=excess,
            )
        )

    open_lots = queue.snapshot()
    current_shares = sum(lot.shares for lot in open_lots)
    total_cost = sum(lot.cost for lot in open_lots)
    market_value = current_shares * price
    unrealized = market_value - total_cost if current_shares > ZERO else ZERO

    total_shares_sold = sum(d.transaction.shares for d in sell_details)
    total_cost_consumed = sum(d.cost_consumed for d in sell_details)
    realized_pnl = sum(d.realized_pnl for d in sell_details)

    return HoldingFinancials(
        symbol=holding.symbol,
        current_price=price,
        current_shares=current_shares,
        total_cost=total_cost,
        average_cost=safe_divide(total_cost, current_shares) if current_shares > ZERO else ZERO,
        market_value=market_value,
        unrealized_pnl=unrealized,
        unrealized_pnl_percent=percentage(unrealized, total_cost),
        realized_pnl=realized_pnl,
        realized_pnl_percent=percentage(realized_pnl, total_cost_consumed),
        total_shares_sold=total_shares_sold,
        total_cost_consumed=total_cost_consumed,
        average_sell_cost=safe_divide(total_cost_consumed, total_shares_sold),
        total_proceeds=sum(d.proceeds for d in sell_details),
        has_sell=holding.has_sell,
        open_lots=open_lots,
        sell_details=tuple(sell_details),
    )
