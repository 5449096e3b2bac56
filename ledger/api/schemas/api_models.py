"""
Pydantic schemas for API request/response models.
"""

import datetime

from pydantic import BaseModel, Field

from ledger.core.enums import LedgerSource, TransactionType


class TransactionRequest(BaseModel):
    """Request model for recording a trade."""

    symbol: str = Field(..., min_length=1, description="Instrument symbol")
    type: TransactionType = Field(..., description="BUY or SELL")
    shares: float = Field(..., gt=0, description="Number of shares traded")
    price: float = Field(..., ge=0, description="Price per share")
    date: datetime.date = Field(..., description="Trade date")
    fees: float = Field(default=0.0, ge=0, description="Fees and taxes paid")
    name: str | None = Field(default=None, description="Display name for a new holding")
    current_price: float | None = Field(default=None, gt=0, description="Latest price")


class OperationResponse(BaseModel):
    """Response model for write operations."""

    success: bool
    message: str
    errors: list[str] = []


class HoldingResponse(BaseModel):
    symbol: str
    name: str
    current_price: float
    current_shares: float
    total_cost: float
    average_cost: float
    market_value: float
    unrealized_pnl: float
    unrealized_pnl_percent: float
    realized_pnl: float
    realized_pnl_percent: float
    total_proceeds: float
    has_sell: bool


class RankedValueResponse(BaseModel):
    symbol: str
    value: float


class RankingsResponse(BaseModel):
    top_pnl: list[RankedValueResponse]
    bottom_pnl: list[RankedValueResponse]
    top_total_return: list[RankedValueResponse]
    bottom_total_return: list[RankedValueResponse]
    top_yield: list[RankedValueResponse]
    bottom_yield: list[RankedValueResponse]


class PeriodHoldingResponse(BaseModel):
    symbol: str
    name: str
    price: float
    current_shares: float
    total_cost: float
    market_value: float
    unrealized_pnl: float


class StatisticsResponse(BaseModel):
    """Response model for period statistics."""

    year: int | None
    month: int | None
    cutoff: datetime.date | None
    market_value: float
    total_cost: float
    unrealized_pnl: float
    realized_pnl: float
    dividends: float
    total_return: float
    total_return_rate: float
    dividend_yield: float
    unrealized_pnl_rate: float
    holdings: list[PeriodHoldingResponse]
    rankings: RankingsResponse


class DividendDetailResponse(BaseModel):
    id: str
    date: datetime.date
    amount: float
    shares_held: float | None
    proportional_cost: float
    yield_rate: float
    annualized_yield: float


class DividendGroupResponse(BaseModel):
    symbol: str
    name: str
    total_amount: float
    yield_rate: float
    average_annualized_yield: float
    current_shares: float
    current_total_cost: float
    frequency: int
    details: list[DividendDetailResponse]


class LedgerRowResponse(BaseModel):
    id: str
    date: datetime.date
    description: str
    source: LedgerSource
    inflow: float
    outflow: float
    balance: float
    editable: bool


class BudgetResponse(BaseModel):
    """Response model for the budget ledger, newest rows first."""

    rows: list[LedgerRowResponse]
    total_inflow: float
    total_outflow: float
    final_balance: float


class ProjectionPointResponse(BaseModel):
    year: int
    projected_balance: float
    total_invested: float


class ProjectionResponse(BaseModel):
    strategy_id: str
    name: str
    target_symbol: str
    points: list[ProjectionPointResponse]


class NetWorthPointResponse(BaseModel):
    year: int
    market_value: float
    cost: float
    cumulative_realized_pnl: float
    cumulative_dividends: float
    net_worth: float
    adjusted_net_worth: float


class OverlayPointResponse(BaseModel):
    year: int
    estimated: float
    actual: float | None = None


class NetWorthResponse(BaseModel):
    actual: list[NetWorthPointResponse]
    overlay: list[OverlayPointResponse]


class ErrorResponse(BaseModel):
    """Response model for errors."""

    error: str
    message: str
    details: list[str] | None = None
