"""
Portfolio API endpoints: holdings, trades and period reports.
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ledger.api.dependencies import get_portfolio, to_http_error
from ledger.api.schemas.api_models import (
    BudgetResponse,
    DividendDetailResponse,
    DividendGroupResponse,
    ErrorResponse,
    HoldingResponse,
    LedgerRowResponse,
    NetWorthPointResponse,
    NetWorthResponse,
    OperationResponse,
    OverlayPointResponse,
    PeriodHoldingResponse,
    RankedValueResponse,
    RankingsResponse,
    StatisticsResponse,
    TransactionRequest,
)
from ledger.core.accounting.dividend_yield import DividendGroup
from ledger.core.accounting.snapshot_reconstructor import PeriodStatistics, RankedValue
from ledger.core.constants import DEFAULT_NET_WORTH_START_YEAR
from ledger.core.enums import LedgerSource
from ledger.core.exceptions.ledger import LedgerException
from ledger.core.models.portfolio import Portfolio
from ledger.core.models.portfolio_editing import new_record_id
from ledger.core.models.transaction import Transaction

router = APIRouter()


def _ranked(values: tuple[RankedValue, ...]) -> list[RankedValueResponse]:
    return [RankedValueResponse(symbol=v.symbol, value=v.value) for v in values]


def _statistics_response(stats: PeriodStatistics) -> StatisticsResponse:
    rankings = stats.rankings
    return StatisticsResponse(
        year=stats.year,
        month=stats.month,
        cutoff=stats.cutoff,
        market_value=stats.market_value,
        total_cost=stats.total_cost,
        unrealized_pnl=stats.unrealized_pnl,
        realized_pnl=stats.realized_pnl,
        dividends=stats.dividends,
        total_return=stats.total_return,
        total_return_rate=stats.total_return_rate,
        dividend_yield=stats.dividend_yield,
        unrealized_pnl_rate=stats.unrealized_pnl_rate,
        holdings=[
            PeriodHoldingResponse(
                symbol=h.symbol,
                name=h.name,
                price=h.price,
                current_shares=h.financials.current_shares,
                total_cost=h.financials.total_cost,
                market_value=h.financials.market_value,
                unrealized_pnl=h.financials.unrealized_pnl,
            )
            for h in stats.holdings
        ],
        rankings=RankingsResponse(
            top_pnl=_ranked(rankings.top_pnl),
            bottom_pnl=_ranked(rankings.bottom_pnl),
            top_total_return=_ranked(rankings.top_total_return),
            bottom_total_return=_ranked(rankings.bottom_total_return),
            top_yield=_ranked(rankings.top_yield),
            bottom_yield=_ranked(rankings.bottom_yield),
        ),
    )


def _dividend_group_response(group: DividendGroup) -> DividendGroupResponse:
    return DividendGroupResponse(
        symbol=group.symbol,
        name=group.name,
        total_amount=group.total_amount,
        yield_rate=group.yield_rate,
        average_annualized_yield=group.average_annualized_yield,
        current_shares=group.current_shares,
        current_total_cost=group.current_total_cost,
        frequency=group.frequency,
        details=[
            DividendDetailResponse(
                id=d.dividend.id,
                date=d.dividend.date,
                amount=d.dividend.amount,
                shares_held=d.dividend.shares_held,
                proportional_cost=d.proportional_cost,
                yield_rate=d.yield_rate,
                annualized_yield=d.annualized_yield,
            )
            for d in group.details
        ],
    )


@router.get("/holdings", response_model=list[HoldingResponse])
def get_holdings(
    active_only: bool = Query(default=False, description="Only instruments still held"),
    portfolio: Portfolio = Depends(get_portfolio),
) -> list[HoldingResponse]:
    """Current cost-basis figures of every holding."""
    names = {h.symbol: h.name for h in portfolio.snapshot.holdings}
    return [
        HoldingResponse(
            symbol=f.symbol,
            name=names.get(f.symbol, ""),
            current_price=f.current_price,
            current_shares=f.current_shares,
            total_cost=f.total_cost,
            average_cost=f.average_cost,
            market_value=f.market_value,
            unrealized_pnl=f.unrealized_pnl,
            unrealized_pnl_percent=f.unrealized_pnl_percent,
            realized_pnl=f.realized_pnl,
            realized_pnl_percent=f.realized_pnl_percent,
            total_proceeds=f.total_proceeds,
            has_sell=f.has_sell,
        )
        for f in portfolio.all_financials()
        if f.is_held or not active_only
    ]


@router.post(
    "/transactions",
    response_model=OperationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
def create_transaction(
    request: TransactionRequest, portfolio: Portfolio = Depends(get_portfolio)
) -> OperationResponse:
    """Record a trade, creating the holding when the symbol is new."""
    try:
        transaction = Transaction(
            id=new_record_id(),
            type=request.type,
            shares=request.shares,
            price=request.price,
            date=request.date,
            fees=request.fees,
        )
    except LedgerException as e:
        raise to_http_error(e) from e

    result = portfolio.add_transaction(
        request.symbol, transaction, name=request.name, current_price=request.current_price
    )
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorResponse(error="transaction_rejected", message=result.message).model_dump(),
        )
    return OperationResponse(success=True, message=result.message)


@router.get("/statistics", response_model=StatisticsResponse)
def get_statistics(
    year: int | None = Query(default=None, description="Target year; omit for all time"),
    month: int | None = Query(default=None, ge=1, le=12, description="Month within the year"),
    portfolio: Portfolio = Depends(get_portfolio),
) -> StatisticsResponse:
    """Portfolio figures as they stood at the end of a period."""
    try:
        stats = portfolio.period_statistics(year=year, month=month)
    except LedgerException as e:
        raise to_http_error(e) from e
    return _statistics_response(stats)


@router.get("/dividends", response_model=list[DividendGroupResponse])
def get_dividends(
    year: int | None = Query(default=None, description="Only distributions of this year"),
    held_only: bool = Query(default=False, description="Only instruments still held"),
    search: str = Query(default="", description="Symbol or name filter"),
    portfolio: Portfolio = Depends(get_portfolio),
) -> list[DividendGroupResponse]:
    """Distributions grouped by instrument with yield figures."""
    groups = portfolio.dividend_groups(year=year, held_only=held_only, search=search)
    return [_dividend_group_response(g) for g in groups]


@router.get("/budget", response_model=BudgetResponse)
def get_budget(
    source: LedgerSource | None = Query(default=None, description="Only rows of this source"),
    portfolio: Portfolio = Depends(get_portfolio),
) -> BudgetResponse:
    """Cash ledger with running balances, newest first."""
    ledger = portfolio.budget_ledger()
    return BudgetResponse(
        rows=[
            LedgerRowResponse(
                id=row.id,
                date=row.date,
                description=row.description,
                source=row.source,
                inflow=row.inflow,
                outflow=row.outflow,
                balance=row.balance,
                editable=row.editable,
            )
            for row in ledger.filter_source(source)
        ],
        total_inflow=ledger.total_inflow,
        total_outflow=ledger.total_outflow,
        final_balance=ledger.final_balance,
    )


@router.get("/net-worth", response_model=NetWorthResponse)
def get_net_worth(
    start_year: int = Query(default=DEFAULT_NET_WORTH_START_YEAR, description="Base year"),
    expected_pnl_rate: float | None = Query(default=None, description="Annual P&L rate, %"),
    expected_dividend_rate: float | None = Query(default=None, description="Dividend rate, %"),
    adjusted: bool = Query(default=True, description="Compare the principal-adjusted series"),
    portfolio: Portfolio = Depends(get_portfolio),
) -> NetWorthResponse:
    """Actual year-end net worth against the baseline projection."""
    today = date.today()
    try:
        actual = portfolio.net_worth_series(start_year, as_of=today)
        overlay = portfolio.net_worth_overlay(
            start_year,
            expected_pnl_rate=expected_pnl_rate,
            expected_dividend_rate=expected_dividend_rate,
            adjusted=adjusted,
            as_of=today,
        )
    except LedgerException as e:
        raise to_http_error(e) from e
    return NetWorthResponse(
        actual=[
            NetWorthPointResponse(
                year=p.year,
                market_value=p.market_value,
                cost=p.cost,
                cumulative_realized_pnl=p.cumulative_realized_pnl,
                cumulative_dividends=p.cumulative_dividends,
                net_worth=p.net_worth,
                adjusted_net_worth=p.adjusted_net_worth,
            )
            for p in actual
        ],
        overlay=[
            OverlayPointResponse(year=p.year, estimated=p.estimated, actual=p.actual)
            for p in overlay
        ],
    )
