"""
Strategy lab API endpoints.
"""

from fastapi import APIRouter, Depends, Query

from ledger.api.dependencies import get_portfolio, to_http_error
from ledger.api.schemas.api_models import ProjectionPointResponse, ProjectionResponse
from ledger.core.constants import DEFAULT_PROJECTION_YEARS, MAX_PROJECTION_YEARS
from ledger.core.exceptions.ledger import LedgerException
from ledger.core.models.portfolio import Portfolio

router = APIRouter()


@router.get("/{strategy_id}/projection", response_model=ProjectionResponse)
def get_projection(
    strategy_id: str,
    start_year: int | None = Query(default=None, description="Defaults to the current year"),
    years: int = Query(default=DEFAULT_PROJECTION_YEARS, ge=1, le=MAX_PROJECTION_YEARS),
    portfolio: Portfolio = Depends(get_portfolio),
) -> ProjectionResponse:
    """Year-by-year compound growth projection of a saved or generated strategy."""
    try:
        strategy = portfolio.get_strategy(strategy_id)
        points = portfolio.project_strategy(strategy_id, start_year=start_year, years=years)
    except LedgerException as e:
        raise to_http_error(e) from e
    return ProjectionResponse(
        strategy_id=strategy.id,
        name=strategy.name,
        target_symbol=strategy.target_symbol,
        points=[
            ProjectionPointResponse(
                year=p.year, projected_balance=p.projected_balance, total_invested=p.total_invested
            )
            for p in points
        ],
    )
