"""
Backup API endpoints.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from ledger.api.dependencies import get_portfolio
from ledger.api.schemas.api_models import ErrorResponse, OperationResponse
from ledger.core.models.portfolio import Portfolio

router = APIRouter()


@router.get("/export")
def export_portfolio(portfolio: Portfolio = Depends(get_portfolio)) -> dict[str, Any]:
    """The whole portfolio as a backup document."""
    return portfolio.export_backup()


@router.post(
    "/import", response_model=OperationResponse, responses={400: {"model": ErrorResponse}}
)
def import_portfolio(
    document: dict[str, Any] = Body(...), portfolio: Portfolio = Depends(get_portfolio)
) -> OperationResponse:
    """Replace the whole portfolio with a backup document."""
    result = portfolio.import_backup(document)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorResponse(
                error="invalid_backup", message=result.message, details=list(result.errors)
            ).model_dump(),
        )
    return OperationResponse(success=True, message=result.message)
