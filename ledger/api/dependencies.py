"""Shared FastAPI dependencies for the ledger API."""

import os
from threading import Lock

from fastapi import HTTPException, Request, status

from ledger.core.constants import DATA_FILE_ENV_VAR, DEFAULT_DATA_FILE
from ledger.core.exceptions.ledger import (
    LedgerException,
    RecordNotFoundError,
    SymbolNotFoundError,
    ValidationError,
)
from ledger.core.models.portfolio import Portfolio
from ledger.infrastructure.storage import JsonFileRepository

_portfolio_lock = Lock()


def get_portfolio(request: Request) -> Portfolio:
    """Portfolio bound to the app, opened from the data file on first use."""
    state = request.app.state
    with _portfolio_lock:
        if getattr(state, "portfolio", None) is None:
            path = os.environ.get(DATA_FILE_ENV_VAR, DEFAULT_DATA_FILE)
            state.portfolio = Portfolio(JsonFileRepository(path))
        return state.portfolio


def to_http_error(error: LedgerException) -> HTTPException:
    """HTTP error for a ledger exception raised while building a report."""
    if isinstance(error, SymbolNotFoundError | RecordNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, ValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


__all__ = ["get_portfolio", "to_http_error"]
