"""
Custom exception hierarchy for the investment ledger.

This module defines domain-specific exceptions for better error handling.
Numeric degeneracy (zero cost, zero shares) is never an exception; only
structurally invalid input is reported to the caller.
"""


class LedgerException(Exception):
    """Base exception for all ledger-related errors."""

    pass


class ValidationError(LedgerException):
    """Raised when input validation fails."""

    pass


class DataError(LedgerException):
    """Raised when data access or processing fails."""

    pass


class ImportFormatError(DataError):
    """Raised when a backup document does not match the backup contract."""

    def __init__(self, reason: str, details: list[str] | None = None):
        self.reason = reason
        self.details = details or []
        message = f"Malformed backup file: {reason}"
        if self.details:
            message = f"{message} ({'; '.join(self.details)})"
        super().__init__(message)


class CalculationError(LedgerException):
    """Raised when mathematical calculations fail."""

    pass


class ConfigurationError(LedgerException):
    """Raised when configuration is invalid."""

    pass


class PortfolioError(LedgerException):
    """Raised when portfolio operations fail."""

    pass


class SymbolNotFoundError(PortfolioError):
    """Raised when an operation references a symbol that is not held."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Symbol not found in portfolio: {symbol}")


class RecordNotFoundError(PortfolioError):
    """Raised when an operation references an unknown record id."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class OverSellError(PortfolioError):
    """Raised when a sell exceeds the shares open at its trade date."""

    def __init__(self, symbol: str, requested: float, available: float, trade_date: str = ""):
        self.symbol = symbol
        self.requested = requested
        self.available = available
        self.trade_date = trade_date
        when = f" on {trade_date}" if trade_date else ""
        super().__init__(
            f"Cannot sell {requested:g} shares of {symbol}{when}: only {available:g} held"
        )
