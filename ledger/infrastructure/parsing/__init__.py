"""
Bulk text importers.
"""

from .text_importers import (
    ParsedResult,
    ParsedTransaction,
    ParseError,
    PriceQuote,
    month_range,
    parse_dividends,
    parse_donations,
    parse_historical_prices,
    parse_transactions,
)

__all__ = [
    "ParsedResult",
    "ParsedTransaction",
    "ParseError",
    "PriceQuote",
    "month_range",
    "parse_transactions",
    "parse_dividends",
    "parse_donations",
    "parse_historical_prices",
]
