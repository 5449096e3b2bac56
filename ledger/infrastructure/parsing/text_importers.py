"""
Line-oriented bulk importers.

Each importer reads comma-separated lines and returns the records it could
build together with one ``ParseError`` per rejected line. Blank lines are
skipped; line numbers are 1-based. A rejected line contributes no records.

Formats:
    transactions: ``symbol, BUY|SELL, shares, price, YYYY-MM-DD, fees``
    dividends:    ``symbol, shares held, dividend per share, YYYY-MM-DD``
    donations:    ``amount, YYYY-MM-DD, description``
    prices:       ``symbol, YYYY/MM-YYYY/MM, price, price, ...``
"""

import math
import re
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from datetime import date
from typing import Generic, TypeVar

from loguru import logger

from ledger.core.enums import TransactionType
from ledger.core.exceptions.ledger import ValidationError
from ledger.core.models.budget import Donation
from ledger.core.models.dividend import Dividend, net_dividend_amount
from ledger.core.models.portfolio_editing import new_record_id
from ledger.core.models.price_history import year_month_key
from ledger.core.models.transaction import Transaction
from ledger.core.utils.validation import parse_trade_date, validate_symbol

_RANGE_BOUND = re.compile(r"^(\d{4})/(\d{2})$")


@dataclass(frozen=True)
class ParseError:
    line: int
    error: str


@dataclass(frozen=True)
class ParsedTransaction:
    symbol: str
    transaction: Transaction


@dataclass(frozen=True)
class PriceQuote:
    symbol: str
    year_month: str
    price: float


T = TypeVar("T")


@dataclass
class ParsedResult(Generic[T]):
    success: list[T] = field(default_factory=list)
    errors: list[ParseError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class _LineError(Exception):
    """Rejects the current line with a user-facing message."""


def _fields(text: str) -> Iterator[tuple[int, list[str]]]:
    for index, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if stripped:
            yield index, [part.strip() for part in stripped.split(",")]


def _number(raw: str, label: str, allow_zero: bool = True) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise _LineError(f'Invalid {label}: "{raw}"') from None
    if not math.isfinite(value) or value < 0 or (value == 0 and not allow_zero):
        raise _LineError(f'Invalid {label}: "{raw}"')
    return value


def _date(raw: str) -> date:
    try:
        return parse_trade_date(raw)
    except ValidationError:
        raise _LineError(f'Invalid date: "{raw}"') from None


def _symbol(raw: str) -> str:
    try:
        return validate_symbol(raw)
    except ValidationError:
        raise _LineError("Symbol cannot be empty") from None


def _parse(
    text: str, kind: str, parse_line: Callable[[list[str]], list[T]]
) -> ParsedResult[T]:
    result: ParsedResult[T] = ParsedResult()
    for line_number, parts in _fields(text):
        try:
            result.success.extend(parse_line(parts))
        except (_LineError, ValidationError) as e:
            result.errors.append(ParseError(line_number, str(e)))
    logger.info(f"Parsed {kind}: {len(result.success)} records, {len(result.errors)} errors")
    return result


def _transaction_line(parts: list[str]) -> list[ParsedTransaction]:
    if len(parts) != 6:
        raise _LineError("Expected 6 fields: symbol, type, shares, price, date, fees")
    symbol, kind, shares, price, day, fees = parts
    try:
        transaction_type = TransactionType.from_string(kind)
    except ValueError:
        raise _LineError(f'Invalid transaction type: "{kind}"') from None
    transaction = Transaction(
        id=new_record_id(),
        type=transaction_type,
        shares=_number(shares, "shares", allow_zero=False),
        price=_number(price, "price"),
        date=_date(day),
        fees=_number(fees, "fees"),
    )
    return [ParsedTransaction(_symbol(symbol), transaction)]


def _dividend_line(parts: list[str]) -> list[Dividend]:
    if len(parts) != 4:
        raise _LineError("Expected 4 fields: symbol, shares held, dividend per share, date")
    symbol, shares, per_share, day = parts
    shares_held = _number(shares, "shares", allow_zero=False)
    dividend_per_share = _number(per_share, "dividend per share")
    return [
        Dividend(
            id=new_record_id(),
            symbol=_symbol(symbol),
            amount=net_dividend_amount(shares_held, dividend_per_share),
            date=_date(day),
            shares_held=shares_held,
            dividend_per_share=dividend_per_share,
        )
    ]


def _donation_line(parts: list[str]) -> list[Donation]:
    if len(parts) != 3:
        raise _LineError("Expected 3 fields: amount, date, description")
    amount, day, description = parts
    parsed_amount = _number(amount, "amount", allow_zero=False)
    parsed_date = _date(day)
    if not description:
        raise _LineError("Description cannot be empty")
    return [Donation(new_record_id(), parsed_amount, parsed_date, description)]


def month_range(start: tuple[int, int], end: tuple[int, int]) -> list[str]:
    """Snapshot keys from ``start`` to ``end`` inclusive, as ``(year, month)`` pairs.

    Examples:
        >>> month_range((2023, 11), (2024, 2))
        ['2023-11', '2023-12', '2024-01', '2024-02']
    """
    year, month = start
    keys = []
    while (year, month) <= end:
        keys.append(year_month_key(year, month))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return keys


def _range_bound(raw: str, range_text: str) -> tuple[int, int]:
    match = _RANGE_BOUND.match(raw)
    if match is None:
        raise _LineError(f'Invalid month in range "{range_text}", expected YYYY/MM')
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise _LineError(f'Invalid month in range "{range_text}"')
    return year, month


def _price_line(parts: list[str]) -> list[PriceQuote]:
    if len(parts) < 3:
        raise _LineError("Expected at least 3 fields: symbol, range, price")
    symbol, range_text, *raw_prices = parts
    bounds = range_text.split("-")
    if len(bounds) != 2:
        raise _LineError(f'Invalid range "{range_text}", expected YYYY/MM-YYYY/MM')
    start = _range_bound(bounds[0], range_text)
    end = _range_bound(bounds[1], range_text)
    if start > end:
        raise _LineError(f'Invalid range "{range_text}": start is after end')

    months = month_range(start, end)
    if len(months) != len(raw_prices):
        raise _LineError(
            f"Price count ({len(raw_prices)}) does not match month count ({len(months)})"
        )
    normalized = _symbol(symbol)
    quotes = []
    for position, (key, raw) in enumerate(zip(months, raw_prices, strict=True), start=1):
        try:
            price = _number(raw, "price")
        except _LineError:
            raise _LineError(f'Price #{position} is invalid: "{raw}"') from None
        quotes.append(PriceQuote(normalized, key, price))
    return quotes


def parse_transactions(text: str) -> ParsedResult[ParsedTransaction]:
    return _parse(text, "transactions", _transaction_line)


def parse_dividends(text: str) -> ParsedResult[Dividend]:
    """Parse distributions; the net amount is derived from shares and rate."""
    return _parse(text, "dividends", _dividend_line)


def parse_donations(text: str) -> ParsedResult[Donation]:
    return _parse(text, "donations", _donation_line)


def parse_historical_prices(text: str) -> ParsedResult[PriceQuote]:
    """Parse monthly price ranges; one price per month of the range."""
    return _parse(text, "historical prices", _price_line)
