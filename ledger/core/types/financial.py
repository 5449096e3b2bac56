"""
Financial helpers for ledger calculations.

All money and share quantities are plain floats. The engine never divides
without a guard: every ratio goes through ``safe_divide`` or ``percentage``
so that zero cost, zero shares or zero proportional cost resolve to 0.

Precision Trade-offs:
- Float64 provides ~15-16 significant decimal digits, far more than a
  personal ledger needs for share counts and home-currency amounts
- Comparisons between derived totals must use ``safe_float_comparison``
- Rounding is a presentation concern; engine outputs stay unrounded
"""

# Rounding precision (number of decimal places)
AMOUNT_DECIMALS = 2  # Home-currency cash amounts
PRICE_DECIMALS = 2  # Per-share prices
SHARE_DECIMALS = 4  # Share quantities (odd lots)
PERCENTAGE_DECIMALS = 2  # Percentages shown to the user

# Common financial values as float constants
ZERO = 0.0
ONE = 1.0
HUNDRED = 100.0


def to_float(value: str | int | float) -> float:
    """Convert various numeric types to float.

    Args:
        value: Numeric value to convert

    Returns:
        Float representation of the value

    Examples:
        >>> to_float(50000)
        50000.0
        >>> to_float('1.5')
        1.5
    """
    if isinstance(value, float):
        return value
    return float(value)


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, resolving a zero denominator to 0 instead of raising.

    Examples:
        >>> safe_divide(10.0, 4.0)
        2.5
        >>> safe_divide(10.0, 0.0)
        0.0
    """
    if denominator == ZERO:
        return ZERO
    return numerator / denominator


def percentage(numerator: float, denominator: float) -> float:
    """Express ``numerator`` as a percentage of ``denominator``.

    Only a strictly positive denominator produces a ratio; zero and negative
    denominators resolve to 0.
    """
    if denominator <= ZERO:
        return ZERO
    return numerator / denominator * HUNDRED


def round_amount(amount: float) -> float:
    """Round a cash amount to display precision."""
    return round(amount, AMOUNT_DECIMALS)


def round_price(price: float) -> float:
    """Round a per-share price to display precision."""
    return round(price, PRICE_DECIMALS)


def round_shares(shares: float) -> float:
    """Round a share quantity to display precision."""
    return round(shares, SHARE_DECIMALS)


def round_percentage(value: float) -> float:
    """Round a percentage to display precision."""
    return round(value, PERCENTAGE_DECIMALS)


def buy_cost(shares: float, price: float, fees: float) -> float:
    """Total cash paid for a buy: ``shares * price + fees``."""
    return shares * price + fees


def sell_proceeds(shares: float, price: float, fees: float) -> float:
    """Net cash received for a sell: ``shares * price - fees``."""
    return shares * price - fees


def safe_float_comparison(a: float, b: float, tolerance: float = 1e-9) -> bool:
    """Compare floats with tolerance for precision issues.

    Args:
        a: First float to compare
        b: Second float to compare
        tolerance: Acceptable difference (default: 1e-9)

    Returns:
        True if floats are equal within tolerance

    Examples:
        >>> safe_float_comparison(0.1 + 0.2, 0.3)
        True
        >>> safe_float_comparison(1000000.1, 1000000.2, 0.01)
        False
    """
    return abs(a - b) < tolerance
