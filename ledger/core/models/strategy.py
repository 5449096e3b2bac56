"""
Compound-growth strategy domain model.
"""

from dataclasses import dataclass, field, replace

from ledger.core.exceptions.ledger import ValidationError
from ledger.core.utils.validation import validate_month, validate_symbol


@dataclass(frozen=True)
class ManualActual:
    """A user-entered override of one month's real activity."""

    dividend_inflow: float = 0.0
    total_buy: float = 0.0

    def __post_init__(self) -> None:
        if self.dividend_inflow < 0 or self.total_buy < 0:
            raise ValidationError("Manual actuals must be non-negative")


@dataclass(frozen=True)
class Strategy:
    """Parameters of a "what-if" reinvestment plan for one instrument.

    ``manual_actuals`` is sparse: year -> month -> override.
    """

    id: str
    target_symbol: str
    name: str = ""
    initial_amount: float = 0.0
    monthly_amount: float = 0.0
    ex_div_extra_amount: float = 0.0
    reinvest: bool = True
    expected_annual_return: float = 0.0
    expected_dividend_yield: float = 0.0
    manual_actuals: dict[int, dict[int, ManualActual]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValidationError("Strategy id cannot be empty")
        object.__setattr__(
            self, "target_symbol", validate_symbol(self.target_symbol, "target_symbol")
        )
        for label, value in (
            ("initial_amount", self.initial_amount),
            ("monthly_amount", self.monthly_amount),
            ("ex_div_extra_amount", self.ex_div_extra_amount),
            ("expected_dividend_yield", self.expected_dividend_yield),
        ):
            if value < 0:
                raise ValidationError(f"{label} must be non-negative, got {value}")
        if self.expected_annual_return <= -100:
            raise ValidationError(
                f"expected_annual_return must be above -100, got {self.expected_annual_return}"
            )
        for months in self.manual_actuals.values():
            for month in months:
                validate_month(month, "manual actual month")

    def manual_actual_for(self, year: int, month: int) -> ManualActual | None:
        return self.manual_actuals.get(year, {}).get(month)

    def with_manual_actual(self, year: int, month: int, actual: ManualActual) -> "Strategy":
        """Return a copy with the override for ``year``/``month`` set."""
        validate_month(month)
        months = {**self.manual_actuals.get(year, {}), month: actual}
        return replace(self, manual_actuals={**self.manual_actuals, year: months})

    def without_manual_actual(self, year: int, month: int) -> "Strategy":
        """Return a copy with the override removed; empty years are dropped."""
        if self.manual_actual_for(year, month) is None:
            return self
        months = {m: a for m, a in self.manual_actuals[year].items() if m != month}
        actuals = {y: ms for y, ms in self.manual_actuals.items() if y != year}
        if months:
            actuals[year] = months
        return replace(self, manual_actuals=actuals)
