"""
Pydantic models of the backup file.

Field names are snake_case in Python and camelCase on the wire, matching
backups written by the mobile app. Unknown keys are ignored so
newer backups still load.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ledger.core.enums import BudgetEntryType, Currency, DisplayMode, TransactionType


class BackupModel(BaseModel):
    """Base model for every backup record."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore", allow_inf_nan=False
    )


class TransactionRecord(BackupModel):
    id: str = Field(..., min_length=1)
    type: TransactionType
    shares: float = Field(..., gt=0)
    price: float = Field(..., ge=0)
    date: date
    fees: float = Field(default=0.0, ge=0)


class StockRecord(BackupModel):
    symbol: str = Field(..., min_length=1)
    name: str = ""
    current_price: float = Field(default=0.0, ge=0)
    transactions: list[TransactionRecord] = Field(default_factory=list)


class DividendRecord(BackupModel):
    id: str = Field(..., min_length=1)
    stock_symbol: str = Field(..., min_length=1)
    amount: float = Field(..., ge=0)
    date: date
    shares_held: float | None = Field(default=None, ge=0)
    dividend_per_share: float | None = Field(default=None, ge=0)


class DonationRecord(BackupModel):
    id: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    date: date
    description: str = ""


class BudgetEntryRecord(BackupModel):
    id: str = Field(..., min_length=1)
    type: BudgetEntryType
    amount: float = Field(..., ge=0)
    date: date
    description: str = ""


class HistoricalPriceRecord(BackupModel):
    stock_symbol: str = Field(..., min_length=1)
    prices: dict[str, float] = Field(default_factory=dict)


class ManualActualRecord(BackupModel):
    div_inflow: float = Field(default=0.0, ge=0)
    total_buy: float = Field(default=0.0, ge=0)


class StrategyRecord(BackupModel):
    id: str = Field(..., min_length=1)
    name: str = ""
    target_symbol: str = Field(..., min_length=1)
    initial_amount: float = Field(default=0.0, ge=0)
    monthly_amount: float = Field(default=0.0, ge=0)
    ex_div_extra_amount: float = Field(default=0.0, ge=0)
    reinvest: bool = True
    expected_annual_return: float = 0.0
    expected_dividend_yield: float = Field(default=0.0, ge=0)
    # year -> month -> figures; keys are strings on the wire
    manual_actuals: dict[str, dict[str, ManualActualRecord]] | None = None


class SettingsRecord(BackupModel):
    currency: Currency = Currency.TWD
    transaction_fee_rate: float = Field(default=0.001425, ge=0, lt=1)
    tax_rate: float = Field(default=0.001, ge=0, lt=1)
    display_mode: DisplayMode = DisplayMode.PERCENTAGE


class MetadataRecord(BackupModel):
    name: str = ""
    market: str = ""
    category: str = Field(default="", alias="type")
    industry: str = ""
    frequency: int = Field(default=1, ge=1, le=12)
    ex_div_months: list[int] = Field(default_factory=list)
    pay_months: list[int] = Field(default_factory=list)
    default_yield: float | None = Field(default=None, ge=0)
    payout_label: str | None = None


class BackupDocument(BackupModel):
    """The whole backup file.

    ``stocks``, ``dividends`` and ``donations`` are required; the other
    collections default to empty.
    """

    stocks: list[StockRecord]
    dividends: list[DividendRecord]
    donations: list[DonationRecord]
    budget_entries: list[BudgetEntryRecord] = Field(default_factory=list)
    historical_prices: list[HistoricalPriceRecord] = Field(default_factory=list)
    strategies: list[StrategyRecord] = Field(default_factory=list)
    settings: SettingsRecord | None = None
    stock_metadata: dict[str, MetadataRecord] = Field(default_factory=dict)
    export_date: str | None = None
