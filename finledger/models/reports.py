"""Report output models.

Every report row knows its table header (``HEADER``) and how to flatten
itself (``as_row``), so the UI layer can consume reports as plain tables.
"""

from datetime import date
from decimal import Decimal
from typing import ClassVar, Generic, TypeVar

from pydantic import BaseModel, Field

from finledger.models.enums import AssetClass, BehaviorTag, PositionStatus, ResultStatus


class PortfolioRow(BaseModel):
    HEADER: ClassVar[list[str]] = [
        "Ticker", "Type", "Status", "Shares", "Avg Price", "Invested (Hist.)",
        "Trading P&L", "Dividends", "Total Realized", "Break-Even",
        "Book Value", "Allocation", "Trading ROI", "Total ROI",
        "First Buy Date", "First Buy Price", "Min Buy", "Max Buy",
        "Max Sell", "Avg Sell", "Days Held", "Last Activity", "Trades", "Note",
    ]

    ticker: str
    asset_class: AssetClass
    status: PositionStatus
    shares: Decimal
    average_price: Decimal
    total_invested_historical: Decimal
    trading_pnl: Decimal
    dividends: Decimal
    total_realized_pnl: Decimal
    break_even_price: Decimal
    book_value: Decimal
    allocation_pct: Decimal
    trading_roi: Decimal
    total_roi: Decimal
    first_buy_date: date | None
    first_buy_price: Decimal
    min_buy_price: Decimal
    max_buy_price: Decimal
    max_sell_price: Decimal
    average_sell_price: Decimal
    days_held: int
    last_activity_date: date | None
    trade_count: int
    tags: list[BehaviorTag] = Field(default_factory=list)

    @property
    def note(self) -> str:
        return " | ".join(tag.value for tag in self.tags)

    def as_row(self) -> list:
        return [
            self.ticker, self.asset_class.value, self.status.value, self.shares,
            self.average_price, self.total_invested_historical, self.trading_pnl,
            self.dividends, self.total_realized_pnl, self.break_even_price,
            self.book_value, self.allocation_pct, self.trading_roi, self.total_roi,
            self.first_buy_date, self.first_buy_price, self.min_buy_price,
            self.max_buy_price, self.max_sell_price, self.average_sell_price,
            self.days_held, self.last_activity_date, self.trade_count, self.note,
        ]


class PositionRow(BaseModel):
    HEADER: ClassVar[list[str]] = ["Ticker", "Type", "Shares", "Avg Price"]

    ticker: str
    asset_class: AssetClass
    shares: Decimal
    average_price: Decimal

    def as_row(self) -> list:
        return [self.ticker, self.asset_class.value, self.shares, self.average_price]


class FiscalLedgerEntry(BaseModel):
    HEADER: ClassVar[list[str]] = [
        "Date", "Year", "Ticker", "Type", "Sold Qty", "Sell Price",
        "Load Price", "P&L (Gain)", "Tax", "Capital Loss",
    ]

    date: date
    year: int
    ticker: str
    asset_class: AssetClass
    shares_sold: Decimal
    sale_price: Decimal
    load_price: Decimal
    gain_loss: Decimal
    tax: Decimal
    capital_loss: Decimal

    def as_row(self) -> list:
        return [
            self.date, self.year, self.ticker, self.asset_class.value,
            self.shares_sold, self.sale_price, self.load_price,
            self.gain_loss, self.tax, self.capital_loss,
        ]


class YearlyFiscalState(BaseModel):
    """Realized results of one calendar year, split by basket eligibility."""

    year: int
    compensable_gain: Decimal = Decimal("0")
    non_compensable_gain: Decimal = Decimal("0")
    new_loss: Decimal = Decimal("0")

    @property
    def net_compensable(self) -> Decimal:
        return self.compensable_gain - self.new_loss


class TaxBasketRow(BaseModel):
    HEADER: ClassVar[list[str]] = [
        "Year", "Compensable Gain", "Non-Compensable Gain", "New Losses",
        "Basket Used", "Basket Expired", "Net Taxable", "Estimated Tax",
        "Residual Basket", "Analysis & Strategy",
    ]

    year: int
    compensable_gain: Decimal
    non_compensable_gain: Decimal
    new_loss: Decimal
    basket_used: Decimal
    basket_expired: Decimal
    taxable_base: Decimal
    estimated_tax: Decimal
    residual_basket: Decimal
    notes: list[str] = Field(default_factory=list)

    @property
    def note(self) -> str:
        return " ".join(self.notes)

    def as_row(self) -> list:
        return [
            self.year, self.compensable_gain, self.non_compensable_gain,
            self.new_loss, self.basket_used, self.basket_expired,
            self.taxable_base, self.estimated_tax, self.residual_basket, self.note,
        ]


class TaxBillEstimate(BaseModel):
    realized_gains: Decimal
    realized_losses: Decimal
    net_position: Decimal
    available_basket: Decimal
    taxable_base: Decimal
    estimated_tax: Decimal
    residual_basket: Decimal
    new_basket: Decimal


class PortfolioSnapshot(BaseModel):
    HEADER: ClassVar[list[str]] = [
        "Year", "Snapshot Date", "Ticker", "Type", "Owned Qty", "Invested at Cutoff",
    ]

    year: int
    snapshot_date: date
    ticker: str
    asset_class: AssetClass
    owned_quantity: Decimal
    invested_at_cutoff: Decimal

    def as_row(self) -> list:
        return [
            self.year, self.snapshot_date, self.ticker, self.asset_class.value,
            self.owned_quantity, self.invested_at_cutoff,
        ]


class CashFlowRow(BaseModel):
    HEADER: ClassVar[list[str]] = [
        "Year", "Asset Type", "Deposits (Buys)", "Withdrawals (Sells)",
        "Net Dividends", "Total Inflow", "Net Flow",
    ]

    year: int
    asset_class: AssetClass
    bought: Decimal = Decimal("0")
    sold: Decimal = Decimal("0")
    dividends: Decimal = Decimal("0")

    @property
    def total_inflow(self) -> Decimal:
        return self.sold + self.dividends

    @property
    def net_flow(self) -> Decimal:
        return self.total_inflow - self.bought

    def as_row(self) -> list:
        return [
            self.year, self.asset_class.value, self.bought, self.sold,
            self.dividends, self.total_inflow, self.net_flow,
        ]


class HarvestCandidate(BaseModel):
    HEADER: ClassVar[list[str]] = [
        "Ticker", "Qty", "Unrealized P&L", "Tax Credit (Loss)", "Note",
    ]

    ticker: str
    asset_class: AssetClass
    shares: Decimal
    average_price: Decimal
    current_price: Decimal
    unrealized_pnl: Decimal
    potential_loss: Decimal
    note: str = ""

    def as_row(self) -> list:
        return [
            self.ticker, self.shares, self.unrealized_pnl,
            self.potential_loss, self.note,
        ]


RowT = TypeVar("RowT", bound=BaseModel)


class ReportResult(BaseModel, Generic[RowT]):
    """Tagged outcome of a report run.

    ``EMPTY`` means there was nothing to report, ``PARTIAL`` means rows were
    produced but some input was skipped or tolerated (see ``warnings``).
    """

    status: ResultStatus
    rows: list[RowT] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    header: list[str] = Field(default_factory=list)

    @classmethod
    def build(
        cls,
        rows: list,
        header: list[str],
        warnings: list[str] | None = None,
    ) -> "ReportResult":
        warnings = list(warnings or [])
        if not rows:
            status = ResultStatus.EMPTY
        elif warnings:
            status = ResultStatus.PARTIAL
        else:
            status = ResultStatus.SUCCESS
        return cls(status=status, rows=rows, warnings=warnings, header=header)

    @classmethod
    def empty(cls, header: list[str], reason: str | None = None) -> "ReportResult":
        return cls(
            status=ResultStatus.EMPTY,
            warnings=[reason] if reason else [],
            header=header,
        )

    @property
    def is_empty(self) -> bool:
        return self.status == ResultStatus.EMPTY

    def table(self) -> list[list]:
        """Header row followed by one flat list per report row."""
        return [list(self.header)] + [row.as_row() for row in self.rows]
