"""Core trade, lot and per-ticker state models."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from finledger.models.enums import AssetClass, TradeAction


@dataclass
class RawTradeRow:
    """One untyped row as the tabular store hands it over.

    Every field may be a string, a number, a date or None; the normalizer
    decides what it means.
    """

    date: Any = None
    ticker: Any = None
    action: Any = None
    quantity: Any = None
    price: Any = None
    spent: Any = None
    type: Any = None


class Trade(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: date
    ticker: str
    action: TradeAction
    quantity: Decimal = Field(ge=0)
    unit_price: Decimal
    total_amount: Decimal
    asset_class: AssetClass
    raw_action: str = ""

    @property
    def year(self) -> int:
        return self.date.year


class Lot(BaseModel):
    acquired_date: date
    remaining_shares: Decimal = Field(ge=0)
    unit_cost: Decimal

    @property
    def book_value(self) -> Decimal:
        return self.remaining_shares * self.unit_cost


class TickerStats(BaseModel):
    """Running totals for one ticker across the whole trade history."""

    ticker: str
    asset_class: AssetClass
    trading_pnl: Decimal = Decimal("0")
    dividends: Decimal = Decimal("0")
    total_invested_historical: Decimal = Decimal("0")
    first_buy_date: date | None = None
    first_buy_price: Decimal = Decimal("0")
    min_buy_price: Decimal | None = None
    max_buy_price: Decimal = Decimal("0")
    max_sell_price: Decimal = Decimal("0")
    total_sold_shares: Decimal = Decimal("0")
    total_sold_revenue: Decimal = Decimal("0")
    trade_count: int = 0
    last_activity_date: date | None = None

    @property
    def total_realized_pnl(self) -> Decimal:
        return self.trading_pnl + self.dividends

    @property
    def average_sell_price(self) -> Decimal:
        if self.total_sold_shares > 0:
            return self.total_sold_revenue / self.total_sold_shares
        return Decimal("0")


class RealizedSale(BaseModel):
    """A sell that closed (part of) one or more lots."""

    date: date
    ticker: str
    asset_class: AssetClass
    shares_sold: Decimal
    sale_price: Decimal
    cost_basis: Decimal
    excess_shares: Decimal = Decimal("0")

    @property
    def proceeds(self) -> Decimal:
        return self.shares_sold * self.sale_price

    @property
    def gain_loss(self) -> Decimal:
        return self.proceeds - self.cost_basis

    @property
    def average_cost(self) -> Decimal:
        if self.shares_sold > 0:
            return self.cost_basis / self.shares_sold
        return Decimal("0")


class LossBasket(BaseModel):
    """Carryforward of a net loss realized in ``origin_year``."""

    origin_year: int
    remaining_loss: Decimal = Field(ge=0)

    def age(self, year: int) -> int:
        return year - self.origin_year

    def is_expired(self, year: int, expiry_years: int) -> bool:
        return self.age(year) > expiry_years
