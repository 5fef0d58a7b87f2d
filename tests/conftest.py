"""Shared test fixtures for finledger."""

from datetime import date
from decimal import Decimal

import pytest

from finledger.config import LedgerConfig
from finledger.engines.lot_matcher import LotMatcher
from finledger.models.enums import AssetClass, TradeAction
from finledger.models.trade import RawTradeRow, Trade


@pytest.fixture
def make_trade():
    """Factory for canonical trades; ``total`` defaults to quantity x price."""

    def _make(
        day: date,
        ticker: str,
        action: TradeAction,
        quantity: str | int = "0",
        price: str | int = "0",
        asset_class: AssetClass = AssetClass.STOCK,
        total: str | int | None = None,
    ) -> Trade:
        quantity = Decimal(str(quantity))
        price = Decimal(str(price))
        return Trade(
            date=day,
            ticker=ticker,
            action=action,
            quantity=quantity,
            unit_price=price,
            total_amount=Decimal(str(total)) if total is not None else quantity * price,
            asset_class=asset_class,
            raw_action=action.value,
        )

    return _make


@pytest.fixture
def config() -> LedgerConfig:
    return LedgerConfig()


@pytest.fixture
def matcher(config: LedgerConfig) -> LotMatcher:
    return LotMatcher(config)


@pytest.fixture
def two_lot_trades(make_trade) -> list[Trade]:
    """Two lots at different prices, then a sell that spans both."""
    return [
        make_trade(date(2023, 1, 1), "ACME", TradeAction.BUY, 10, 100),
        make_trade(date(2023, 6, 1), "ACME", TradeAction.BUY, 10, 120),
        make_trade(date(2024, 1, 1), "ACME", TradeAction.SELL, 15, 150),
    ]


@pytest.fixture
def stock_rows() -> list[RawTradeRow]:
    """Stock sheet rows as a spreadsheet range would hand them over."""
    return [
        RawTradeRow(date="15/03/2023", ticker="ACME", action="Buy", quantity="10", price="100"),
        RawTradeRow(date="2023-04-01", ticker="VWCE", action="Buy", quantity="4",
                    price="95,50", type="ETF"),
        RawTradeRow(date="2023-06-30", ticker="ACME", action="Dividend", price="12,5"),
        RawTradeRow(date="2023-09-01", ticker="CASH", action="Deposit", quantity="1000"),
        RawTradeRow(date="2023-10-10", ticker="", action="Buy", quantity="1", price="1"),
        RawTradeRow(date="2024-02-01", ticker="ACME", action="Sell", quantity="4", price="130"),
    ]


@pytest.fixture
def crypto_rows() -> list[RawTradeRow]:
    return [
        RawTradeRow(date="2023-05-01", ticker="BTC", action="Buy", quantity="0.5",
                    spent="10000"),
        RawTradeRow(date="2023-07-01", ticker="BTC", action="Staking", quantity="0.01",
                    price="0"),
    ]


@pytest.fixture
def write_csv(tmp_path):
    """Write ``lines`` to a CSV file under tmp_path and return its path."""

    def _write(name: str, lines: list[str]):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
