"""Tests for yearly cash flows."""

from datetime import date
from decimal import Decimal

from finledger.engines.cash_flow import CashFlowEngine
from finledger.models.enums import AssetClass, ResultStatus, TradeAction


class TestCashFlows:
    def test_flows_by_year_and_class(self, make_trade):
        trades = [
            make_trade(date(2023, 1, 1), "ACME", TradeAction.BUY, 10, 100),
            make_trade(date(2023, 2, 1), "VWCE", TradeAction.BUY, 2, 50, AssetClass.ETF),
            make_trade(date(2023, 3, 1), "ACME", TradeAction.DIVIDEND, total="30"),
            make_trade(date(2024, 1, 1), "ACME", TradeAction.SELL, 4, 120),
        ]
        result = CashFlowEngine().compute(trades)
        assert result.status == ResultStatus.SUCCESS
        keys = [(row.year, row.asset_class) for row in result.rows]
        assert keys == [(2023, AssetClass.ETF), (2023, AssetClass.STOCK), (2024, AssetClass.STOCK)]

        stock_2023 = result.rows[1]
        assert stock_2023.bought == Decimal("1000")
        assert stock_2023.dividends == Decimal("30")
        assert stock_2023.net_flow == Decimal("-970")

        stock_2024 = result.rows[2]
        assert stock_2024.sold == Decimal("480")
        assert stock_2024.total_inflow == Decimal("480")

    def test_crypto_sell_uses_total_amount(self, make_trade):
        trades = [
            make_trade(date(2024, 1, 1), "BTC", TradeAction.SELL, "0.1", 30000,
                       AssetClass.CRYPTO, total="2950"),
        ]
        row = CashFlowEngine().compute(trades).rows[0]
        assert row.sold == Decimal("2950")

    def test_years_without_movement_dropped(self, make_trade):
        trades = [make_trade(date(2024, 1, 1), "ACME", TradeAction.SPLIT, 10)]
        result = CashFlowEngine().compute(trades)
        assert result.status == ResultStatus.EMPTY
