"""Tests for the PortfolioLedger facade."""

from datetime import date
from decimal import Decimal

from finledger.config import LedgerConfig
from finledger.engines.portfolio_stats import PortfolioStatsEngine
from finledger.ledger import PortfolioLedger
from finledger.models.enums import AssetClass, ResultStatus
from finledger.models.trade import RawTradeRow


class TestPortfolioLedger:
    def setup_method(self):
        self.ledger = PortfolioLedger()

    def test_load(self, stock_rows, crypto_rows):
        normalized = self.ledger.load(stock_rows, crypto_rows)
        assert len(self.ledger.trades) == 6
        assert normalized.skipped_rows == 1
        assert normalized.excluded_rows == 1

    def test_portfolio(self, stock_rows, crypto_rows):
        self.ledger.load(stock_rows, crypto_rows)
        result = self.ledger.portfolio(date(2024, 6, 1))
        assert result.status == ResultStatus.SUCCESS
        rows = {row.ticker: row for row in result.rows}
        assert sorted(rows) == ["ACME", "BTC", "VWCE"]
        assert rows["ACME"].shares == Decimal("6")
        assert rows["ACME"].trading_pnl == Decimal("120")
        assert rows["ACME"].dividends == Decimal("12.5")
        assert rows["BTC"].shares == Decimal("0.51")
        assert rows["BTC"].book_value == Decimal("10000")

    def test_positions(self, stock_rows, crypto_rows):
        self.ledger.load(stock_rows, crypto_rows)
        result = self.ledger.positions()
        assert [(row.ticker, row.asset_class) for row in result.rows] == [
            ("ACME", AssetClass.STOCK),
            ("BTC", AssetClass.CRYPTO),
            ("VWCE", AssetClass.ETF),
        ]

    def test_fiscal_ledger(self, stock_rows, crypto_rows):
        self.ledger.load(stock_rows, crypto_rows)
        rows = self.ledger.fiscal_ledger().rows
        assert len(rows) == 1
        assert rows[0].gain_loss == Decimal("120")

    def test_tax_basket(self, stock_rows, crypto_rows):
        self.ledger.load(stock_rows, crypto_rows)
        rows = {row.year: row for row in self.ledger.tax_basket().rows}
        assert rows[2023].non_compensable_gain == Decimal("12.5")
        assert rows[2023].estimated_tax == Decimal("3.25")
        assert rows[2024].compensable_gain == Decimal("120")
        assert rows[2024].estimated_tax == Decimal("31.2")

    def test_tax_basket_without_crypto(self):
        ledger = PortfolioLedger(LedgerConfig(include_crypto_in_tax_basket=False))
        ledger.load(crypto_rows=[
            RawTradeRow(date="2024-01-01", ticker="BTC", action="Buy", quantity="1", price="100"),
            RawTradeRow(date="2024-02-01", ticker="BTC", action="Sell", quantity="1", price="900"),
        ])
        assert ledger.tax_basket().status == ResultStatus.EMPTY
        assert ledger.fiscal_ledger().rows[0].gain_loss == Decimal("800")

    def test_evolution(self, stock_rows, crypto_rows):
        self.ledger.load(stock_rows, crypto_rows)
        result = self.ledger.evolution(date(2024, 6, 1))
        assert len(result.rows) == 6
        assert {row.year for row in result.rows} == {2023, 2024}

    def test_cash_flows(self, stock_rows, crypto_rows):
        self.ledger.load(stock_rows, crypto_rows)
        rows = self.ledger.cash_flows().rows
        assert [(row.year, row.asset_class) for row in rows] == [
            (2023, AssetClass.CRYPTO),
            (2023, AssetClass.ETF),
            (2023, AssetClass.STOCK),
            (2024, AssetClass.STOCK),
        ]
        assert rows[3].sold == Decimal("520")

    def test_harvest(self, stock_rows, crypto_rows):
        self.ledger.load(stock_rows, crypto_rows)
        prices = {"ACME": Decimal("90"), "VWCE": Decimal("100"), "BTC": Decimal("30000")}
        result = self.ledger.harvest(prices)
        assert [c.ticker for c in result.rows] == ["ACME"]
        assert result.rows[0].potential_loss == Decimal("60")

    def test_normalization_warnings_make_reports_partial(self):
        self.ledger.load([
            RawTradeRow(date="someday", ticker="ACME", action="Buy", quantity="1", price="1"),
            RawTradeRow(date="2024-01-01", ticker="ACME", action="Buy", quantity="1", price="1"),
        ])
        result = self.ledger.portfolio(date(2024, 2, 1))
        assert result.status == ResultStatus.PARTIAL
        assert "invalid 'date'" in result.warnings[0]

    def test_load_tolerates_absurd_amounts(self):
        self.ledger.load([
            RawTradeRow(date="2024-01-01", ticker="ACME", action="Buy",
                        quantity="1E+600000", price="1E+600000"),
            RawTradeRow(date="2024-01-02", ticker="ACME", action="Buy", quantity="1", price="5"),
        ])
        assert len(self.ledger.trades) == 2
        positions = self.ledger.positions()
        assert positions.rows[0].shares == Decimal("1")

    def test_empty_ledger(self):
        assert self.ledger.portfolio().status == ResultStatus.EMPTY
        assert self.ledger.evolution().status == ResultStatus.EMPTY
        assert self.ledger.tax_basket().status == ResultStatus.EMPTY

    def test_failures_become_empty_results(self, monkeypatch, stock_rows):
        def boom(self, state, as_of):
            raise RuntimeError("boom")

        monkeypatch.setattr(PortfolioStatsEngine, "compute", boom)
        self.ledger.load(stock_rows)
        result = self.ledger.portfolio(date(2024, 1, 1))
        assert result.status == ResultStatus.EMPTY
        assert result.warnings == ["portfolio failed: boom"]

    def test_repeated_reports_agree(self, stock_rows, crypto_rows):
        self.ledger.load(stock_rows, crypto_rows)
        first = self.ledger.portfolio(date(2024, 6, 1))
        second = self.ledger.portfolio(date(2024, 6, 1))
        assert first.model_dump() == second.model_dump()
