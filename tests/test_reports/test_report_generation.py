"""Tests for text report generation."""

from datetime import date
from decimal import Decimal

from finledger.engines.fiscal import FiscalEngine
from finledger.engines.lot_matcher import MatcherState
from finledger.engines.portfolio_stats import PortfolioStatsEngine
from finledger.models.enums import AssetClass, TradeAction
from finledger.models.reports import PositionRow, ReportResult
from finledger.reports import (
    PortfolioReportGenerator,
    TableReportGenerator,
    TaxBasketReportGenerator,
)
from finledger.reports.formatting import cell, money, percent


class TestFormatting:
    def test_cell(self):
        assert cell(None) == "-"
        assert cell(True) == "yes"
        assert cell(Decimal("1234")) == "1,234"
        assert cell(Decimal("2.5000")) == "2.5"
        assert cell(Decimal("0.12345679")) == "0.1235"
        assert cell(date(2024, 1, 2)) == "2024-01-02"
        assert cell("ACME") == "ACME"

    def test_money_and_percent(self):
        assert money(Decimal("1234.5")) == "1,234.50"
        assert money(None) == "-"
        assert percent(Decimal("0.295")) == "29.50%"


class TestTableReport:
    def _positions(self):
        rows = [
            PositionRow(ticker="ACME", asset_class=AssetClass.STOCK,
                        shares=Decimal("5"), average_price=Decimal("120")),
            PositionRow(ticker="VWCE", asset_class=AssetClass.ETF,
                        shares=Decimal("4"), average_price=Decimal("95.5")),
        ]
        return ReportResult[PositionRow].build(rows, PositionRow.HEADER)

    def test_format_lines(self):
        lines = TableReportGenerator.format_lines(self._positions())
        assert lines[0] == "Ticker | Type  | Shares | Avg Price"
        assert set(lines[1]) == {"-", "+"}
        assert lines[2] == "ACME   | Stock | 5      | 120"
        assert lines[3] == "VWCE   | ETF   | 4      | 95.5"

    def test_render(self):
        text = TableReportGenerator().render("Positions", self._positions())
        assert text.startswith("=== Positions ===")
        assert "VWCE" in text
        assert "Status: SUCCESS" in text

    def test_render_empty(self):
        result = ReportResult[PositionRow].empty(PositionRow.HEADER, "nothing here")
        text = TableReportGenerator().render("Positions", result)
        assert "No data." in text
        assert "  - nothing here" in text
        assert "Status: EMPTY" in text


class TestPortfolioReport:
    def test_render(self, matcher, two_lot_trades, make_trade):
        trades = two_lot_trades + [
            make_trade(date(2024, 2, 1), "OLDCO", TradeAction.BUY, 1, 10),
            make_trade(date(2024, 3, 1), "OLDCO", TradeAction.SELL, 1, 12),
        ]
        as_of = date(2024, 6, 1)
        result = PortfolioStatsEngine().compute(matcher.run(trades), as_of)
        text = PortfolioReportGenerator().render(result, as_of)
        assert "=== Portfolio Summary (as of 2024-06-01) ===" in text
        assert "Open positions: 1    Closed positions: 1" in text
        assert "Book value:     600.00" in text
        assert "ACME (Stock)" in text
        assert "Notes: Pure Trading | High Load Price" in text
        assert "OLDCO (Stock)   Realized 2.00" in text


class TestTaxBasketReport:
    def test_render(self, matcher, make_trade):
        trades = [
            make_trade(date(2024, 1, 10), "VWCE", TradeAction.BUY, 10, 100, AssetClass.ETF),
            make_trade(date(2024, 6, 1), "VWCE", TradeAction.SELL, 10, 150, AssetClass.ETF),
        ]
        result = FiscalEngine().tax_basket(matcher.run(trades))
        text = TaxBasketReportGenerator().render(result)
        assert text.startswith("=== Tax Basket (Loss Carryforward) ===")
        assert "Estimated tax:         130.00" in text
        assert "Tax on ETF/dividend gains." in text

    def test_render_empty(self):
        result = FiscalEngine().tax_basket(MatcherState())
        text = TaxBasketReportGenerator().render(result)
        assert "No realized gains, losses or dividends." in text

    def test_render_estimate(self):
        estimate = FiscalEngine().estimate_tax_bill(Decimal("1000"), Decimal("400"))
        text = TaxBasketReportGenerator().render_estimate(estimate)
        assert "Taxable base:                  600.00" in text
        assert "Estimated tax due:             156.00" in text
