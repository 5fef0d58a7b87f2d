"""Portfolio statistics: per-ticker display metrics and behavioral tags."""

from datetime import date
from decimal import Decimal

from finledger.config import DEFAULT_CONFIG, LedgerConfig
from finledger.engines.lot_matcher import MatcherState
from finledger.models.enums import BehaviorTag, PositionStatus
from finledger.models.reports import PortfolioRow, ReportResult
from finledger.models.trade import TickerStats


class PortfolioStatsEngine:
    """Derives the portfolio dashboard table from a finished matcher pass.

    The engine only reads ``MatcherState``; running it twice on the same
    state yields identical rows.
    """

    def __init__(self, config: LedgerConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def compute(self, state: MatcherState, as_of: date) -> ReportResult[PortfolioRow]:
        tickers = state.tickers()
        if not tickers:
            return ReportResult[PortfolioRow].empty(PortfolioRow.HEADER, "No trades to report")

        book_values = {ticker: state.book_value(ticker) for ticker in tickers}
        grand_total = sum(book_values.values(), Decimal("0"))

        rows = [
            self._build_row(state, state.stats[ticker], book_values[ticker], grand_total, as_of)
            for ticker in tickers
        ]
        return ReportResult[PortfolioRow].build(rows, PortfolioRow.HEADER, state.warnings)

    def _build_row(
        self,
        state: MatcherState,
        stats: TickerStats,
        book_value: Decimal,
        grand_total: Decimal,
        as_of: date,
    ) -> PortfolioRow:
        shares = state.shares_held(stats.ticker)
        is_open = shares > self.config.open_epsilon
        total_realized = stats.total_realized_pnl
        invested = stats.total_invested_historical

        average_price = book_value / shares if shares > 0 else Decimal("0")
        break_even = (book_value - total_realized) / shares if shares > 0 else Decimal("0")
        allocation = book_value / grand_total if grand_total > 0 else Decimal("0")
        trading_roi = stats.trading_pnl / invested if invested > 0 else Decimal("0")
        total_roi = total_realized / invested if invested > 0 else Decimal("0")

        days_held = 0
        active_since = state.active_since(stats.ticker)
        if is_open and active_since is not None:
            days_held = (as_of - active_since).days

        row = PortfolioRow(
            ticker=stats.ticker,
            asset_class=stats.asset_class,
            status=PositionStatus.OPEN if is_open else PositionStatus.CLOSED,
            shares=shares,
            average_price=average_price,
            total_invested_historical=invested,
            trading_pnl=stats.trading_pnl,
            dividends=stats.dividends,
            total_realized_pnl=total_realized,
            break_even_price=break_even,
            book_value=book_value,
            allocation_pct=allocation,
            trading_roi=trading_roi,
            total_roi=total_roi,
            first_buy_date=stats.first_buy_date,
            first_buy_price=stats.first_buy_price,
            min_buy_price=stats.min_buy_price or Decimal("0"),
            max_buy_price=stats.max_buy_price,
            max_sell_price=stats.max_sell_price,
            average_sell_price=stats.average_sell_price,
            days_held=days_held,
            last_activity_date=stats.last_activity_date,
            trade_count=stats.trade_count,
        )
        row.tags = self.tag(row)
        return row

    def tag(self, row: PortfolioRow) -> list[BehaviorTag]:
        """Rule-based portfolio-health annotations for one row."""
        limits = self.config.behavior
        is_open = row.status == PositionStatus.OPEN
        tags: list[BehaviorTag] = []

        if row.trading_roi < limits.cash_cow_trading_roi and row.total_roi > 0:
            tags.append(BehaviorTag.CASH_COW)
        if (
            row.trading_roi > limits.pure_trading_roi
            and row.total_roi - row.trading_roi < limits.pure_trading_dividend_share
        ):
            tags.append(BehaviorTag.PURE_TRADING)
        if 0 < row.min_buy_price < row.first_buy_price * limits.good_dca_ratio:
            tags.append(BehaviorTag.GOOD_DCA)
        if (
            is_open
            and row.trade_count > 1
            and row.average_price > row.max_buy_price * limits.high_load_ratio
        ):
            tags.append(BehaviorTag.HIGH_LOAD_PRICE)
        if is_open and row.days_held > limits.dead_money_days and row.total_roi < 0:
            tags.append(BehaviorTag.DEAD_MONEY)
        if row.average_sell_price > 0 and row.average_sell_price > row.max_buy_price:
            tags.append(BehaviorTag.SNIPER)
        return tags
