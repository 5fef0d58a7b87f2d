"""Historical reconstruction: point-in-time holdings by replaying trades."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Sequence

from finledger.config import DEFAULT_CONFIG, LedgerConfig
from finledger.engines.lot_matcher import LotMatcher
from finledger.models.enums import AssetClass, CostMethod, TradeAction
from finledger.models.reports import PortfolioSnapshot, ReportResult
from finledger.models.trade import Trade

logger = logging.getLogger(__name__)


@dataclass
class _Holding:
    asset_class: AssetClass
    quantity: Decimal = Decimal("0")
    invested: Decimal = Decimal("0")


class HistoryEngine:
    """Rebuilds holdings as they stood at past cutoff dates.

    Each cutoff is an independent replay of the trade feed, so the cost is
    years x trades. With ``CostMethod.FIFO`` the replay goes through the lot
    matcher and agrees with the live portfolio; ``CostMethod.AVERAGE``
    reduces invested capital proportionally on sells, which differs from
    FIFO book value whenever a ticker holds lots at different prices.
    """

    def __init__(self, config: LedgerConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        if config.reconstruction_method == CostMethod.AVERAGE:
            logger.warning(
                "Average-cost reconstruction selected; invested capital will not "
                "match FIFO book values for tickers with differently priced lots"
            )

    def snapshot(
        self,
        trades: Sequence[Trade],
        cutoff: date,
        year: int | None = None,
    ) -> list[PortfolioSnapshot]:
        """Holdings after every trade dated on or before ``cutoff``."""
        window = [trade for trade in trades if trade.date <= cutoff]
        if self.config.reconstruction_method == CostMethod.AVERAGE:
            holdings = self._replay_average(window)
        else:
            holdings = self._replay_fifo(window)

        return [
            PortfolioSnapshot(
                year=year or cutoff.year,
                snapshot_date=cutoff,
                ticker=ticker,
                asset_class=holding.asset_class,
                owned_quantity=holding.quantity,
                invested_at_cutoff=holding.invested,
            )
            for ticker, holding in sorted(holdings.items())
            if holding.quantity > self.config.snapshot_epsilon
        ]

    def evolution(self, trades: Sequence[Trade], as_of: date) -> ReportResult[PortfolioSnapshot]:
        """One snapshot per year end, from the first trade year up to ``as_of``."""
        if not trades:
            return ReportResult[PortfolioSnapshot].empty(PortfolioSnapshot.HEADER, "No trades found")

        start_year = min(trade.date for trade in trades).year
        rows: list[PortfolioSnapshot] = []
        for year in range(start_year, as_of.year + 1):
            cutoff = date(year, 12, 31) if year < as_of.year else as_of
            rows.extend(self.snapshot(trades, cutoff, year))
        return ReportResult[PortfolioSnapshot].build(rows, PortfolioSnapshot.HEADER)

    def _replay_fifo(self, trades: list[Trade]) -> dict[str, _Holding]:
        state = LotMatcher(self.config).run(trades)
        return {
            ticker: _Holding(
                asset_class=state.stats[ticker].asset_class,
                quantity=state.shares_held(ticker),
                invested=state.book_value(ticker),
            )
            for ticker in state.queues
        }

    def _replay_average(self, trades: list[Trade]) -> dict[str, _Holding]:
        holdings: dict[str, _Holding] = {}
        for trade in trades:
            holding = holdings.setdefault(trade.ticker, _Holding(asset_class=trade.asset_class))
            if trade.action == TradeAction.BUY:
                holding.quantity += trade.quantity
                holding.invested += trade.total_amount
            elif trade.action == TradeAction.SELL:
                if holding.quantity > 0:
                    sold = min(trade.quantity, holding.quantity)
                    holding.invested -= sold * (holding.invested / holding.quantity)
                    holding.quantity -= sold
            elif trade.action == TradeAction.SPLIT:
                holding.quantity += trade.quantity
        return holdings
