"""Lot matching engine: FIFO consumption of per-ticker lot queues."""

import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from finledger.config import DEFAULT_CONFIG, LedgerConfig
from finledger.exceptions import UnsortedTradesError
from finledger.models.enums import AssetClass, TradeAction
from finledger.models.reports import PositionRow
from finledger.models.trade import Lot, RealizedSale, TickerStats, Trade

logger = logging.getLogger(__name__)


@dataclass
class MatcherState:
    """Everything one matcher pass produced.

    Queues and stats belong to the pass that built them. Readers should go
    through the accessor methods, which hand out copies of the lots.
    """

    queues: dict[str, deque[Lot]] = field(default_factory=dict)
    stats: dict[str, TickerStats] = field(default_factory=dict)
    realized_sales: list[RealizedSale] = field(default_factory=list)
    dividend_payments: list[Trade] = field(default_factory=list)
    dropped_shares: dict[str, Decimal] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def tickers(self) -> list[str]:
        return sorted(self.stats)

    def open_lots(self, ticker: str) -> list[Lot]:
        return [lot.model_copy() for lot in self.queues.get(ticker, ())]

    def shares_held(self, ticker: str) -> Decimal:
        return sum((lot.remaining_shares for lot in self.queues.get(ticker, ())), Decimal("0"))

    def book_value(self, ticker: str) -> Decimal:
        return sum((lot.book_value for lot in self.queues.get(ticker, ())), Decimal("0"))

    def active_since(self, ticker: str) -> date | None:
        queue = self.queues.get(ticker)
        return queue[0].acquired_date if queue else None

    def positions(self) -> list[PositionRow]:
        """Current holdings per tracked queue, including retained empty rows."""
        rows: list[PositionRow] = []
        for ticker in sorted(self.queues):
            shares = self.shares_held(ticker)
            book = self.book_value(ticker)
            rows.append(PositionRow(
                ticker=ticker,
                asset_class=self.stats[ticker].asset_class,
                shares=shares,
                average_price=book / shares if shares > 0 else Decimal("0"),
            ))
        return rows


class LotMatcher:
    """Replays a chronological trade feed through per-ticker FIFO queues."""

    def __init__(self, config: LedgerConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def run(self, trades: Sequence[Trade]) -> MatcherState:
        """Process trades oldest first and return the resulting state.

        Raises:
            UnsortedTradesError: if a trade is dated before its predecessor.
        """
        state = MatcherState()
        previous: date | None = None
        for position, trade in enumerate(trades):
            if previous is not None and trade.date < previous:
                raise UnsortedTradesError(position, previous, trade.date)
            previous = trade.date
            self.apply(state, trade)
        return state

    def apply(self, state: MatcherState, trade: Trade) -> None:
        """Apply a single trade to ``state``."""
        stats = state.stats.get(trade.ticker)
        if stats is None:
            stats = TickerStats(ticker=trade.ticker, asset_class=trade.asset_class)
            state.stats[trade.ticker] = stats
        stats.trade_count += 1
        stats.last_activity_date = trade.date

        if trade.action == TradeAction.BUY:
            self._buy(state, stats, trade)
        elif trade.action == TradeAction.SELL:
            self._sell(state, stats, trade)
        elif trade.action == TradeAction.DIVIDEND:
            stats.dividends += trade.total_amount
            state.dividend_payments.append(trade)
        elif trade.action == TradeAction.SPLIT:
            self._split(state, trade)

    def _round(self, value: Decimal, asset_class: AssetClass) -> Decimal:
        return value.quantize(self.config.quantum_for(asset_class), rounding=ROUND_HALF_UP)

    def _buy(self, state: MatcherState, stats: TickerStats, trade: Trade) -> None:
        if stats.total_invested_historical == 0:
            stats.first_buy_date = trade.date
            stats.first_buy_price = trade.unit_price
        if trade.unit_price > 0:
            if stats.min_buy_price is None or trade.unit_price < stats.min_buy_price:
                stats.min_buy_price = trade.unit_price
            if trade.unit_price > stats.max_buy_price:
                stats.max_buy_price = trade.unit_price
        stats.total_invested_historical += trade.total_amount

        shares = self._round(trade.quantity, trade.asset_class)
        if shares <= 0:
            return
        queue = state.queues.setdefault(trade.ticker, deque())
        queue.append(Lot(
            acquired_date=trade.date,
            remaining_shares=shares,
            unit_cost=trade.unit_price,
        ))

    def _sell(self, state: MatcherState, stats: TickerStats, trade: Trade) -> None:
        if trade.unit_price > stats.max_sell_price:
            stats.max_sell_price = trade.unit_price
        stats.total_sold_shares += trade.quantity
        stats.total_sold_revenue += trade.quantity * trade.unit_price

        asset_class = trade.asset_class
        queue = state.queues.get(trade.ticker)
        to_sell = self._round(trade.quantity, asset_class)
        shares_sold = Decimal("0")
        cost_basis = Decimal("0")

        while to_sell > 0 and queue:
            oldest = queue[0]
            available = self._round(oldest.remaining_shares, asset_class)
            taken = min(available, to_sell)

            oldest.remaining_shares = self._round(oldest.remaining_shares - taken, asset_class)
            to_sell = self._round(to_sell - taken, asset_class)
            if oldest.remaining_shares == 0:
                queue.popleft()

            cost_basis += taken * oldest.unit_cost
            shares_sold += taken

        if shares_sold > 0:
            stats.trading_pnl += shares_sold * trade.unit_price - cost_basis
            state.realized_sales.append(RealizedSale(
                date=trade.date,
                ticker=trade.ticker,
                asset_class=asset_class,
                shares_sold=shares_sold,
                sale_price=trade.unit_price,
                cost_basis=cost_basis,
                excess_shares=to_sell,
            ))

        if to_sell > 0:
            state.dropped_shares[trade.ticker] = (
                state.dropped_shares.get(trade.ticker, Decimal("0")) + to_sell
            )
            message = (
                f"Sell of {trade.quantity} {trade.ticker} on {trade.date} exceeds "
                f"holdings by {to_sell}; excess ignored"
            )
            logger.warning(message)
            state.warnings.append(message)

        if queue is not None and not queue and not self._keeps_empty_row(trade):
            del state.queues[trade.ticker]

    def _keeps_empty_row(self, trade: Trade) -> bool:
        """Closed Stock/ETF positions stay listed when sold on/after the cutoff."""
        if trade.asset_class == AssetClass.CRYPTO:
            return False
        cutoff = self.config.keep_closed_rows_after
        return cutoff is not None and trade.date >= cutoff

    def _split(self, state: MatcherState, trade: Trade) -> None:
        """Spread the extra split shares over open lots, keeping each lot's cost."""
        asset_class = trade.asset_class
        queue = state.queues.get(trade.ticker)
        added = self._round(trade.quantity, asset_class)
        held = state.shares_held(trade.ticker)
        if not queue or held <= 0 or added <= 0:
            message = f"Split of {trade.ticker} on {trade.date} has no open lots; ignored"
            logger.warning(message)
            state.warnings.append(message)
            return

        remaining_extra = added
        for index, lot in enumerate(queue):
            if index == len(queue) - 1:
                extra = remaining_extra
            else:
                extra = self._round(added * lot.remaining_shares / held, asset_class)
                remaining_extra -= extra
            lot_cost = lot.book_value
            lot.remaining_shares = self._round(lot.remaining_shares + extra, asset_class)
            lot.unit_cost = lot_cost / lot.remaining_shares
