"""Ledger facade: the no-throw entry points used by reporting layers.

Every report is recomputed from the loaded trades with a fresh matcher
pass, and every method returns a well-formed ``ReportResult``. Failures are
logged and surface as an EMPTY result carrying the error text.
"""

import functools
import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Mapping

from finledger.config import DEFAULT_CONFIG, LedgerConfig
from finledger.engines import (
    CashFlowEngine,
    FiscalEngine,
    HarvestingScanner,
    HistoryEngine,
    LotMatcher,
    MatcherState,
    PortfolioStatsEngine,
)
from finledger.models.enums import AssetClass
from finledger.models.reports import (
    CashFlowRow,
    FiscalLedgerEntry,
    HarvestCandidate,
    PortfolioRow,
    PortfolioSnapshot,
    PositionRow,
    ReportResult,
    TaxBasketRow,
)
from finledger.models.trade import RawTradeRow, Trade
from finledger.normalization import NormalizationResult, TradeNormalizer

logger = logging.getLogger(__name__)


def _never_raises(row_type: type) -> Callable:
    """Turn any exception from a report method into an EMPTY result."""

    def decorator(method: Callable) -> Callable:
        @functools.wraps(method)
        def wrapper(self, *args, **kwargs):
            try:
                return method(self, *args, **kwargs)
            except Exception as exc:
                logger.exception("%s failed", method.__name__)
                return ReportResult[row_type].empty(
                    row_type.HEADER, f"{method.__name__} failed: {exc}"
                )

        return wrapper

    return decorator


class PortfolioLedger:
    """Loads raw stock and crypto rows and serves every report over them."""

    def __init__(self, config: LedgerConfig = DEFAULT_CONFIG) -> None:
        self.config = config
        self.normalized = NormalizationResult()

    @property
    def trades(self) -> list[Trade]:
        return self.normalized.trades

    def load(
        self,
        stock_rows: Iterable[RawTradeRow] = (),
        crypto_rows: Iterable[RawTradeRow] = (),
    ) -> NormalizationResult:
        """Normalize both ledgers into one sorted trade feed."""
        normalizer = TradeNormalizer(self.config)
        self.normalized = TradeNormalizer.merge(
            normalizer.normalize(stock_rows, AssetClass.STOCK),
            normalizer.normalize(crypto_rows, AssetClass.CRYPTO),
        )
        logger.info(
            "Loaded %d trades (%d rows skipped, %d cash rows excluded)",
            len(self.trades), self.normalized.skipped_rows, self.normalized.excluded_rows,
        )
        return self.normalized

    def _match(self, trades: list[Trade] | None = None) -> MatcherState:
        state = LotMatcher(self.config).run(self.trades if trades is None else trades)
        state.warnings[:0] = self.normalized.warnings
        return state

    @_never_raises(PortfolioRow)
    def portfolio(self, as_of: date | None = None) -> ReportResult[PortfolioRow]:
        return PortfolioStatsEngine(self.config).compute(self._match(), as_of or date.today())

    @_never_raises(PositionRow)
    def positions(self) -> ReportResult[PositionRow]:
        state = self._match()
        return ReportResult[PositionRow].build(state.positions(), PositionRow.HEADER, state.warnings)

    @_never_raises(FiscalLedgerEntry)
    def fiscal_ledger(self) -> ReportResult[FiscalLedgerEntry]:
        return FiscalEngine(self.config).fiscal_ledger(self._match())

    @_never_raises(TaxBasketRow)
    def tax_basket(self, through_year: int | None = None) -> ReportResult[TaxBasketRow]:
        trades = self.trades
        if not self.config.include_crypto_in_tax_basket:
            trades = [trade for trade in trades if trade.asset_class != AssetClass.CRYPTO]
        return FiscalEngine(self.config).tax_basket(self._match(trades), through_year)

    @_never_raises(PortfolioSnapshot)
    def evolution(self, as_of: date | None = None) -> ReportResult[PortfolioSnapshot]:
        return HistoryEngine(self.config).evolution(self.trades, as_of or date.today())

    @_never_raises(CashFlowRow)
    def cash_flows(self) -> ReportResult[CashFlowRow]:
        return CashFlowEngine().compute(self.trades)

    @_never_raises(HarvestCandidate)
    def harvest(self, prices: Mapping[str, Decimal]) -> ReportResult[HarvestCandidate]:
        return HarvestingScanner(self.config).scan(self._match().positions(), prices)
