"""Portfolio accounting engines."""

from finledger.engines.cash_flow import CashFlowEngine
from finledger.engines.fiscal import FiscalEngine
from finledger.engines.harvesting import HarvestingScanner
from finledger.engines.history import HistoryEngine
from finledger.engines.lot_matcher import LotMatcher, MatcherState
from finledger.engines.portfolio_stats import PortfolioStatsEngine

__all__ = [
    "CashFlowEngine",
    "FiscalEngine",
    "HarvestingScanner",
    "HistoryEngine",
    "LotMatcher",
    "MatcherState",
    "PortfolioStatsEngine",
]
