"""Data models for finledger."""

from finledger.models.enums import (
    AssetClass,
    BehaviorTag,
    CostMethod,
    PositionStatus,
    ResultStatus,
    TradeAction,
)
from finledger.models.reports import (
    CashFlowRow,
    FiscalLedgerEntry,
    HarvestCandidate,
    PortfolioRow,
    PortfolioSnapshot,
    PositionRow,
    ReportResult,
    TaxBasketRow,
    TaxBillEstimate,
    YearlyFiscalState,
)
from finledger.models.trade import (
    LossBasket,
    Lot,
    RawTradeRow,
    RealizedSale,
    TickerStats,
    Trade,
)

__all__ = [
    "AssetClass",
    "BehaviorTag",
    "CashFlowRow",
    "CostMethod",
    "FiscalLedgerEntry",
    "HarvestCandidate",
    "LossBasket",
    "Lot",
    "PortfolioRow",
    "PortfolioSnapshot",
    "PositionRow",
    "PositionStatus",
    "RawTradeRow",
    "RealizedSale",
    "ReportResult",
    "ResultStatus",
    "TaxBasketRow",
    "TaxBillEstimate",
    "TickerStats",
    "Trade",
    "TradeAction",
    "YearlyFiscalState",
]
