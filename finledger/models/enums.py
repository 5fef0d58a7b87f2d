"""Enumerations for finledger."""

from enum import StrEnum


class AssetClass(StrEnum):
    STOCK = "Stock"
    ETF = "ETF"
    CRYPTO = "Crypto"


class TradeAction(StrEnum):
    BUY = "BUY"
    SELL = "SELL"
    DIVIDEND = "DIVIDEND"
    SPLIT = "SPLIT"
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"


class PositionStatus(StrEnum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class ResultStatus(StrEnum):
    SUCCESS = "SUCCESS"
    EMPTY = "EMPTY"
    PARTIAL = "PARTIAL"


class CostMethod(StrEnum):
    FIFO = "FIFO"
    AVERAGE = "AVERAGE"


class BehaviorTag(StrEnum):
    CASH_COW = "Cash Cow: gain via dividends"
    PURE_TRADING = "Pure Trading"
    GOOD_DCA = "Good DCA"
    HIGH_LOAD_PRICE = "High Load Price"
    DEAD_MONEY = "Dead Money"
    SNIPER = "Sniper: selling higher than buying"
