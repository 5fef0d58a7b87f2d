"""Normalization layer: raw sheet rows to canonical trades."""

from finledger.normalization.actions import classify_action
from finledger.normalization.numbers import parse_amount, parse_trade_date
from finledger.normalization.trades import NormalizationResult, TradeNormalizer

__all__ = [
    "NormalizationResult",
    "TradeNormalizer",
    "classify_action",
    "parse_amount",
    "parse_trade_date",
]
