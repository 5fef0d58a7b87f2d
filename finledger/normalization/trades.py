"""Trade normalization: raw sheet rows to sorted canonical trades."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Sequence

from finledger.config import DEFAULT_CONFIG, LedgerConfig
from finledger.exceptions import InvalidRowError
from finledger.models.enums import AssetClass, TradeAction
from finledger.models.trade import RawTradeRow, Trade
from finledger.normalization.actions import classify_action
from finledger.normalization.numbers import parse_amount, parse_trade_date

logger = logging.getLogger(__name__)


@dataclass
class NormalizationResult:
    """Normalized trades plus an account of what was left out."""

    trades: list[Trade] = field(default_factory=list)
    skipped_rows: int = 0
    excluded_rows: int = 0
    warnings: list[str] = field(default_factory=list)


class TradeNormalizer:
    """Turns raw rows of one asset-class sheet into canonical ``Trade``s."""

    def __init__(self, config: LedgerConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def normalize(
        self,
        rows: Iterable[RawTradeRow],
        asset_class: AssetClass = AssetClass.STOCK,
    ) -> NormalizationResult:
        """Normalize rows and return them sorted by date (stable on ties).

        ``asset_class`` selects the sheet rules: ``CRYPTO`` for the crypto
        ledger, anything else for the stock ledger, where each row's type
        column decides between Stock and ETF.
        """
        result = NormalizationResult()

        for index, row in enumerate(rows):
            ticker = str(row.ticker).strip() if row.ticker is not None else ""
            if not ticker:
                result.skipped_rows += 1
                continue
            if self._is_cash_placeholder(ticker):
                result.excluded_rows += 1
                continue
            try:
                trade = self._build_trade(index, ticker, row, asset_class)
            except InvalidRowError as exc:
                logger.warning("Skipping row: %s", exc)
                result.skipped_rows += 1
                result.warnings.append(str(exc))
                continue
            result.trades.append(trade)

        result.trades.sort(key=lambda trade: trade.date)
        logger.debug(
            "Normalized %d %s trades (%d skipped, %d cash rows excluded)",
            len(result.trades), asset_class.value, result.skipped_rows, result.excluded_rows,
        )
        return result

    def normalize_columns(
        self,
        dates: Sequence,
        tickers: Sequence,
        actions: Sequence,
        quantities: Sequence,
        prices: Sequence,
        spent: Sequence | None = None,
        types: Sequence | None = None,
        asset_class: AssetClass = AssetClass.STOCK,
    ) -> NormalizationResult:
        """Normalize parallel columns, the shape a sheet range arrives in."""
        rows = [
            RawTradeRow(
                date=_at(dates, i),
                ticker=tickers[i],
                action=_at(actions, i),
                quantity=_at(quantities, i),
                price=_at(prices, i),
                spent=_at(spent, i),
                type=_at(types, i),
            )
            for i in range(len(tickers))
        ]
        return self.normalize(rows, asset_class)

    @staticmethod
    def merge(*results: NormalizationResult) -> NormalizationResult:
        """Combine per-sheet results into one chronologically sorted feed."""
        merged = NormalizationResult()
        for result in results:
            merged.trades.extend(result.trades)
            merged.skipped_rows += result.skipped_rows
            merged.excluded_rows += result.excluded_rows
            merged.warnings.extend(result.warnings)
        merged.trades.sort(key=lambda trade: trade.date)
        return merged

    def _is_cash_placeholder(self, ticker: str) -> bool:
        upper = ticker.upper()
        return any(marker in upper for marker in self.config.excluded_ticker_markers)

    def _build_trade(
        self,
        index: int,
        ticker: str,
        row: RawTradeRow,
        asset_class: AssetClass,
    ) -> Trade:
        trade_date = parse_trade_date(row.date)
        if trade_date is None:
            raise InvalidRowError(index, "date", f"cannot read {row.date!r}")

        action = classify_action(row.action)
        if action is None:
            raise InvalidRowError(index, "action", f"unknown action {row.action!r}")
        raw_action = str(row.action).strip() if row.action is not None else ""

        try:
            quantity, unit_price, total, resolved_class = self._amounts(row, action, asset_class)
        except ArithmeticError as exc:
            raise InvalidRowError(index, "amount", f"cannot compute ({exc!r})") from exc

        return Trade(
            date=trade_date,
            ticker=ticker,
            action=action,
            quantity=quantity,
            unit_price=unit_price,
            total_amount=total,
            asset_class=resolved_class,
            raw_action=raw_action,
        )

    def _amounts(
        self,
        row: RawTradeRow,
        action: TradeAction,
        asset_class: AssetClass,
    ) -> tuple[Decimal, Decimal, Decimal, AssetClass]:
        """Quantity, unit price, total and resolved class under the sheet's rules."""
        quantity = abs(parse_amount(row.quantity))
        unit_price = abs(parse_amount(row.price))

        if asset_class == AssetClass.CRYPTO:
            resolved_class = AssetClass.CRYPTO
            spent = abs(parse_amount(row.spent))
            if unit_price == 0 and quantity != 0 and spent != 0:
                unit_price = spent / quantity
            if spent == 0 and quantity != 0 and unit_price != 0:
                total = quantity * unit_price
            else:
                total = spent
        else:
            resolved_class = _stock_sheet_class(row.type)
            total = unit_price * quantity
            if action == TradeAction.DIVIDEND:
                # The amount column carries the dividend cash, not a price
                spent = abs(parse_amount(row.spent))
                total = spent if spent != 0 else unit_price
                quantity = Decimal("0")

        return quantity, unit_price, total, resolved_class


def _at(column: Sequence | None, index: int) -> object:
    if column is None or index >= len(column):
        return None
    return column[index]


def _stock_sheet_class(raw_type: object) -> AssetClass:
    text = str(raw_type).strip().upper() if raw_type is not None else ""
    if text == "ETF":
        return AssetClass.ETF
    if text == "CRYPTO":
        return AssetClass.CRYPTO
    return AssetClass.STOCK
