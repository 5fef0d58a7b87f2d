"""Yearly cash movements per asset class."""

from typing import Sequence

from finledger.models.enums import AssetClass, TradeAction
from finledger.models.reports import CashFlowRow, ReportResult
from finledger.models.trade import Trade


class CashFlowEngine:
    """Sums money spent on buys and received from sells and dividends."""

    def compute(self, trades: Sequence[Trade]) -> ReportResult[CashFlowRow]:
        flows: dict[tuple[int, AssetClass], CashFlowRow] = {}

        for trade in trades:
            key = (trade.year, trade.asset_class)
            flow = flows.get(key)
            if flow is None:
                flow = CashFlowRow(year=trade.year, asset_class=trade.asset_class)
                flows[key] = flow

            if trade.action == TradeAction.BUY:
                flow.bought += trade.total_amount
            elif trade.action == TradeAction.SELL:
                if trade.asset_class == AssetClass.CRYPTO and trade.total_amount > 0:
                    flow.sold += trade.total_amount
                else:
                    flow.sold += trade.quantity * trade.unit_price
            elif trade.action == TradeAction.DIVIDEND:
                flow.dividends += trade.total_amount

        rows = [
            flows[key]
            for key in sorted(flows, key=lambda item: (item[0], item[1].value))
            if flows[key].bought != 0 or flows[key].total_inflow != 0
        ]
        return ReportResult[CashFlowRow].build(rows, CashFlowRow.HEADER)
