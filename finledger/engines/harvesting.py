"""Tax-loss harvesting scanner over open positions."""

from decimal import Decimal
from typing import Mapping, Sequence

from finledger.config import DEFAULT_CONFIG, LedgerConfig
from finledger.models.reports import HarvestCandidate, PositionRow, ReportResult


class HarvestingScanner:
    """Finds open positions whose sale would realize a loss for the basket.

    Current prices come from outside (a quote feed or the user); positions
    without a price are reported as warnings rather than guessed.
    """

    def __init__(self, config: LedgerConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def scan(
        self,
        positions: Sequence[PositionRow],
        prices: Mapping[str, Decimal],
    ) -> ReportResult[HarvestCandidate]:
        candidates: list[HarvestCandidate] = []
        warnings: list[str] = []

        for position in positions:
            if position.shares <= self.config.open_epsilon:
                continue
            current = prices.get(position.ticker)
            if current is None:
                warnings.append(f"No current price for {position.ticker}")
                continue

            invested = position.shares * position.average_price
            pnl = position.shares * current - invested
            if pnl >= 0:
                continue

            loss = -pnl
            note = f"Sell to generate {loss:.0f} loss."
            # ETF gains can never draw on the basket, but ETF losses still feed it
            if not self.config.is_compensable(position.asset_class):
                note += " (Valid for basket)"
            candidates.append(HarvestCandidate(
                ticker=position.ticker,
                asset_class=position.asset_class,
                shares=position.shares,
                average_price=position.average_price,
                current_price=current,
                unrealized_pnl=pnl,
                potential_loss=loss,
                note=note,
            ))

        candidates.sort(key=lambda candidate: candidate.potential_loss, reverse=True)
        return ReportResult[HarvestCandidate].build(candidates, HarvestCandidate.HEADER, warnings)

    @staticmethod
    def total_potential_loss(result: ReportResult[HarvestCandidate]) -> Decimal:
        return sum((candidate.potential_loss for candidate in result.rows), Decimal("0"))
