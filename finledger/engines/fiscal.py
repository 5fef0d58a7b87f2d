"""Fiscal engine: taxable sale ledger and loss-basket carryforward.

Models a flat capital-gains regime with a loss carryforward ("basket"):
  - Stock and Crypto gains are compensable: they can be offset by losses
    carried forward from earlier years.
  - ETF gains and dividends are non-compensable: always taxed in full.
  - A net loss opens a basket entry usable in the following
    ``basket_expiry_years`` years, oldest origin first; after that it
    expires whether or not it was partially used.
  - Tax due = taxable base x flat rate.
"""

from decimal import Decimal

from finledger.config import DEFAULT_CONFIG, LedgerConfig
from finledger.engines.lot_matcher import MatcherState
from finledger.models.enums import AssetClass
from finledger.models.reports import (
    FiscalLedgerEntry,
    ReportResult,
    TaxBasketRow,
    TaxBillEstimate,
    YearlyFiscalState,
)
from finledger.models.trade import LossBasket


class FiscalEngine:
    """Builds the fiscal ledger and the yearly tax-basket report."""

    def __init__(self, config: LedgerConfig = DEFAULT_CONFIG) -> None:
        self.config = config

    def fiscal_ledger(self, state: MatcherState) -> ReportResult[FiscalLedgerEntry]:
        """One row per realized sale, with the per-sale gross tax or loss."""
        rows: list[FiscalLedgerEntry] = []
        for sale in state.realized_sales:
            gain = sale.gain_loss
            rows.append(FiscalLedgerEntry(
                date=sale.date,
                year=sale.date.year,
                ticker=sale.ticker,
                asset_class=sale.asset_class,
                shares_sold=sale.shares_sold,
                sale_price=sale.sale_price,
                load_price=sale.average_cost,
                gain_loss=gain,
                tax=gain * self.config.tax_rate if gain > 0 else Decimal("0"),
                capital_loss=-gain if gain < 0 else Decimal("0"),
            ))
        return ReportResult[FiscalLedgerEntry].build(rows, FiscalLedgerEntry.HEADER, state.warnings)

    def yearly_states(self, state: MatcherState) -> dict[int, YearlyFiscalState]:
        """Aggregate realized gains, losses and dividends per calendar year."""
        years: dict[int, YearlyFiscalState] = {}

        for sale in state.realized_sales:
            if not self._in_basket_scope(sale.asset_class):
                continue
            year_state = years.setdefault(sale.date.year, YearlyFiscalState(year=sale.date.year))
            gain = sale.gain_loss
            if gain >= 0:
                if self.config.is_compensable(sale.asset_class):
                    year_state.compensable_gain += gain
                else:
                    year_state.non_compensable_gain += gain
            else:
                year_state.new_loss += -gain

        for payment in state.dividend_payments:
            if not self._in_basket_scope(payment.asset_class):
                continue
            year_state = years.setdefault(payment.year, YearlyFiscalState(year=payment.year))
            year_state.non_compensable_gain += payment.total_amount

        return years

    def tax_basket(
        self,
        state: MatcherState,
        through_year: int | None = None,
    ) -> ReportResult[TaxBasketRow]:
        """Walk the years oldest to newest, drawing and expiring loss baskets.

        Args:
            state: A finished matcher pass.
            through_year: Extend the walk to this year even without activity,
                so expiries up to e.g. the current year are reported.
        """
        yearly = self.yearly_states(state)
        if not yearly:
            return ReportResult[TaxBasketRow].empty(TaxBasketRow.HEADER, "No realized results to tax")

        first_year = min(yearly)
        last_year = max(max(yearly), through_year or first_year)
        rows = self.run_basket(yearly, first_year, last_year)
        return ReportResult[TaxBasketRow].build(rows, TaxBasketRow.HEADER, state.warnings)

    def run_basket(
        self,
        yearly: dict[int, YearlyFiscalState],
        first_year: int,
        last_year: int,
    ) -> list[TaxBasketRow]:
        """The year-by-year carryforward state machine."""
        rate = self.config.tax_rate
        expiry_years = self.config.basket_expiry_years
        basket: list[LossBasket] = []
        rows: list[TaxBasketRow] = []

        for year in range(first_year, last_year + 1):
            year_state = yearly.get(year, YearlyFiscalState(year=year))

            # 1. Purge entries past their window
            expired = sum(
                (entry.remaining_loss for entry in basket if entry.is_expired(year, expiry_years)),
                Decimal("0"),
            )
            basket = [entry for entry in basket if not entry.is_expired(year, expiry_years)]

            # 2. Offset net compensable gain, oldest origin first
            net = year_state.net_compensable
            remaining_gain = max(net, Decimal("0"))
            used = Decimal("0")
            for entry in basket:
                if remaining_gain <= 0:
                    break
                take = min(entry.remaining_loss, remaining_gain)
                entry.remaining_loss -= take
                remaining_gain -= take
                used += take
            basket = [entry for entry in basket if entry.remaining_loss > 0]

            # 3. A net loss opens a new entry
            new_loss = Decimal("0")
            if net < 0:
                new_loss = -net
                basket.append(LossBasket(origin_year=year, remaining_loss=new_loss))

            # 4. Non-compensable gains are always taxed
            taxable = year_state.non_compensable_gain + remaining_gain
            residual = sum((entry.remaining_loss for entry in basket), Decimal("0"))

            if year not in yearly and expired == 0 and residual == 0:
                continue

            expiring = sum(
                (entry.remaining_loss for entry in basket if entry.age(year) == expiry_years),
                Decimal("0"),
            )
            rows.append(TaxBasketRow(
                year=year,
                compensable_gain=year_state.compensable_gain,
                non_compensable_gain=year_state.non_compensable_gain,
                new_loss=new_loss,
                basket_used=used,
                basket_expired=expired,
                taxable_base=taxable,
                estimated_tax=taxable * rate,
                residual_basket=residual,
                notes=self._advise(year_state, used, expired, residual, expiring),
            ))
        return rows

    def _advise(
        self,
        year_state: YearlyFiscalState,
        used: Decimal,
        expired: Decimal,
        residual: Decimal,
        expiring: Decimal,
    ) -> list[str]:
        notes: list[str] = []
        if expiring > 0:
            notes.append(
                f"URGENT: {expiring:.0f} of losses expire at the end of {year_state.year}. "
                "Realize gains on stocks."
            )
        if year_state.non_compensable_gain > 0 and residual > 0:
            notes.append("INEFFICIENT: paying tax on ETF/dividend gains while holding losses.")
        elif year_state.non_compensable_gain > 0:
            notes.append("Tax on ETF/dividend gains.")
        if expired > 0:
            notes.append(f"EXPIRED: {expired:.0f} of losses lost for good.")
        if used > 0:
            notes.append(f"Recovered: {used * self.config.tax_rate:.0f} saved in taxes.")

        if not notes:
            if residual > 0:
                notes.append(f"Basket active ({residual:.0f}).")
            else:
                notes.append("No residual losses.")
        if not self.config.include_crypto_in_tax_basket:
            notes.append("(Crypto excluded).")
        return notes

    def estimate_tax_bill(
        self,
        realized_gains: Decimal,
        available_basket: Decimal,
        realized_losses: Decimal = Decimal("0"),
    ) -> TaxBillEstimate:
        """Year-to-date simulation: offset this year's net gain with the basket."""
        net_position = realized_gains - realized_losses
        taxable = Decimal("0")
        residual = available_basket
        new_basket = Decimal("0")

        if net_position > 0:
            if residual >= net_position:
                residual -= net_position
            else:
                taxable = net_position - residual
                residual = Decimal("0")
        elif net_position < 0:
            new_basket = -net_position

        return TaxBillEstimate(
            realized_gains=realized_gains,
            realized_losses=realized_losses,
            net_position=net_position,
            available_basket=available_basket,
            taxable_base=taxable,
            estimated_tax=taxable * self.config.tax_rate,
            residual_basket=residual,
            new_basket=new_basket,
        )

    def _in_basket_scope(self, asset_class: AssetClass) -> bool:
        return asset_class != AssetClass.CRYPTO or self.config.include_crypto_in_tax_basket
