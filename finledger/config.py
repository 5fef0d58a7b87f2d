"""Ledger configuration.

Jurisdiction and precision settings used by every engine. The module-level
constants are the defaults for the modeled regime (Italian capital gains:
26% flat rate, four-year loss carryforward, ETF gains not offsettable).
Engines never read these constants directly; they receive a ``LedgerConfig``.
"""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from finledger.models.enums import AssetClass, CostMethod

# ---------------------------------------------------------------------------
# Tax regime
# ---------------------------------------------------------------------------
CAPITAL_GAINS_RATE = Decimal("0.26")
BASKET_EXPIRY_YEARS = 4

# ---------------------------------------------------------------------------
# Share-quantity precision (decimal places)
# ---------------------------------------------------------------------------
STOCK_PRECISION = 5
CRYPTO_PRECISION = 8

OPEN_POSITION_EPSILON = Decimal("0.00000001")
SNAPSHOT_EPSILON = Decimal("0.000001")

# Rows whose ticker contains one of these are cash placeholders, not securities.
EXCLUDED_TICKER_MARKERS = ("CASH", "EUR")


class BehaviorThresholds(BaseModel):
    """Trigger levels for the behavioral tags on the portfolio report."""

    model_config = ConfigDict(frozen=True)

    cash_cow_trading_roi: Decimal = Decimal("-0.01")
    pure_trading_roi: Decimal = Decimal("0.05")
    pure_trading_dividend_share: Decimal = Decimal("0.01")
    good_dca_ratio: Decimal = Decimal("0.85")
    high_load_ratio: Decimal = Decimal("0.95")
    dead_money_days: int = 730


class LedgerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    tax_rate: Decimal = CAPITAL_GAINS_RATE
    basket_expiry_years: int = BASKET_EXPIRY_YEARS
    non_compensable_classes: frozenset[AssetClass] = frozenset({AssetClass.ETF})
    include_crypto_in_tax_basket: bool = True

    stock_precision: int = STOCK_PRECISION
    crypto_precision: int = CRYPTO_PRECISION
    open_epsilon: Decimal = OPEN_POSITION_EPSILON
    snapshot_epsilon: Decimal = SNAPSHOT_EPSILON

    # Stock/ETF positions emptied on or after this date stay listed with 0 shares.
    keep_closed_rows_after: date | None = None
    excluded_ticker_markers: tuple[str, ...] = EXCLUDED_TICKER_MARKERS

    reconstruction_method: CostMethod = CostMethod.FIFO
    behavior: BehaviorThresholds = BehaviorThresholds()

    def precision_for(self, asset_class: AssetClass) -> int:
        if asset_class == AssetClass.CRYPTO:
            return self.crypto_precision
        return self.stock_precision

    def quantum_for(self, asset_class: AssetClass) -> Decimal:
        return Decimal(1).scaleb(-self.precision_for(asset_class))

    def is_compensable(self, asset_class: AssetClass) -> bool:
        return asset_class not in self.non_compensable_classes


DEFAULT_CONFIG = LedgerConfig()
