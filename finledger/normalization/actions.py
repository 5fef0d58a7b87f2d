"""Classification of free-text action labels into ``TradeAction``."""

from finledger.models.enums import TradeAction

# Ways a position can grow besides a plain purchase
ACQUISITION_LABELS = frozenset({
    "BUY", "DRIP", "REWARD", "REWARDS", "STAKING", "STAKE", "MINING", "MINT",
})

_EXACT_LABELS: dict[str, TradeAction] = {
    **{label: TradeAction.BUY for label in ACQUISITION_LABELS},
    "SELL": TradeAction.SELL,
    "SOLD": TradeAction.SELL,
    "DIVIDEND": TradeAction.DIVIDEND,
    "DIVIDENDS": TradeAction.DIVIDEND,
    "DIV": TradeAction.DIVIDEND,
    "SPLIT": TradeAction.SPLIT,
    "DEPOSIT": TradeAction.DEPOSIT,
    "WITHDRAWAL": TradeAction.WITHDRAWAL,
    "WITHDRAW": TradeAction.WITHDRAWAL,
}


def classify_action(label: object) -> TradeAction | None:
    """Map a sheet action label to a ``TradeAction``.

    A blank label means a purchase. Returns None for labels that match
    nothing, so the caller can skip the row.
    """
    if label is None:
        return TradeAction.BUY
    text = str(label).strip().upper()
    if not text:
        return TradeAction.BUY

    if text in _EXACT_LABELS:
        return _EXACT_LABELS[text]
    if "BUY" in text:
        return TradeAction.BUY
    if text.startswith("SELL"):
        return TradeAction.SELL
    if text.startswith("DIVIDEND"):
        return TradeAction.DIVIDEND
    return None
