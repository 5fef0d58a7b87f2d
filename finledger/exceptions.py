"""Custom exceptions for finledger."""

from datetime import date


class LedgerError(Exception):
    """Base exception for ledger computation errors."""


class InvalidRowError(LedgerError):
    """Raised when a raw transaction row cannot be turned into a trade."""

    def __init__(self, row_index: int, field: str, message: str):
        self.row_index = row_index
        self.field = field
        super().__init__(f"Row {row_index}: invalid '{field}': {message}")


class UnsortedTradesError(LedgerError):
    """Raised when trades reach the matcher out of chronological order."""

    def __init__(self, position: int, previous: date, current: date):
        self.position = position
        self.previous = previous
        self.current = current
        super().__init__(
            f"Trades must be sorted by date: trade {position} ({current}) "
            f"comes after {previous}"
        )


class FeedError(LedgerError):
    """Raised when a transaction feed file cannot be read."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"Feed error from {source}: {message}")
