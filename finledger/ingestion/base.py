"""Base adapter interface for transaction feeds."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from finledger.models.enums import AssetClass
from finledger.models.trade import RawTradeRow


@dataclass
class FeedResult:
    """Bundles the rows read from one feed file."""

    asset_class: AssetClass
    source: str
    rows: list[RawTradeRow] = field(default_factory=list)


class BaseFeed(ABC):
    """Abstract base class for all transaction feed adapters."""

    @abstractmethod
    def parse(self, file_path: Path) -> FeedResult:
        """Read a file and return its raw transaction rows."""
        ...

    @abstractmethod
    def validate(self, data: FeedResult) -> list[str]:
        """Check parsed data. Returns a list of validation messages."""
        ...
