"""Feed adapters for importing raw transaction rows."""

from finledger.ingestion.base import BaseFeed, FeedResult
from finledger.ingestion.csv_feed import CsvTradeFeed

__all__ = ["BaseFeed", "CsvTradeFeed", "FeedResult"]
