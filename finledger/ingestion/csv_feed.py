"""CSV feed adapter for ledger sheets exported from a spreadsheet."""

import csv
from pathlib import Path

from finledger.exceptions import FeedError
from finledger.ingestion.base import BaseFeed, FeedResult
from finledger.models.enums import AssetClass
from finledger.models.trade import RawTradeRow

# Header aliases, compared upper-cased and stripped
_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "date": ("DATE", "DATA", "TRADE DATE"),
    "ticker": ("TICKER", "SECURITY", "SYMBOL", "ASSET", "TITOLO"),
    "action": ("ACTION", "OPERATION", "TYPE OF TRADE", "AZIONE"),
    "quantity": ("QUANTITY", "QTY", "SHARES", "AMOUNT", "QUANTITA"),
    "price": ("PRICE", "UNIT PRICE", "PRICE/UNIT", "PREZZO"),
    "spent": ("SPENT", "TOTAL", "TOTAL SPENT", "VALUE", "SPESA"),
    "type": ("TYPE", "ASSET TYPE", "CLASS", "TIPO"),
}

_REQUIRED = ("date", "ticker", "quantity")

# UTF-8 (with or without BOM) first, then the Windows code page of Excel exports
_ENCODINGS = ("utf-8-sig", "cp1252")


def _resolve_columns(header: list[str]) -> dict[str, int]:
    """Map canonical field names to column positions in ``header``."""
    normalized = [col.strip().upper() for col in header]
    columns: dict[str, int] = {}
    for name, aliases in _COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in normalized:
                columns[name] = normalized.index(alias)
                break
    return columns


def _sniff_delimiter(sample: str) -> str:
    try:
        return csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
    except csv.Error:
        return ","


def _read_text(file_path: Path) -> str:
    data = file_path.read_bytes()
    for encoding in _ENCODINGS:
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise FeedError(file_path.name, f"unsupported text encoding (tried {', '.join(_ENCODINGS)})")


class CsvTradeFeed(BaseFeed):
    """Reads one asset-class ledger (stocks or crypto) from a CSV file.

    European exports often use ``;`` as delimiter so that ``,`` can be the
    decimal mark; the delimiter is sniffed from the first lines.
    """

    def __init__(self, asset_class: AssetClass = AssetClass.STOCK) -> None:
        self.asset_class = asset_class

    def parse(self, file_path: Path) -> FeedResult:
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        text = _read_text(file_path)
        lines = text.splitlines()
        if not lines:
            return FeedResult(asset_class=self.asset_class, source=file_path.name)

        delimiter = _sniff_delimiter("\n".join(lines[:5]))
        reader = csv.reader(lines, delimiter=delimiter)
        header = next(reader)
        columns = _resolve_columns(header)
        missing = [name for name in _REQUIRED if name not in columns]
        if missing:
            raise FeedError(file_path.name, f"missing column(s): {', '.join(missing)}")

        rows: list[RawTradeRow] = []
        for record in reader:
            if not any(cell.strip() for cell in record):
                continue
            rows.append(RawTradeRow(**{
                name: record[index] if index < len(record) else None
                for name, index in columns.items()
            }))
        return FeedResult(asset_class=self.asset_class, source=file_path.name, rows=rows)

    def validate(self, data: FeedResult) -> list[str]:
        errors = []
        if not data.rows:
            errors.append(f"{data.source}: no transaction rows")
        return errors
