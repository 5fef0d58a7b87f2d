"""Lenient parsing of spreadsheet numbers and dates.

Sheets exported by hand mix European (``1.234,56 €``) and US
(``$1,234.56``) conventions, serial day numbers and free-form dates. These
helpers never raise: unparseable amounts become ``Decimal("0")`` and
unparseable dates become ``None``.
"""

import math
import re
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation

_CURRENCY_SYMBOLS = re.compile(r"[€$£¥\s ']")
_CURRENCY_CODES = re.compile(r"^(EUR|USD|GBP|CHF)|(EUR|USD|GBP|CHF)$", re.IGNORECASE)

# Google Sheets / Excel day zero
_SERIAL_EPOCH = date(1899, 12, 30)

# Cell amounts beyond 10**±30 are typos or garbage, not prices or quantities
_MAX_EXPONENT = 30

_DATE_FORMATS = (
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%d-%m-%Y",
    "%Y/%m/%d",
    "%d/%m/%y",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y %H:%M",
)


def parse_amount(value: object) -> Decimal:
    """Convert a raw cell value to Decimal, defaulting to 0 for blank/invalid."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, Decimal):
        return _bounded(value)
    if isinstance(value, int):
        return _bounded(Decimal(value))
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return Decimal("0")
        return _bounded(Decimal(str(value)))

    text = str(value).strip()
    if not text or text.lower() == "x":
        return Decimal("0")

    negative = text.startswith("(") and text.endswith(")")
    if negative:
        text = text[1:-1]
    text = _CURRENCY_SYMBOLS.sub("", text)
    text = _CURRENCY_CODES.sub("", text)
    text = _normalize_separators(text)

    try:
        result = Decimal(text)
    except InvalidOperation:
        return Decimal("0")
    result = _bounded(result)
    return -result if negative else result


def _bounded(value: Decimal) -> Decimal:
    if not value.is_finite() or abs(value.adjusted()) > _MAX_EXPONENT:
        return Decimal("0")
    return value


def _normalize_separators(text: str) -> str:
    """Rewrite thousands/decimal separators into plain ``1234.56`` form."""
    has_dot = "." in text
    has_comma = "," in text

    if has_dot and has_comma:
        # Whichever separator comes last is the decimal mark
        if text.rfind(",") > text.rfind("."):
            return text.replace(".", "").replace(",", ".")
        return text.replace(",", "")
    if has_comma:
        if text.count(",") > 1:
            return text.replace(",", "")
        return text.replace(",", ".")
    if has_dot and text.count(".") > 1:
        return text.replace(".", "")
    return text


def parse_trade_date(value: object) -> date | None:
    """Convert a raw cell value to a date, or None when it can't be read."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return None
        if 0 < value < 2958466:
            return _SERIAL_EPOCH + timedelta(days=int(value))
        return None

    text = str(value).strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None
