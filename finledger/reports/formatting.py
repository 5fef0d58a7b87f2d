"""Jinja2 environment and cell formatting shared by report generators."""

from datetime import date
from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

TEMPLATE_DIR = Path(__file__).parent / "templates"


def money(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return f"{value:,.2f}"


def percent(value: Decimal | None) -> str:
    if value is None:
        return "-"
    return f"{value * 100:.2f}%"


def cell(value: object) -> str:
    """Render any table cell the way the text reports show it."""
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return f"{value:,.0f}"
        return f"{value:,.4f}".rstrip("0").rstrip(".")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def build_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["money"] = money
    env.filters["percent"] = percent
    env.filters["cell"] = cell
    return env
