"""Typer CLI interface for finledger."""

import csv
import logging
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from finledger.config import LedgerConfig
from finledger.models.enums import CostMethod
from finledger.models.reports import ReportResult

app = typer.Typer(
    name="finledger",
    help="finledger: FIFO portfolio accounting and tax-basket reports.",
)

STOCKS_OPTION = typer.Option(None, "--stocks", "-s", help="CSV ledger of stock/ETF trades")
CRYPTO_OPTION = typer.Option(None, "--crypto", "-c", help="CSV ledger of crypto trades")
AS_OF_OPTION = typer.Option(
    None, "--as-of", formats=["%Y-%m-%d"], help="Reference date (default: today)"
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """finledger: FIFO portfolio accounting and tax-basket reports."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _console() -> Console:
    console = Console()
    if not console.is_terminal:
        console = Console(width=200)
    return console


def _load_ledger(
    stocks: Path | None,
    crypto: Path | None,
    config: LedgerConfig | None = None,
):
    """Read the CSV ledgers into a PortfolioLedger, exiting on unreadable files."""
    from finledger.exceptions import FeedError
    from finledger.ingestion import CsvTradeFeed
    from finledger.ledger import PortfolioLedger
    from finledger.models.enums import AssetClass

    if stocks is None and crypto is None:
        typer.echo("Error: provide --stocks and/or --crypto ledger files.", err=True)
        raise typer.Exit(1)

    feeds = {}
    for path, asset_class in ((stocks, AssetClass.STOCK), (crypto, AssetClass.CRYPTO)):
        if path is None:
            continue
        try:
            feeds[asset_class] = CsvTradeFeed(asset_class).parse(path).rows
        except (FeedError, FileNotFoundError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1)

    ledger = PortfolioLedger(config or LedgerConfig())
    ledger.load(feeds.get(AssetClass.STOCK, []), feeds.get(AssetClass.CRYPTO, []))
    return ledger


def _print_table(title: str, result: ReportResult) -> None:
    """Print a report as a rich table, followed by its warnings."""
    from finledger.reports.formatting import cell

    console = _console()
    if result.is_empty:
        console.print(f"{title}: no data.")
    else:
        table = Table(title=title)
        for column in result.header:
            table.add_column(column)
        for row in result.table()[1:]:
            table.add_row(*(cell(value) for value in row))
        console.print(table)

    for warning in result.warnings:
        typer.echo(f"Warning: {warning}", err=True)


def _as_of(value: datetime | None) -> date:
    return value.date() if value else date.today()


@app.command()
def portfolio(
    stocks: Optional[Path] = STOCKS_OPTION,
    crypto: Optional[Path] = CRYPTO_OPTION,
    as_of: Optional[datetime] = AS_OF_OPTION,
    keep_closed_after: Optional[datetime] = typer.Option(
        None,
        "--keep-closed-after",
        formats=["%Y-%m-%d"],
        help="Keep stock positions closed on/after this date listed",
    ),
) -> None:
    """Portfolio dashboard: per-ticker P&L, ROI and behavioral notes."""
    from finledger.reports import PortfolioReportGenerator

    config = LedgerConfig(
        keep_closed_rows_after=keep_closed_after.date() if keep_closed_after else None,
    )
    ledger = _load_ledger(stocks, crypto, config)
    reference = _as_of(as_of)
    result = ledger.portfolio(reference)
    typer.echo(PortfolioReportGenerator().render(result, reference))


@app.command()
def positions(
    stocks: Optional[Path] = STOCKS_OPTION,
    crypto: Optional[Path] = CRYPTO_OPTION,
    keep_closed_after: Optional[datetime] = typer.Option(
        None,
        "--keep-closed-after",
        formats=["%Y-%m-%d"],
        help="Keep stock positions closed on/after this date listed",
    ),
) -> None:
    """Current holdings with FIFO average price."""
    config = LedgerConfig(
        keep_closed_rows_after=keep_closed_after.date() if keep_closed_after else None,
    )
    ledger = _load_ledger(stocks, crypto, config)
    _print_table("Positions", ledger.positions())


@app.command()
def fiscal(
    stocks: Optional[Path] = STOCKS_OPTION,
    crypto: Optional[Path] = CRYPTO_OPTION,
) -> None:
    """List every realized sale with its gain, tax and capital loss."""
    ledger = _load_ledger(stocks, crypto)
    _print_table("Fiscal Ledger", ledger.fiscal_ledger())


@app.command()
def basket(
    stocks: Optional[Path] = STOCKS_OPTION,
    crypto: Optional[Path] = CRYPTO_OPTION,
    through_year: Optional[int] = typer.Option(
        None, "--through-year", help="Extend the report to this year (default: current year)"
    ),
    tax_rate: float = typer.Option(0.26, "--tax-rate", help="Flat capital gains rate"),
    exclude_crypto: bool = typer.Option(
        False, "--exclude-crypto", help="Leave crypto out of the basket computation"
    ),
) -> None:
    """Yearly tax-loss basket: usage, expiry and estimated tax."""
    from finledger.reports import TaxBasketReportGenerator

    config = LedgerConfig(
        tax_rate=Decimal(str(tax_rate)),
        include_crypto_in_tax_basket=not exclude_crypto,
    )
    ledger = _load_ledger(stocks, crypto, config)
    result = ledger.tax_basket(through_year or date.today().year)
    typer.echo(TaxBasketReportGenerator().render(result))


@app.command()
def evolution(
    stocks: Optional[Path] = STOCKS_OPTION,
    crypto: Optional[Path] = CRYPTO_OPTION,
    as_of: Optional[datetime] = AS_OF_OPTION,
    method: CostMethod = typer.Option(
        CostMethod.FIFO, "--method", help="Cost method for invested capital"
    ),
) -> None:
    """Holdings at each year end since the first trade."""
    ledger = _load_ledger(stocks, crypto, LedgerConfig(reconstruction_method=method))
    _print_table("Portfolio Evolution", ledger.evolution(_as_of(as_of)))


@app.command()
def cashflow(
    stocks: Optional[Path] = STOCKS_OPTION,
    crypto: Optional[Path] = CRYPTO_OPTION,
) -> None:
    """Yearly money in and out per asset class."""
    ledger = _load_ledger(stocks, crypto)
    _print_table("Cash Flows", ledger.cash_flows())


def _read_prices(path: Path) -> dict[str, Decimal]:
    """Read a ``ticker,price`` CSV into a price map."""
    from finledger.normalization import parse_amount

    prices: dict[str, Decimal] = {}
    with path.open(encoding="utf-8-sig", newline="") as handle:
        for record in csv.reader(handle):
            if len(record) < 2 or not record[0].strip():
                continue
            price = parse_amount(record[1])
            if price > 0:
                prices[record[0].strip()] = price
    return prices


@app.command()
def harvest(
    prices: Path = typer.Option(..., "--prices", "-p", help="CSV of ticker,current price"),
    stocks: Optional[Path] = STOCKS_OPTION,
    crypto: Optional[Path] = CRYPTO_OPTION,
) -> None:
    """Scan open positions for losses worth realizing."""
    from finledger.engines import HarvestingScanner

    if not prices.exists():
        typer.echo(f"Error: File not found: {prices}", err=True)
        raise typer.Exit(1)

    ledger = _load_ledger(stocks, crypto)
    result = ledger.harvest(_read_prices(prices))
    _print_table("Tax-Loss Harvesting", result)
    if not result.is_empty:
        total = HarvestingScanner.total_potential_loss(result)
        typer.echo(f"Total potential loss: {total:,.2f}")


@app.command(name="estimate-tax")
def estimate_tax(
    gains: float = typer.Argument(..., help="Compensable gains realized this year"),
    available_basket: float = typer.Argument(0.0, help="Usable basket from previous years"),
    losses: float = typer.Option(0.0, "--losses", help="Losses realized this year"),
    tax_rate: float = typer.Option(0.26, "--tax-rate", help="Flat capital gains rate"),
) -> None:
    """Simulate this year's tax bill against the available basket."""
    from finledger.engines import FiscalEngine
    from finledger.reports import TaxBasketReportGenerator

    engine = FiscalEngine(LedgerConfig(tax_rate=Decimal(str(tax_rate))))
    estimate = engine.estimate_tax_bill(
        Decimal(str(gains)), Decimal(str(available_basket)), Decimal(str(losses))
    )
    typer.echo(TaxBasketReportGenerator().render_estimate(estimate))


@app.command()
def report(
    stocks: Optional[Path] = STOCKS_OPTION,
    crypto: Optional[Path] = CRYPTO_OPTION,
    output: Path = typer.Option(Path("reports"), "--output", "-o", help="Output directory"),
    as_of: Optional[datetime] = AS_OF_OPTION,
) -> None:
    """Write every report for the ledger to text files."""
    from finledger.reports import (
        PortfolioReportGenerator,
        TableReportGenerator,
        TaxBasketReportGenerator,
    )

    ledger = _load_ledger(stocks, crypto)
    reference = _as_of(as_of)
    output.mkdir(parents=True, exist_ok=True)
    tables = TableReportGenerator()

    rendered = {
        "portfolio.txt": PortfolioReportGenerator().render(ledger.portfolio(reference), reference),
        "positions.txt": tables.render("Positions", ledger.positions()),
        "fiscal_ledger.txt": tables.render("Fiscal Ledger", ledger.fiscal_ledger()),
        "tax_basket.txt": TaxBasketReportGenerator().render(ledger.tax_basket(reference.year)),
        "evolution.txt": tables.render("Portfolio Evolution", ledger.evolution(reference)),
        "cash_flows.txt": tables.render("Cash Flows", ledger.cash_flows()),
    }
    for name, content in rendered.items():
        path = output / name
        path.write_text(content)
        typer.echo(f"  [+] {path}")

    typer.echo("")
    typer.echo(f"Done. {len(rendered)} report(s) generated in {output}/")


if __name__ == "__main__":
    app()
