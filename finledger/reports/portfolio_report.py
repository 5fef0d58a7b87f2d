"""Portfolio dashboard report generator."""

from datetime import date

from finledger.models.reports import PortfolioRow, ReportResult
from finledger.reports.formatting import build_environment


class PortfolioReportGenerator:
    """Generates the per-ticker portfolio summary with behavioral notes."""

    def __init__(self) -> None:
        self.env = build_environment()

    def render(self, result: ReportResult[PortfolioRow], as_of: date) -> str:
        template = self.env.get_template("portfolio.txt")
        open_rows = [row for row in result.rows if row.status == "OPEN"]
        closed_rows = [row for row in result.rows if row.status == "CLOSED"]
        return template.render(
            result=result,
            as_of=as_of,
            open_rows=open_rows,
            closed_rows=closed_rows,
            total_book=sum(row.book_value for row in open_rows),
            total_realized=sum(row.total_realized_pnl for row in result.rows),
        )
