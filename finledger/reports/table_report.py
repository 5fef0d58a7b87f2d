"""Plain table report generator for ledger, evolution and cash-flow reports."""

from finledger.models.reports import ReportResult
from finledger.reports.formatting import build_environment, cell


class TableReportGenerator:
    """Renders any ``ReportResult`` as a fixed-width text table."""

    def __init__(self) -> None:
        self.env = build_environment()

    def render(self, title: str, result: ReportResult) -> str:
        template = self.env.get_template("table.txt")
        return template.render(title=title, result=result, lines=self.format_lines(result))

    @staticmethod
    def format_lines(result: ReportResult) -> list[str]:
        table = [[cell(value) for value in row] for row in result.table()]
        if not table[0]:
            return []
        widths = [max(len(row[i]) for row in table) for i in range(len(table[0]))]
        lines = [
            " | ".join(value.ljust(width) for value, width in zip(row, widths)).rstrip()
            for row in table
        ]
        lines.insert(1, "-+-".join("-" * width for width in widths))
        return lines
