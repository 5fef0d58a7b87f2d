"""Tax basket (loss carryforward) report generator."""

from finledger.models.reports import ReportResult, TaxBasketRow, TaxBillEstimate
from finledger.reports.formatting import build_environment


class TaxBasketReportGenerator:
    """Generates the yearly basket summary and the tax bill simulation."""

    def __init__(self) -> None:
        self.env = build_environment()

    def render(self, result: ReportResult[TaxBasketRow]) -> str:
        template = self.env.get_template("tax_basket.txt")
        return template.render(result=result)

    def render_estimate(self, estimate: TaxBillEstimate) -> str:
        template = self.env.get_template("tax_bill.txt")
        return template.render(est=estimate)
