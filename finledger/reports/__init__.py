"""Report generation for finledger."""

from finledger.reports.portfolio_report import PortfolioReportGenerator
from finledger.reports.table_report import TableReportGenerator
from finledger.reports.tax_basket_report import TaxBasketReportGenerator

__all__ = [
    "PortfolioReportGenerator",
    "TableReportGenerator",
    "TaxBasketReportGenerator",
]
