"""Report and display output."""

from .excel_generator import ExcelReportGenerator
from .views import ResultView, filter_results, format_amount

__all__ = ["ExcelReportGenerator", "ResultView", "filter_results", "format_amount"]
