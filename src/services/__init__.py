# src/services/__init__.py
# Makes 'services' a package. Exports service classes.

from .sales_stats_service import SalesStatsService
from .invoice_lines_service import InvoiceLinesService
from .dashboard_service import DashboardService
from .report_service import ReportService

__all__ = [
    "SalesStatsService",
    "InvoiceLinesService",
    "DashboardService",
    "ReportService",
]
