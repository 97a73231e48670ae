# src/services/dashboard_service.py
# Turns the stats payload into the period-filtered view used by the page and the report.

from datetime import date
from typing import Any, Dict, Optional

from src.config import Config
from src.services.sales_stats_service import SalesStatsService
from src.utils.dashboard_builder import FULL_YEAR, Period, build_dashboard_view, parse_period
from src.utils.fiscal_calendar import FiscalCalendar
from src.utils.logger import logger
from src.api.errors import ValidationError


class DashboardService:
    def __init__(self, sales_stats_service: SalesStatsService, config: Config):
        self.sales_stats_service = sales_stats_service
        self.config = config
        self.calendar = FiscalCalendar(config.FISCAL_YEAR_START_MONTH)
        logger.info(f"DashboardService initialized (fiscal year starts in month {self.calendar.start_month}).")

    def parse_selection(self, year_arg: Optional[str], period_arg: Optional[str]) -> tuple:
        """Validates the ?year=&period= query arguments. Raises ValidationError."""
        fiscal_year = None
        if year_arg not in (None, ''):
            try:
                fiscal_year = int(year_arg)
            except (ValueError, TypeError):
                raise ValidationError("Query parameter 'year' must be an integer")
            if not 1900 <= fiscal_year <= 9999:
                raise ValidationError("Query parameter 'year' is out of range")
        try:
            period = parse_period(period_arg)
        except ValueError as e:
            raise ValidationError(str(e))
        return fiscal_year, period

    def get_view(self, fiscal_year: Optional[int] = None, period: Period = FULL_YEAR,
                 today: Optional[date] = None) -> Dict[str, Any]:
        """Fetches stats once and derives every dashboard block for the selection."""
        stats = self.sales_stats_service.get_stats()
        view = build_dashboard_view(
            stats, self.calendar, fiscal_year, period,
            label_width=self.config.ADDRESS_LABEL_WIDTH, today=today,
        )
        view["currency_symbol"] = self.config.CURRENCY_SYMBOL
        return view
