# src/utils/__init__.py
# Makes 'utils' a package. Exports utility functions/classes.

from .logger import logger
from .fiscal_calendar import FiscalCalendar
from .dashboard_builder import build_dashboard_view, clean_address_label

__all__ = [
    "logger",
    "FiscalCalendar",
    "build_dashboard_view",
    "clean_address_label",
]
