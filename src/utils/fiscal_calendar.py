# src/utils/fiscal_calendar.py
# Financial-year arithmetic for a configurable first month.

import calendar
from datetime import date
from typing import List, Optional, Tuple

MONTH_NAMES = [calendar.month_name[m] for m in range(1, 13)]
MONTH_ABBR = [name[:3] for name in MONTH_NAMES]


class FiscalCalendar:
    """
    A financial year is named after the calendar year it starts in.

    With start_month=4, FY 2026 runs from 2026-04-01 to 2027-03-31.
    With start_month=1 it is simply the calendar year.
    """

    def __init__(self, start_month: int = 1):
        if not 1 <= start_month <= 12:
            raise ValueError(f"Invalid fiscal year start month: {start_month}")
        self.start_month = start_month

    def fiscal_year_of(self, d: date) -> int:
        return d.year if d.month >= self.start_month else d.year - 1

    def month_year(self, fiscal_year: int, month: int) -> int:
        """Calendar year in which `month` (1..12) falls inside `fiscal_year`."""
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")
        return fiscal_year if month >= self.start_month else fiscal_year + 1

    def months(self, fiscal_year: int) -> List[Tuple[int, int]]:
        """The 12 (year, month) pairs of `fiscal_year`, in order."""
        result = []
        for offset in range(12):
            month = (self.start_month - 1 + offset) % 12 + 1
            result.append((self.month_year(fiscal_year, month), month))
        return result

    def month_order(self) -> List[int]:
        return [m for _, m in self.months(2000)]

    def bounds(self, fiscal_year: int) -> Tuple[date, date]:
        first_year, first_month = self.months(fiscal_year)[0]
        last_year, last_month = self.months(fiscal_year)[-1]
        return (date(first_year, first_month, 1),
                date(last_year, last_month, calendar.monthrange(last_year, last_month)[1]))

    def days_in_month(self, fiscal_year: int, month: int) -> int:
        return calendar.monthrange(self.month_year(fiscal_year, month), month)[1]

    def contains(self, d: Optional[date], fiscal_year: int, month: Optional[int] = None) -> bool:
        """True if `d` falls in `fiscal_year` (and in calendar `month` of it when given)."""
        if d is None or self.fiscal_year_of(d) != fiscal_year:
            return False
        return month is None or d.month == month

    def label(self, fiscal_year: int) -> str:
        if self.start_month == 1:
            return str(fiscal_year)
        return f"{fiscal_year}/{(fiscal_year + 1) % 100:02d}"
