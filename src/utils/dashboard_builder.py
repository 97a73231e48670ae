from datetime import date
from typing import Any, Dict, List, Optional, Union
from src.utils.data_conversion import parse_optional_date, safe_float
from src.utils.fiscal_calendar import FiscalCalendar, MONTH_ABBR, MONTH_NAMES
from src.utils.logger import logger

FULL_YEAR = 'year'
MAIN_OFFICE_LABEL = 'Main Office'
MAIN_ADDRESS_LABEL = 'Main Address'

Period = Union[str, int]


def parse_period(value: Optional[str]) -> Period:
    """'year' (or empty) for the full financial year, otherwise a calendar month 1..12."""
    if value is None or str(value).strip().lower() in ('', FULL_YEAR):
        return FULL_YEAR
    try:
        month = int(value)
    except (ValueError, TypeError):
        raise ValueError(f"Invalid period '{value}'. Use 'year' or a month number 1-12.")
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid period '{value}'. Use 'year' or a month number 1-12.")
    return month


def _month_of(period: Period) -> Optional[int]:
    return None if period == FULL_YEAR else int(period)


def all_orders(stats: Dict[str, Any]) -> List[Dict[str, Any]]:
    orders = []
    for bucket in (stats.get('salesByAddress') or {}).values():
        orders.extend(bucket.get('orders') or [])
    return orders


def filter_orders(orders: List[Dict[str, Any]], calendar: FiscalCalendar,
                  fiscal_year: int, period: Period) -> List[Dict[str, Any]]:
    month = _month_of(period)
    return [o for o in orders if calendar.contains(parse_optional_date(o.get('date')), fiscal_year, month)]


def available_years(stats: Dict[str, Any], calendar: FiscalCalendar, today: Optional[date] = None) -> List[int]:
    """Financial years present in the data, newest first. The current one is always offered."""
    today = today or date.today()
    years = {calendar.fiscal_year_of(today)}
    for order in all_orders(stats):
        d = parse_optional_date(order.get('date'))
        if d:
            years.add(calendar.fiscal_year_of(d))
    return sorted(years, reverse=True)


def period_kpis(orders: List[Dict[str, Any]]) -> Dict[str, Any]:
    revenue = sum(safe_float(o.get('amount')) for o in orders)
    count = len(orders)
    return {
        "revenue": revenue,
        "orders": count,
        "avg": revenue / count if count > 0 else 0,
    }


def build_chart_series(orders: List[Dict[str, Any]], calendar: FiscalCalendar,
                       fiscal_year: int, period: Period) -> List[Dict[str, Any]]:
    """
    Zero-filled trend series: 12 month buckets in fiscal order for the full
    year, or one bucket per day of the selected month.
    """
    month = _month_of(period)
    if month is None:
        grouped = {(y, m): 0.0 for y, m in calendar.months(fiscal_year)}
        for order in orders:
            d = parse_optional_date(order.get('date'))
            if calendar.contains(d, fiscal_year):
                grouped[(d.year, d.month)] += safe_float(order.get('amount'))
        return [{"name": MONTH_ABBR[m - 1], "value": value} for (_, m), value in grouped.items()]

    days = {day: 0.0 for day in range(1, calendar.days_in_month(fiscal_year, month) + 1)}
    for order in orders:
        d = parse_optional_date(order.get('date'))
        if calendar.contains(d, fiscal_year, month):
            days[d.day] += safe_float(order.get('amount'))
    return [{"name": str(day), "value": value} for day, value in days.items()]


def clean_address_label(address: str, customer_name: str = '', width: int = 35) -> str:
    """
    Short chart label for a delivery address: drop a leading customer-name
    prefix, keep the first comma-separated part and cap it at `width` chars.
    """
    clean = address or ''
    if customer_name and clean.startswith(customer_name):
        clean = clean[len(customer_name):].strip()
        if clean.startswith(','):
            clean = clean[1:]
        clean = clean.strip()
    if len(clean) < 2:
        clean = MAIN_OFFICE_LABEL

    first_part = clean.split(',')[0]
    if len(first_part) > width:
        return first_part[:width - 2] + '...'
    return first_part


def build_address_series(stats: Dict[str, Any], calendar: FiscalCalendar, fiscal_year: int,
                         period: Period, label_width: int = 35) -> List[Dict[str, Any]]:
    """Spend per delivery address in the period, largest first. Addresses with no spend are left out."""
    customer_name = stats.get('customer') or ''
    series = []
    for address, bucket in (stats.get('salesByAddress') or {}).items():
        orders = filter_orders(bucket.get('orders') or [], calendar, fiscal_year, period)
        total = sum(safe_float(o.get('amount')) for o in orders)
        if total > 0:
            series.append({
                "name": clean_address_label(address, customer_name, label_width),
                "fullName": address,
                "value": total,
                "count": len(orders),
            })
    series.sort(key=lambda item: item["value"], reverse=True)
    return series


def build_location_table(address_series: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [
        {"label": item["name"], "full_name": item["fullName"], "count": item["count"], "total": item["value"]}
        for item in address_series
    ]


def build_invoice_list(stats: Dict[str, Any], calendar: FiscalCalendar,
                       fiscal_year: int, period: Period) -> List[Dict[str, Any]]:
    """Invoices of the period, newest first."""
    month = _month_of(period)
    rows = []
    for inv in stats.get('recentInvoices') or []:
        d = parse_optional_date(inv.get('invoice_date') or inv.get('date'))
        if not calendar.contains(d, fiscal_year, month):
            continue
        shipping = inv.get('partner_shipping_id')
        rows.append({
            "id": inv.get('id'),
            "name": inv.get('name'),
            "date": d.isoformat(),
            "shipping_address": shipping[1] if isinstance(shipping, (list, tuple)) and len(shipping) > 1 else MAIN_ADDRESS_LABEL,
            "state": inv.get('state') or 'posted',
            "move_type": inv.get('move_type'),
            "amount": safe_float(inv.get('amount_total')),
        })
    rows.sort(key=lambda row: row["date"], reverse=True)
    return rows


def period_label(calendar: FiscalCalendar, fiscal_year: int, period: Period) -> str:
    month = _month_of(period)
    if month is None:
        return f"Full Year {calendar.label(fiscal_year)}"
    return f"{MONTH_NAMES[month - 1]} {calendar.month_year(fiscal_year, month)}"


def build_dashboard_view(stats: Dict[str, Any], calendar: FiscalCalendar,
                         fiscal_year: Optional[int] = None, period: Period = FULL_YEAR,
                         label_width: int = 35, today: Optional[date] = None) -> Dict[str, Any]:
    """Everything the dashboard page and the report need for one (year, period) selection."""
    today = today or date.today()
    if fiscal_year is None:
        fiscal_year = calendar.fiscal_year_of(today)

    orders = filter_orders(all_orders(stats), calendar, fiscal_year, period)
    address_series = build_address_series(stats, calendar, fiscal_year, period, label_width)
    start, end = calendar.bounds(fiscal_year)

    logger.debug(f"Dashboard view for FY {fiscal_year}, period {period}: {len(orders)} order(s), {len(address_series)} address(es).")
    return {
        "customer": stats.get('customer'),
        "year": fiscal_year,
        "year_label": calendar.label(fiscal_year),
        "year_start": start.isoformat(),
        "year_end": end.isoformat(),
        "period": period,
        "period_label": period_label(calendar, fiscal_year, period),
        "available_years": available_years(stats, calendar, today),
        "months": [{"value": m, "name": MONTH_NAMES[m - 1]} for m in calendar.month_order()],
        "kpi": period_kpis(orders),
        "chart": build_chart_series(orders, calendar, fiscal_year, period),
        "addresses": address_series,
        "locations": build_location_table(address_series),
        "invoices": build_invoice_list(stats, calendar, fiscal_year, period),
    }
