import os
import re
from typing import Any, Dict

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'templates')

def format_money(value: Any, symbol: str = '') -> str:
    """1234.5 -> '£1,234.50' (sign in front of the symbol)."""
    try:
        amount = float(value or 0)
    except (ValueError, TypeError):
        amount = 0.0
    sign = '-' if amount < 0 else ''
    return f"{sign}{symbol}{abs(amount):,.2f}"

def format_date(value: Any) -> str:
    """ISO 'YYYY-MM-DD' -> 'DD-MM-YYYY'."""
    if not value:
        return ''
    parts = str(value).split('T')[0].split('-')
    if len(parts) != 3:
        return str(value)
    return f"{parts[2]}-{parts[1]}-{parts[0]}"

def report_filename(view: Dict[str, Any]) -> str:
    raw = f"sales_report_{view.get('year_label', '')}_{view.get('period', '')}"
    return re.sub(r'[^A-Za-z0-9_-]+', '_', raw) + '.pdf'
