from datetime import date
from typing import Any, Optional
from .logger import logger

def safe_float(value: Any, default: float = 0.0) -> float:
    """Converts a value to float, returning `default` on failure or for Odoo's False."""
    if value is None or value is False:
        return default
    try:
        return float(value)
    except (ValueError, TypeError) as e:
        logger.debug(f"Could not convert '{value}' (type: {type(value)}) to float: {e}")
        return default

def odoo_str(value: Any) -> Optional[str]:
    """Odoo returns False for empty char fields."""
    if value is None or value is False:
        return None
    return str(value)

def parse_optional_date(value: Any) -> Optional[date]:
    """Parses 'YYYY-MM-DD' (or an ISO datetime) into a date, returning None on failure."""
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        date_str = value.split('T')[0].split(' ')[0]
        return date.fromisoformat(date_str)
    except (ValueError, TypeError) as e:
        logger.warning(f"Could not convert '{value}' to date: {e}")
        return None

def many2one_id(value: Any) -> Optional[int]:
    """Id of an Odoo many2one value ([id, "Name"] or False)."""
    if isinstance(value, (list, tuple)) and value:
        return value[0]
    return None

def many2one_name(value: Any, default: Optional[str] = None) -> Optional[str]:
    """Display name of an Odoo many2one value ([id, "Name"] or False)."""
    if isinstance(value, (list, tuple)) and len(value) > 1:
        return value[1]
    return default
