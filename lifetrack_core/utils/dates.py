# =============================================================================
# lifetrack_core/utils/dates.py
# Date helpers for YYYY-MM-DD keyed records
# =============================================================================

from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

DATE_FORMAT = "%Y-%m-%d"


def get_current_date() -> str:
    """Today's date as YYYY-MM-DD."""
    return date.today().strftime(DATE_FORMAT)


def format_date(value: Union[date, datetime]) -> str:
    return value.strftime(DATE_FORMAT)


def parse_date(value: str) -> Optional[date]:
    """Parse YYYY-MM-DD; returns None when the string does not match."""
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError):
        return None


def recent_range(days: int, today: Optional[date] = None) -> Tuple[str, str]:
    """
    Inclusive (start, end) date strings covering the last ``days`` days.

    Args:
        days: How far back to go; 7 gives today plus the seven previous days
        today: Reference date (defaults to the current date)

    Returns:
        Tuple of (start_date, end_date) as YYYY-MM-DD
    """
    today = today or date.today()
    return format_date(today - timedelta(days=days)), format_date(today)
