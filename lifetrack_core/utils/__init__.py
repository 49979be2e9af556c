# Utils package
from .dates import (
    DATE_FORMAT,
    get_current_date,
    format_date,
    parse_date,
    recent_range,
)

__all__ = [
    "DATE_FORMAT",
    "get_current_date",
    "format_date",
    "parse_date",
    "recent_range",
]
