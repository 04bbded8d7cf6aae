# Utils package
from .dates import (
    today_str,
    current_time_str,
    format_12h,
    parse_date,
    minutes_between,
    date_range,
)

__all__ = [
    "today_str",
    "current_time_str",
    "format_12h",
    "parse_date",
    "minutes_between",
    "date_range",
]
