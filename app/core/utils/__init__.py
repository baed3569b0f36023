"""유틸리티 모듈"""

from app.core.utils.datetime import (
    UTC,
    days_ago,
    end_of_day,
    format_iso,
    get_search_timezone,
    now_local,
    now_utc,
    parse_timestamp,
    start_of_day,
)
from app.core.utils.time import measure_time, monotonic_ms

__all__ = [
    # datetime
    "UTC",
    "get_search_timezone",
    "now_utc",
    "now_local",
    "start_of_day",
    "end_of_day",
    "days_ago",
    "parse_timestamp",
    "format_iso",
    # time measurement
    "monotonic_ms",
    "measure_time",
]
