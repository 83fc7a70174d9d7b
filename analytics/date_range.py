"""
Date range resolution for named ranges like "last-28-days".
"""

import re
from datetime import date, datetime, timedelta, timezone
from typing import Optional

DEFAULT_DAYS = 28

_DAYS_PATTERN = re.compile(r"-(\d+)-")


def get_number_of_days(date_range: str, multiplier: int = 1) -> int:
    """Number of days covered by a named range, scaled by `multiplier`."""
    match = _DAYS_PATTERN.search(date_range or "")
    days = int(match.group(1)) if match else DEFAULT_DAYS
    return days * multiplier


def parse_date_range(
    date_range: str,
    multiplier: int = 1,
    offset: int = 0,
    previous: bool = False,
    today: Optional[date] = None
) -> tuple[str, str]:
    """
    Resolve a named range into concrete inclusive start and end dates.

    Args:
        date_range: Range name, e.g. "last-7-days". Ranges without a day
            count fall back to 28 days.
        multiplier: Scales the span; compare mode passes 2 so that the
            current and previous periods are covered by one merged range.
        offset: Days before today that the range ends on.
        previous: Shift the range back by its own length.
        today: Reference date (defaults to the current UTC date).

    Returns:
        Tuple of (start_date, end_date) in YYYY-MM-DD format.
    """
    today = today or datetime.now(timezone.utc).date()
    number_of_days = get_number_of_days(date_range, multiplier)

    end_offset = offset + number_of_days if previous else offset
    end_date = today - timedelta(days=end_offset)
    start_date = end_date - timedelta(days=number_of_days - 1)

    return start_date.strftime("%Y-%m-%d"), end_date.strftime("%Y-%m-%d")
