from datetime import date, timedelta
from typing import List

from domain.exceptions import InvalidDateRangeError


def date_range(start: date, end: date) -> List[date]:
    """Every calendar day from start to end, both inclusive."""
    if start > end:
        raise InvalidDateRangeError(f"Start date {start} is after end date {end}")

    days = (end - start).days
    return [start + timedelta(days=i) for i in range(days + 1)]
