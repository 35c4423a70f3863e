from datetime import date, datetime
from typing import Optional

from ..errors import InvalidDateFormat


def parse_stay_date(value: Optional[str]) -> date:
    """Parse a check-in/check-out value.

    Accepts ``YYYY-MM-DD`` and full ISO datetimes (browsers often send
    ``2025-06-01T00:00:00.000Z``); the time part is dropped.
    """
    if isinstance(value, date):
        return value
    if not value or not isinstance(value, str):
        raise InvalidDateFormat()
    v = value.strip()
    try:
        return date.fromisoformat(v)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
    except ValueError:
        raise InvalidDateFormat()

