from __future__ import annotations

import math
from datetime import date, datetime
from typing import Union

DateLike = Union[date, datetime]

_SECONDS_PER_DAY = 24 * 60 * 60


def _as_midnight(value: DateLike) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime(value.year, value.month, value.day)


def inclusive_days(start: DateLike, end: DateLike) -> int:
    """Number of calendar days from ``start`` to ``end``, both included.

    Time of day is ignored. The distance is taken in absolute value, so a
    reversed pair gives the same count; callers that care about order must
    validate it first.
    """
    delta = abs((_as_midnight(end) - _as_midnight(start)).total_seconds())
    return math.ceil(delta / _SECONDS_PER_DAY) + 1
