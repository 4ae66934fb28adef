"""
Date helpers.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class DateDiff:
    day: int
    hour: int
    min: int
    sec: int


def date_diff(date1: datetime, date2: datetime) -> DateDiff:
    """
    Difference `date1 - date2` split into days, hours, minutes and seconds.

    Sub-second precision is dropped by flooring to whole seconds. Hours,
    minutes and seconds are always in range (Python's floor modulo), so a
    negative difference shows up as a negative `day` only.
    """
    delta = date1 - date2
    # timedelta keeps seconds/microseconds non-negative, so this is the floor.
    seconds = delta.days * 86400 + delta.seconds

    sec = seconds % 60
    minutes = (seconds - sec) // 60
    mins = minutes % 60
    hours = (minutes - mins) // 60
    hour = hours % 24
    day = (hours - hour) // 24

    return DateDiff(day=day, hour=hour, min=mins, sec=sec)
