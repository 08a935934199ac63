"""Inclusive date-range arithmetic shared by every calculation method.

Ranges are inclusive on both ends: a stay from 1 March to 1 March is one day.
Two ranges that touch on a single boundary day overlap by that one day.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta


def as_date(value: date) -> date:
    """Drop time of day; datetimes are reduced to their calendar date."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between_inclusive(start: date, end: date) -> int:
    """Number of calendar days from start to end, both counted. Never negative."""
    days = (as_date(end) - as_date(start)).days + 1
    return max(0, days)


def shift_days(value: date, days: int) -> date:
    return as_date(value) + timedelta(days=days)


@dataclass(frozen=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", as_date(self.start))
        object.__setattr__(self, "end", as_date(self.end))

    @property
    def days(self) -> int:
        return days_between_inclusive(self.start, self.end)

    @property
    def is_empty(self) -> bool:
        return self.end < self.start

    def contains(self, value: date) -> bool:
        return self.start <= as_date(value) <= self.end


def intersect(a: DateRange, b: DateRange) -> DateRange | None:
    """Overlapping part of two inclusive ranges, or None when they are disjoint."""
    start = max(a.start, b.start)
    end = min(a.end, b.end)
    if end < start:
        return None
    return DateRange(start, end)


def calendar_year(value: date) -> DateRange:
    year = as_date(value).year
    return DateRange(date(year, 1, 1), date(year, 12, 31))


def trailing_window(reference_date: date, length_days: int) -> DateRange:
    """The length_days-long window ending on reference_date."""
    return DateRange(shift_days(reference_date, -(length_days - 1)), reference_date)
