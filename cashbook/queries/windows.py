"""
Calendar windows for the time-based filters.

All windows are half-open [start, end) ranges of calendar dates in local
time, computed from a reference instant. Weeks start on Monday.
"""

import datetime as dt
from typing import NamedTuple, Union

from cashbook.models.transaction import FilterKind


Instant = Union[dt.datetime, dt.date]


class DateWindow(NamedTuple):
    """Half-open range of calendar dates: start <= d < end."""

    start: dt.date
    end: dt.date

    def contains(self, day: dt.date) -> bool:
        return self.start <= day < self.end


def _as_date(reference: Instant) -> dt.date:
    if isinstance(reference, dt.datetime):
        return reference.date()
    return reference


def day_window(reference: Instant) -> DateWindow:
    start = _as_date(reference)
    return DateWindow(start, start + dt.timedelta(days=1))


def week_window(reference: Instant) -> DateWindow:
    """Monday-to-Monday week containing the reference day."""
    today = _as_date(reference)
    # 0 = Sunday .. 6 = Saturday
    day_of_week = today.isoweekday() % 7
    offset_to_monday = -6 if day_of_week == 0 else 1 - day_of_week
    start = today + dt.timedelta(days=offset_to_monday)
    return DateWindow(start, start + dt.timedelta(days=7))


def month_window(reference: Instant) -> DateWindow:
    today = _as_date(reference)
    start = today.replace(day=1)
    if start.month == 12:
        end = dt.date(start.year + 1, 1, 1)
    else:
        end = dt.date(start.year, start.month + 1, 1)
    return DateWindow(start, end)


def year_window(reference: Instant) -> DateWindow:
    today = _as_date(reference)
    return DateWindow(dt.date(today.year, 1, 1), dt.date(today.year + 1, 1, 1))


_WINDOW_FUNCTIONS = {
    FilterKind.DAILY: day_window,
    FilterKind.WEEKLY: week_window,
    FilterKind.MONTHLY: month_window,
    FilterKind.YEARLY: year_window,
}


def window_for(kind: FilterKind, reference: Instant) -> DateWindow:
    """
    Window for a time-based filter.

    Raises:
        ValueError: If `kind` is not a time-window filter
    """
    try:
        window_function = _WINDOW_FUNCTIONS[FilterKind(kind)]
    except KeyError:
        raise ValueError(f"{kind} is not a time-window filter") from None
    return window_function(reference)
