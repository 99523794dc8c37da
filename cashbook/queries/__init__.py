"""Ledger queries: time windows, filters and summaries."""

from cashbook.queries.filters import (
    filter_by_date_range,
    filter_transactions,
    sort_for_display,
)
from cashbook.queries.summary import summarize, summary_for
from cashbook.queries.windows import (
    DateWindow,
    day_window,
    month_window,
    week_window,
    window_for,
    year_window,
)

__all__ = [
    "DateWindow",
    "day_window",
    "filter_by_date_range",
    "filter_transactions",
    "month_window",
    "sort_for_display",
    "summarize",
    "summary_for",
    "week_window",
    "window_for",
    "year_window",
]
