"""
Filter Engine

Derives the visible subset of the ledger for the active selector.
Queries are full linear scans; the collection is small.

Type filters (income/expense) and time windows are never combined:
exactly one selector is active.
"""

import datetime as dt
from collections.abc import Iterable
from typing import Optional

from cashbook.models.transaction import FilterKind, Transaction
from cashbook.queries.windows import Instant, window_for


def filter_transactions(
    transactions: Iterable[Transaction],
    selector: FilterKind,
    reference: Optional[Instant] = None,
) -> list[Transaction]:
    """
    Return the transactions matching `selector`, in input order.

    Args:
        transactions: Records to filter
        selector: Active filter
        reference: Instant the time windows are computed from
                   (local now if None)
    """
    selector = FilterKind(selector)
    transactions = list(transactions)

    if selector == FilterKind.ALL:
        return transactions
    if selector == FilterKind.INCOME:
        return [t for t in transactions if t.amount > 0]
    if selector == FilterKind.EXPENSE:
        return [t for t in transactions if t.amount < 0]

    window = window_for(selector, reference or dt.datetime.now())
    return [t for t in transactions if window.contains(t.date)]


def filter_by_date_range(
    transactions: Iterable[Transaction],
    start: dt.date,
    end: dt.date,
) -> list[Transaction]:
    """Transactions dated within [start, end], both ends inclusive."""
    end_exclusive = end + dt.timedelta(days=1)
    return [t for t in transactions if start <= t.date < end_exclusive]


def sort_for_display(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Newest first: date descending, then time descending; ties keep input order."""
    return sorted(transactions, key=lambda t: (t.date, t.time), reverse=True)
