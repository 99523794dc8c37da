"""
CSV export of the ledger.

Exports a date range (both ends inclusive) or the whole ledger. The
output is a pure function of the records handed in; writing it to disk
or offering it for download is the caller's business.
"""

import csv
import datetime as dt
import io
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, Field

from cashbook.models.transaction import Transaction
from cashbook.queries.filters import filter_by_date_range
from cashbook.queries.windows import Instant, month_window
from cashbook.validation import ValidationError


HEADERS = ["Date", "Time", "Description", "Type", "Amount"]

_CENTS = Decimal("0.01")


class CsvExport(BaseModel):
    """A rendered export, ready to be saved or downloaded."""

    filename: str
    content: str
    row_count: int = Field(ge=0)


def _format_amount(amount: Decimal) -> str:
    return str(abs(amount).quantize(_CENTS, rounding=ROUND_HALF_UP))


def _chronological(transactions: Iterable[Transaction]) -> list[Transaction]:
    return sorted(transactions, key=lambda t: (t.date, t.time))


def to_row(transaction: Transaction) -> list[str]:
    """(date, time, description, type, absolute amount with 2 decimals)."""
    return [
        transaction.date.isoformat(),
        transaction.time,
        transaction.description,
        transaction.type.value,
        _format_amount(transaction.amount),
    ]


def export_rows(
    transactions: Iterable[Transaction],
    start_date: dt.date,
    end_date: dt.date,
) -> list[list[str]]:
    """
    Rows for every transaction dated within [start_date, end_date].

    Raises:
        ValidationError: If start_date is after end_date
    """
    if start_date > end_date:
        raise ValidationError.single(
            field="start_date",
            issue_type="invalid_range",
            message="Start date cannot be after end date",
        )

    selected = filter_by_date_range(transactions, start_date, end_date)
    return [to_row(t) for t in _chronological(selected)]


def all_rows(transactions: Iterable[Transaction]) -> list[list[str]]:
    return [to_row(t) for t in _chronological(transactions)]


def render_csv(rows: Sequence[Sequence[str]]) -> str:
    """CSV text with the fixed header row first."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(HEADERS)
    writer.writerows(rows)
    return buffer.getvalue()


def default_export_range(reference: Instant) -> tuple[dt.date, dt.date]:
    """First and last day of the reference month."""
    window = month_window(reference)
    return window.start, window.end - dt.timedelta(days=1)


def range_filename(start_date: dt.date, end_date: dt.date) -> str:
    return f"cashbook_export_{start_date.isoformat()}_to_{end_date.isoformat()}.csv"


def full_filename(today: dt.date) -> str:
    return f"cashbook_export_{today.isoformat()}.csv"
