"""Tests for CSV export."""

import datetime as dt
from decimal import Decimal

import pytest

from cashbook.models import Transaction
from cashbook.services.export import (
    HEADERS,
    all_rows,
    default_export_range,
    export_rows,
    full_filename,
    range_filename,
    render_csv,
    to_row,
)
from cashbook.validation import ValidationError


def make(id, amount, date, time="00:00", description="Item"):
    amount = Decimal(amount)
    return Transaction(
        id=id,
        description=description,
        amount=amount,
        type="income" if amount > 0 else "expense",
        date=date,
        time=time,
    )


@pytest.fixture
def ledger():
    return [
        make("1", "-50", "2024-03-10", "08:30", description="Coffee"),
        make("2", "1000", "2024-03-01", description="Salary"),
        make("3", "-12.345", "2024-03-31", "23:00", description="Snacks"),
        make("4", "-20", "2024-04-01", description="Bus"),
        make("5", "75.5", "2024-03-10", "07:00", description="Refund, partial"),
    ]


class TestRows:
    """Tests for row selection and formatting."""

    def test_row_format(self):
        row = to_row(make("1", "-50", "2024-03-10", "08:30", description="Coffee"))
        assert row == ["2024-03-10", "08:30", "Coffee", "expense", "50.00"]

    def test_amount_rounds_to_cents(self):
        assert to_row(make("1", "-12.345", "2024-03-10"))[4] == "12.35"

    def test_range_is_inclusive(self, ledger):
        rows = export_rows(ledger, dt.date(2024, 3, 1), dt.date(2024, 3, 31))
        assert [row[2] for row in rows] == [
            "Salary", "Refund, partial", "Coffee", "Snacks",
        ]

    def test_single_day(self, ledger):
        rows = export_rows(ledger, dt.date(2024, 4, 1), dt.date(2024, 4, 1))
        assert [row[2] for row in rows] == ["Bus"]

    def test_empty_range(self, ledger):
        assert export_rows(ledger, dt.date(2025, 1, 1), dt.date(2025, 1, 31)) == []

    def test_start_after_end(self, ledger):
        with pytest.raises(ValidationError) as exc_info:
            export_rows(ledger, dt.date(2024, 3, 31), dt.date(2024, 3, 1))
        assert exc_info.value.issues[0].issue_type == "invalid_range"

    def test_all_rows(self, ledger):
        assert len(all_rows(ledger)) == 5


class TestRender:
    """Tests for the rendered CSV text."""

    def test_header_only_when_empty(self):
        assert render_csv([]) == ",".join(HEADERS) + "\n"

    def test_quotes_commas(self):
        text = render_csv([["2024-03-10", "07:00", "Refund, partial", "income", "75.50"]])
        assert text.splitlines()[1] == '2024-03-10,07:00,"Refund, partial",income,75.50'

    def test_quotes_embedded_quotes(self):
        text = render_csv([["2024-03-10", "07:00", 'The "good" cafe', "expense", "5.00"]])
        assert '"The ""good"" cafe"' in text


class TestDefaults:
    """Tests for default range and file names."""

    def test_default_range_is_current_month(self):
        assert default_export_range(dt.datetime(2024, 2, 10, 9, 0)) == (
            dt.date(2024, 2, 1),
            dt.date(2024, 2, 29),
        )

    def test_default_range_in_december(self):
        assert default_export_range(dt.date(2023, 12, 5)) == (
            dt.date(2023, 12, 1),
            dt.date(2023, 12, 31),
        )

    def test_range_filename(self):
        name = range_filename(dt.date(2024, 3, 1), dt.date(2024, 3, 31))
        assert name == "cashbook_export_2024-03-01_to_2024-03-31.csv"

    def test_full_filename(self):
        assert full_filename(dt.date(2024, 3, 15)) == "cashbook_export_2024-03-15.csv"
