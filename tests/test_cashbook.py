"""Integration tests for the CashBook facade and its factory."""

import datetime as dt
import json
from decimal import Decimal

import pytest

from cashbook.calculator import Calculator
from cashbook.config import Settings, get_settings
from cashbook.models import AuditEventType, FilterKind, TransactionType
from cashbook.orchestrator import CashBook, create_backend, create_cashbook
from cashbook.services.notes import NotesStore
from cashbook.services.storage import (
    InMemoryKeyValueStore,
    LocalFileKeyValueStore,
    NotFoundError,
)
from cashbook.validation import ValidationError

from tests.conftest import NOW, draft


@pytest.fixture
def cashbook(store, backend, audit_logger):
    return CashBook(
        store,
        notes=NotesStore(backend, audit_logger=audit_logger),
        audit_logger=audit_logger,
        clock=lambda: NOW,
    )


class TestSubmit:
    """Tests for the create/edit flow."""

    def test_create(self, cashbook):
        created = cashbook.submit(draft())
        assert cashbook.store.list() == [created]
        assert cashbook.editing_id is None

    def test_begin_edit_prefills_magnitude_and_type(self, cashbook):
        created = cashbook.submit(draft(amount="50", type="expense"))

        prefill = cashbook.begin_edit(created.id)

        assert prefill.amount == Decimal("50")
        assert prefill.type == "expense"
        assert prefill.description == "Coffee"
        assert prefill.date == dt.date(2024, 3, 10)
        assert cashbook.editing_id == created.id

    def test_submit_while_editing_updates(self, cashbook):
        first = cashbook.submit(draft(description="Coffee"))
        second = cashbook.submit(draft(description="Tea"))

        cashbook.begin_edit(first.id)
        updated = cashbook.submit(draft(description="Espresso", amount="3.5"))

        assert updated.id == first.id
        assert [t.description for t in cashbook.store.list()] == ["Espresso", "Tea"]
        assert cashbook.store.list()[1] == second
        assert cashbook.editing_id is None

    def test_prefilled_draft_round_trips(self, cashbook):
        created = cashbook.submit(draft(amount="12.50", type="income"))
        prefill = cashbook.begin_edit(created.id)

        updated = cashbook.submit(prefill)

        assert updated == created

    def test_invalid_edit_keeps_edit_open(self, cashbook):
        created = cashbook.submit(draft())
        cashbook.begin_edit(created.id)

        with pytest.raises(ValidationError):
            cashbook.submit(draft(amount="abc"))

        assert cashbook.editing_id == created.id

    def test_edit_of_deleted_record(self, cashbook):
        created = cashbook.submit(draft())
        cashbook.begin_edit(created.id)
        cashbook.store.delete(created.id)

        with pytest.raises(NotFoundError):
            cashbook.submit(draft())

        assert cashbook.editing_id is None
        assert cashbook.store.list() == []

    def test_cancel_edit(self, cashbook):
        created = cashbook.submit(draft())
        cashbook.begin_edit(created.id)
        cashbook.cancel_edit()

        cashbook.submit(draft(description="New"))

        assert len(cashbook.store.list()) == 2

    def test_delete_clears_matching_edit(self, cashbook):
        created = cashbook.submit(draft())
        cashbook.begin_edit(created.id)
        cashbook.delete(created.id)
        assert cashbook.editing_id is None

    def test_clear_all(self, cashbook):
        cashbook.submit(draft())
        cashbook.submit(draft())
        assert cashbook.clear_all() == 2
        assert cashbook.store.list() == []


class TestViews:
    """Tests for the filtered view and its summary."""

    @pytest.fixture
    def populated(self, cashbook):
        cashbook.submit(draft(description="Salary", amount="1000", type="income", date="2024-03-01"))
        cashbook.submit(draft(description="Coffee", amount="50", date="2024-03-15", time="08:30"))
        cashbook.submit(draft(description="Rent", amount="400", date="2024-02-28"))
        cashbook.submit(draft(description="Lunch", amount="20", date="2024-03-15", time="12:15"))
        return cashbook

    def test_default_filter_is_all_newest_first(self, populated):
        assert populated.current_filter is FilterKind.ALL
        assert [t.description for t in populated.visible_transactions()] == [
            "Lunch", "Coffee", "Salary", "Rent",
        ]

    def test_daily_view_and_summary(self, populated):
        populated.set_filter("daily")

        assert [t.description for t in populated.visible_transactions()] == ["Lunch", "Coffee"]
        summary = populated.summary()
        assert summary.total_income == Decimal("0")
        assert summary.total_expense == Decimal("70")
        assert summary.balance == Decimal("-70")

    def test_expense_view_keeps_whole_ledger_totals(self, populated):
        populated.set_filter(FilterKind.EXPENSE)

        assert all(t.type is TransactionType.EXPENSE for t in populated.visible_transactions())
        summary = populated.summary()
        assert summary.total_income == Decimal("1000")
        assert summary.total_expense == Decimal("470")

    def test_explicit_reference(self, populated):
        populated.set_filter(FilterKind.MONTHLY)
        visible = populated.visible_transactions(dt.datetime(2024, 2, 1))
        assert [t.description for t in visible] == ["Rent"]

    def test_unknown_filter(self, cashbook):
        with pytest.raises(ValueError):
            cashbook.set_filter("hourly")
        assert cashbook.current_filter is FilterKind.ALL

    def test_filter_change_is_audited_once(self, cashbook, audit_logger):
        cashbook.set_filter("weekly")
        cashbook.set_filter("weekly")
        changes = [
            e for e in audit_logger.recent_events()
            if e.event_type == AuditEventType.FILTER_CHANGED
        ]
        assert len(changes) == 1
        assert changes[0].details == {"previous": "all", "current": "weekly"}


class TestCalculatorHandOff:
    """Tests for use_calculator_result."""

    def test_positive_result(self, cashbook):
        for key in "12*3=":
            cashbook.calculator.press(key)
        assert cashbook.use_calculator_result() == Decimal("36")

    @pytest.mark.parametrize("keys", ["", "5-9=", "0."])
    def test_non_positive_result(self, cashbook, keys):
        for key in keys:
            cashbook.calculator.press(key)
        with pytest.raises(ValidationError, match="calculate a valid amount"):
            cashbook.use_calculator_result()

    def test_result_submits_as_amount(self, cashbook):
        for key in "4.5+.5=":
            cashbook.calculator.press(key)
        created = cashbook.submit(draft(amount=cashbook.use_calculator_result()))
        assert created.amount == Decimal("-5")


class TestExport:
    """Tests for export through the facade."""

    def test_default_range(self, cashbook):
        assert cashbook.default_export_range() == (dt.date(2024, 3, 1), dt.date(2024, 3, 31))

    def test_export_range(self, cashbook, audit_logger):
        cashbook.submit(draft(description="Coffee", date="2024-03-10"))
        cashbook.submit(draft(description="Old", date="2024-01-10"))

        export = cashbook.export_csv(*cashbook.default_export_range())

        assert export.filename == "cashbook_export_2024-03-01_to_2024-03-31.csv"
        assert export.row_count == 1
        assert export.content.splitlines() == [
            "Date,Time,Description,Type,Amount",
            "2024-03-10,08:30,Coffee,expense,50.00",
        ]
        assert audit_logger.recent_events()[0].event_type == AuditEventType.CSV_EXPORTED

    def test_export_bad_range(self, cashbook, audit_logger):
        with pytest.raises(ValidationError):
            cashbook.export_csv(dt.date(2024, 3, 2), dt.date(2024, 3, 1))
        assert audit_logger.recent_events()[0].event_type == AuditEventType.VALIDATION_FAILED

    def test_export_all(self, cashbook):
        cashbook.submit(draft(date="2024-03-10"))
        cashbook.submit(draft(date="2023-01-01"))

        export = cashbook.export_all_csv()

        assert export.filename == "cashbook_export_2024-03-15.csv"
        assert export.row_count == 2
        assert export.content.splitlines()[1].startswith("2023-01-01")


class TestNotes:
    def test_notes_share_the_backend(self, cashbook, backend):
        cashbook.notes.save("Budget review on Sunday")
        assert backend.get("cashbook_notes") == "Budget review on Sunday"


class TestCreateCashbook:
    """Tests for the factory."""

    @pytest.fixture(autouse=True)
    def _fresh_settings(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_with_explicit_backend(self):
        backend = InMemoryKeyValueStore()
        cashbook = create_cashbook(Settings(), backend=backend, clock=lambda: NOW)

        cashbook.submit(draft())

        assert json.loads(backend.get("cashbook_transactions"))["version"] == 2
        assert isinstance(cashbook.calculator, Calculator)

    def test_memory_backend_from_env(self, monkeypatch):
        monkeypatch.setenv("CASHBOOK_STORAGE_BACKEND", "memory")
        assert isinstance(create_backend(Settings()), InMemoryKeyValueStore)

    def test_file_backend_persists_between_sessions(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CASHBOOK_STORAGE_DATA_DIR", str(tmp_path / "ledger"))
        assert isinstance(create_backend(Settings()), LocalFileKeyValueStore)

        first = create_cashbook(clock=lambda: NOW)
        created = first.submit(draft())
        first.notes.save("hello")

        get_settings.cache_clear()
        second = create_cashbook(clock=lambda: NOW)

        assert second.store.list() == [created]
        assert second.notes.load() == "hello"

    def test_calculator_settings_from_env(self, monkeypatch):
        monkeypatch.setenv("CASHBOOK_CALCULATOR_MAX_INPUT_LENGTH", "3")
        cashbook = create_cashbook(Settings(), backend=InMemoryKeyValueStore())
        for key in "12345":
            cashbook.calculator.press(key)
        assert cashbook.calculator.current_input == "123"

    def test_future_date_uses_injected_clock(self):
        """Test that the validator's notion of today follows the clock."""
        cashbook = create_cashbook(Settings(), backend=InMemoryKeyValueStore(), clock=lambda: NOW)
        created = cashbook.submit(draft(date="2024-03-20"))
        assert created.date == dt.date(2024, 3, 20)
