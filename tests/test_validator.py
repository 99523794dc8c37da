"""Tests for TransactionValidator."""

import datetime as dt
from decimal import Decimal

import pytest

from cashbook.models import TransactionDraft, TransactionType
from cashbook.validation import TransactionValidator, ValidationError, parse_decimal

from tests.conftest import TODAY, draft


@pytest.fixture
def validator():
    return TransactionValidator(today=lambda: TODAY)


class TestValidDrafts:
    """Drafts that pass validation."""

    def test_expense_amount_is_negated(self, validator):
        result = validator.validate(draft(amount="50", type="expense"))
        assert result.is_valid
        assert result.values["amount"] == Decimal("-50")
        assert result.values["type"] is TransactionType.EXPENSE

    def test_income_amount_stays_positive(self, validator):
        result = validator.validate(draft(amount=1200, type="income"))
        assert result.values["amount"] == Decimal("1200")

    def test_float_amount_keeps_short_repr(self, validator):
        """Test that 0.1 does not turn into binary noise."""
        result = validator.validate(draft(amount=0.1))
        assert result.values["amount"] == Decimal("-0.1")

    def test_type_is_case_insensitive(self, validator):
        result = validator.validate(draft(type="Income"))
        assert result.values["type"] is TransactionType.INCOME

    def test_blank_time_defaults(self, validator):
        result = validator.validate(draft(time=""))
        assert result.values["time"] == "00:00"

    def test_date_object_accepted(self, validator):
        result = validator.validate(draft(date=dt.date(2024, 3, 1)))
        assert result.values["date"] == dt.date(2024, 3, 1)

    def test_accepts_draft_model(self, validator):
        result = validator.validate(TransactionDraft(**draft()))
        assert result.is_valid

    def test_long_description_is_accepted(self, validator):
        result = validator.validate(draft(description="a" * 2000))
        assert result.is_valid
        assert len(result.values["description"]) == 2000

    def test_future_date_is_only_a_warning(self, validator):
        result = validator.validate(draft(date="2024-04-01"))
        assert result.is_valid
        assert result.warnings == ["Date (2024-04-01) is in the future"]
        assert result.has_errors is False


class TestInvalidDrafts:
    """Drafts that are rejected."""

    @pytest.mark.parametrize("description", ["", "   "])
    def test_empty_description(self, validator, description):
        result = validator.validate(draft(description=description))
        assert not result.is_valid
        assert result.issues[0].field == "description"
        assert result.values == {}

    @pytest.mark.parametrize("amount", ["0", 0, "-5", -5.5, "abc", "", None, "nan", "Infinity"])
    def test_bad_amount(self, validator, amount):
        result = validator.validate(draft(amount=amount))
        assert not result.is_valid
        assert [i.field for i in result.issues] == ["amount"]

    def test_unknown_type(self, validator):
        result = validator.validate(draft(type="transfer"))
        assert not result.is_valid
        assert result.issues[0].field == "type"

    def test_missing_date(self, validator):
        result = validator.validate(draft(date=None))
        assert result.issues[0].issue_type == "missing"

    def test_malformed_date(self, validator):
        result = validator.validate(draft(date="10/03/2024"))
        assert result.issues[0].issue_type == "invalid_format"

    def test_malformed_time(self, validator):
        result = validator.validate(draft(time="8.30pm"))
        assert result.issues[0].field == "time"

    def test_reports_every_issue(self, validator):
        result = validator.validate(draft(description="", amount="-1"))
        assert result.error_count == 2

    def test_validate_or_raise(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate_or_raise(draft(description=""))
        assert "Description is required" in str(exc_info.value)
        assert exc_info.value.issues[0].field == "description"

    def test_unusable_field_types(self, validator):
        """Test that structurally wrong input becomes a ValidationError."""
        with pytest.raises(ValidationError):
            validator.validate(draft(amount=["50"]))


class TestParseDecimal:
    """Tests for the number parser shared with the loader."""

    def test_values(self):
        assert parse_decimal("12.50") == Decimal("12.50")
        assert parse_decimal(" 7 ") == Decimal("7")
        assert parse_decimal(3) == Decimal("3")
        assert parse_decimal(2.675) == Decimal("2.675")

    def test_rejects(self):
        assert parse_decimal("12abc") is None
        assert parse_decimal(True) is None
        assert parse_decimal(None) is None
