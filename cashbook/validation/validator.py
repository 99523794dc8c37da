"""
Transaction Validation

DESIGN DECISION: Form input is checked in one place before anything is
written to the ledger.

ERRORS (block the write):
- Empty description
- Missing, non-numeric, non-finite or non-positive amount
- Unknown transaction type
- Missing or malformed date
- Malformed time

WARNINGS (reported, never block):
- Date in the future

IMPORTANT: Validation NEVER silently fixes issues.
The only normalization is the documented one: a blank time becomes "00:00"
and the amount's sign is derived from the type.
"""

import datetime as dt
import re
from collections.abc import Callable, Mapping
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from cashbook.models.transaction import (
    DEFAULT_TIME,
    TIME_PATTERN,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


_TIME_RE = re.compile(TIME_PATTERN)


class ValidationError(ValueError):
    """
    Input was rejected. Recoverable; no ledger state was changed.

    The structured issues are available as `result.issues`.
    """

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = [i.message for i in result.issues if i.severity == "error"]
        super().__init__("; ".join(messages) or "Validation failed")

    @property
    def issues(self) -> list[ValidationIssue]:
        return self.result.issues

    @classmethod
    def single(
        cls,
        field: str,
        issue_type: str,
        message: str,
        suggested_fix: Optional[str] = None,
    ) -> "ValidationError":
        """Build an error carrying exactly one issue."""
        issue = ValidationIssue(
            field=field,
            issue_type=issue_type,
            message=message,
            severity="error",
            suggested_fix=suggested_fix,
        )
        return cls(ValidationResult(is_valid=False, issues=[issue]))


def _error(
    field: str,
    issue_type: str,
    message: str,
    suggested_fix: Optional[str] = None,
) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type=issue_type,
        message=message,
        severity="error",
        suggested_fix=suggested_fix,
    )


class TransactionValidator:
    """
    Validates transaction drafts.

    The validator is pure apart from reading today's date for the
    future-date warning; pass `today` to pin it in tests.
    """

    def __init__(self, today: Optional[Callable[[], dt.date]] = None):
        self._today = today or dt.date.today

    def coerce(
        self,
        fields: Union[TransactionDraft, Mapping[str, Any]],
    ) -> TransactionDraft:
        """
        Turn raw form fields into a TransactionDraft.

        Raises:
            ValidationError: If the fields have unusable types
        """
        if isinstance(fields, TransactionDraft):
            return fields

        try:
            return TransactionDraft.model_validate(dict(fields))
        except PydanticValidationError as e:
            issues = [
                _error(
                    field=".".join(str(part) for part in err["loc"]) or "draft",
                    issue_type="invalid_format",
                    message=err["msg"],
                )
                for err in e.errors()
            ]
            raise ValidationError(ValidationResult(is_valid=False, issues=issues)) from e

    def validate(
        self,
        fields: Union[TransactionDraft, Mapping[str, Any]],
    ) -> ValidationResult:
        """
        Run all checks against a draft.

        Returns:
            ValidationResult; `values` holds the normalized fields when valid
        """
        draft = self.coerce(fields)
        issues: list[ValidationIssue] = []

        description = self._check_description(draft.description, issues)
        magnitude = self._check_amount(draft.amount, issues)
        transaction_type = self._check_type(draft.type, issues)
        date = self._check_date(draft.date, issues)
        time = self._check_time(draft.time, issues)

        if date is not None and date > self._today():
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date ({date.isoformat()}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        warnings = [i.message for i in issues if i.severity == "warning"]
        is_valid = not any(i.severity == "error" for i in issues)

        values: dict[str, Any] = {}
        if is_valid:
            signed = magnitude if transaction_type == TransactionType.INCOME else -magnitude
            values = {
                "description": description,
                "amount": signed,
                "type": transaction_type,
                "date": date,
                "time": time,
            }

        return ValidationResult(
            is_valid=is_valid,
            issues=issues,
            warnings=warnings,
            values=values,
        )

    def validate_or_raise(
        self,
        fields: Union[TransactionDraft, Mapping[str, Any]],
    ) -> ValidationResult:
        """Like validate(), but raise ValidationError when invalid."""
        result = self.validate(fields)
        if not result.is_valid:
            raise ValidationError(result)
        return result

    def _check_description(
        self,
        description: str,
        issues: list[ValidationIssue],
    ) -> str:
        description = (description or "").strip()
        if not description:
            issues.append(_error(
                "description",
                "missing",
                "Description is required",
                "Enter what the money was for",
            ))
        return description

    def _check_amount(
        self,
        raw: Any,
        issues: list[ValidationIssue],
    ) -> Optional[Decimal]:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            issues.append(_error("amount", "missing", "Amount is required"))
            return None

        amount = parse_decimal(raw)
        if amount is None:
            issues.append(_error(
                "amount",
                "invalid_format",
                f"Amount ({raw!r}) is not a number",
                "Enter digits only, e.g. 250 or 99.50",
            ))
            return None

        if not amount.is_finite():
            issues.append(_error("amount", "invalid_value", "Amount must be a finite number"))
            return None

        if amount <= 0:
            issues.append(_error(
                "amount",
                "invalid_value",
                "Amount must be greater than zero",
                "Choose income or expense instead of entering a sign",
            ))
            return None

        return amount

    def _check_type(
        self,
        raw: Optional[str],
        issues: list[ValidationIssue],
    ) -> Optional[TransactionType]:
        if isinstance(raw, TransactionType):
            return raw

        if raw is None or not raw.strip():
            issues.append(_error("type", "missing", "Transaction type is required"))
            return None

        try:
            return TransactionType(raw.strip().lower())
        except ValueError:
            issues.append(_error(
                "type",
                "invalid_value",
                f"Unknown transaction type: {raw}",
                "Use 'income' or 'expense'",
            ))
            return None

    def _check_date(
        self,
        raw: Union[dt.date, str, None],
        issues: list[ValidationIssue],
    ) -> Optional[dt.date]:
        if isinstance(raw, dt.datetime):
            return raw.date()
        if isinstance(raw, dt.date):
            return raw

        if raw is None or not raw.strip():
            issues.append(_error("date", "missing", "Date is required"))
            return None

        try:
            return dt.date.fromisoformat(raw.strip())
        except ValueError:
            issues.append(_error(
                "date",
                "invalid_format",
                f"Date ({raw}) is not a valid YYYY-MM-DD date",
            ))
            return None

    def _check_time(
        self,
        raw: Optional[str],
        issues: list[ValidationIssue],
    ) -> str:
        if raw is None or not raw.strip():
            return DEFAULT_TIME

        time = raw.strip()
        if not _TIME_RE.match(time):
            issues.append(_error(
                "time",
                "invalid_format",
                f"Time ({raw}) must look like HH:MM",
            ))
        return time


def parse_decimal(raw: Any) -> Optional[Decimal]:
    """
    Parse a user-supplied number into a Decimal.

    Floats go through their shortest repr so 0.1 stays 0.1.
    Returns None when the value is not numeric.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        return raw
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        return Decimal(repr(raw))
    if isinstance(raw, str):
        try:
            return Decimal(raw.strip())
        except InvalidOperation:
            return None
    return None
