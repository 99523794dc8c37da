"""Shared fixtures: in-memory backend, fixed clock, predictable ids."""

import datetime as dt
import itertools

import pytest

from cashbook.audit import AuditLogger
from cashbook.services.ledger import TransactionStore
from cashbook.services.storage import InMemoryKeyValueStore
from cashbook.validation import TransactionValidator


# Friday
TODAY = dt.date(2024, 3, 15)
NOW = dt.datetime(2024, 3, 15, 10, 30)


class SequentialIds:
    """Id factory yielding "1", "2", ... so tests can predict ids."""

    def __init__(self):
        self._counter = itertools.count(1)

    def __call__(self, existing):
        candidate = str(next(self._counter))
        while candidate in existing:
            candidate = str(next(self._counter))
        return candidate


@pytest.fixture
def backend():
    return InMemoryKeyValueStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def validator():
    return TransactionValidator(today=lambda: TODAY)


@pytest.fixture
def make_store(backend, validator, audit_logger):
    """Build a store over the shared backend (call again to simulate a reload)."""
    def _make(**overrides):
        options = {
            "validator": validator,
            "id_factory": SequentialIds(),
            "audit_logger": audit_logger,
        }
        options.update(overrides)
        return TransactionStore(backend, **options)
    return _make


@pytest.fixture
def store(make_store):
    return make_store()


def draft(description="Coffee", amount="50", type="expense", date="2024-03-10", time="08:30"):
    """Form fields as a plain dict."""
    return {
        "description": description,
        "amount": amount,
        "type": type,
        "date": date,
        "time": time,
    }
