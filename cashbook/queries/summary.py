"""
Summary Engine

Totals over a set of transactions. Aggregation is DETERMINISTIC and
exact: amounts are Decimals, so no float noise creeps into totals.
"""

from collections.abc import Iterable
from decimal import Decimal
from typing import Optional

from cashbook.models.transaction import FilterKind, Summary, Transaction
from cashbook.queries.filters import filter_transactions
from cashbook.queries.windows import Instant


def summarize(transactions: Iterable[Transaction]) -> Summary:
    """Income, expense and balance for the given transactions."""
    total_income = Decimal("0")
    total_expense = Decimal("0")
    count = 0

    for transaction in transactions:
        count += 1
        if transaction.amount > 0:
            total_income += transaction.amount
        elif transaction.amount < 0:
            total_expense += abs(transaction.amount)

    return Summary(
        total_income=total_income,
        total_expense=total_expense,
        balance=total_income - total_expense,
        transaction_count=count,
    )


def summary_for(
    transactions: Iterable[Transaction],
    selector: FilterKind,
    reference: Optional[Instant] = None,
) -> Summary:
    """
    Totals shown alongside the view for `selector`.

    Time windows narrow the totals to the window. The type filters
    (income/expense) and `all` do not: they always summarize the whole
    ledger, whichever subset is on screen.
    """
    selector = FilterKind(selector)
    if selector.is_time_window:
        return summarize(filter_transactions(transactions, selector, reference))
    return summarize(transactions)
