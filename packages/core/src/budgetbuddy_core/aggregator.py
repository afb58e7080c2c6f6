"""Period aggregation of income and expense transactions.

Turns a raw transaction set into totals, savings rate and an expense
category breakdown. All functions are pure: the same input set yields the
same summary regardless of ordering.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable

import structlog

from .models import (
    CategoryBreakdown,
    PeriodSummary,
    Transaction,
    TransactionType,
    normalize_category,
)
from .models.analysis import HUNDRED, ZERO

logger = structlog.get_logger()


def _breakdown(
    category_totals: dict[str, Decimal],
    total_expenses: Decimal,
) -> dict[str, CategoryBreakdown]:
    result = {}
    for category, amount in category_totals.items():
        if total_expenses > 0:
            percentage = amount / total_expenses * HUNDRED
        else:
            percentage = ZERO
        result[category] = CategoryBreakdown(amount=amount, percentage=percentage)
    return result


def summarize(transactions: Iterable[Transaction]) -> PeriodSummary:
    """Compute totals and the expense category breakdown for a period.

    Args:
        transactions: Transactions already restricted to the period.

    Returns:
        PeriodSummary. Empty input yields a zero-valued summary.
    """
    total_income = ZERO
    total_expenses = ZERO
    count = 0
    category_totals: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for txn in transactions:
        count += 1
        if txn.type == TransactionType.INCOME:
            total_income += txn.amount
        elif txn.type == TransactionType.EXPENSE:
            total_expenses += txn.amount
            category_totals[normalize_category(txn.category)] += txn.amount

    return PeriodSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        transaction_count=count,
        category_breakdown=_breakdown(dict(sorted(category_totals.items())), total_expenses),
    )


def summarize_by_month(transactions: Iterable[Transaction]) -> dict[str, PeriodSummary]:
    """Summarize each calendar month separately, keyed ``YYYY-MM`` in order."""
    by_month: dict[str, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        by_month[txn.month].append(txn)

    summaries = {month: summarize(items) for month, items in sorted(by_month.items())}
    logger.debug("monthly_summaries_built", months=len(summaries))
    return summaries


__all__ = ["summarize", "summarize_by_month"]
