"""Tests for period aggregation."""

import random
from datetime import date
from decimal import Decimal

import pytest

from budgetbuddy_core.aggregator import summarize, summarize_by_month
from budgetbuddy_core.models import PeriodSummary, Transaction


def _txn(amount, type_="EXPENSE", category="Food", day=date(2025, 1, 10)):
    return Transaction(user_id="u1", amount=amount, type=type_, category=category, date=day)


@pytest.fixture
def mixed_transactions():
    return [
        _txn(100000, "INCOME", "Salary"),
        _txn(28000, category="Housing"),
        _txn(8500, category="Groceries"),
        _txn(4200, category="Food"),
        _txn(1800, category="Food"),
        _txn("333.33", category=""),
        _txn("0.01", category=None),
    ]


class TestSummarize:
    """Tests for summarize()."""

    def test_empty_input_is_zero_summary(self):
        summary = summarize([])

        assert summary.total_income == 0
        assert summary.total_expenses == 0
        assert summary.net_balance == 0
        assert summary.savings_rate == 0
        assert summary.category_breakdown == {}
        assert summary.transaction_count == 0

    def test_totals_partitioned_by_type(self, mixed_transactions):
        summary = summarize(mixed_transactions)

        assert summary.total_income == Decimal("100000")
        assert summary.total_expenses == Decimal("42833.34")
        assert summary.net_balance == Decimal("57166.66")
        assert summary.transaction_count == 7

    def test_breakdown_covers_expenses_only(self, mixed_transactions):
        summary = summarize(mixed_transactions)

        assert "Salary" not in summary.category_breakdown
        assert summary.category_breakdown["Food"].amount == Decimal("6000")

    def test_blank_categories_grouped_as_other(self, mixed_transactions):
        summary = summarize(mixed_transactions)

        assert summary.category_breakdown["Other"].amount == Decimal("333.34")

    def test_breakdown_sums_to_total_expenses_exactly(self, mixed_transactions):
        summary = summarize(mixed_transactions)

        total = sum((b.amount for b in summary.category_breakdown.values()), Decimal("0"))
        assert total == summary.total_expenses

        percent = sum(b.percentage for b in summary.category_breakdown.values())
        assert abs(percent - 100) < Decimal("0.0000001")

    def test_order_insensitive_and_idempotent(self, mixed_transactions):
        first = summarize(mixed_transactions)
        shuffled = list(mixed_transactions)
        random.Random(7).shuffle(shuffled)

        assert summarize(shuffled) == first
        assert summarize(mixed_transactions) == first

    def test_no_income_means_zero_savings_rate(self):
        summary = summarize([_txn(500)])

        assert summary.total_income == 0
        assert summary.savings_rate == 0
        assert summary.net_balance == Decimal("-500")

    def test_zero_expenses_means_zero_percentages(self):
        summary = summarize([_txn(0), _txn(100, "INCOME", "Salary")])

        assert summary.total_expenses == 0
        assert summary.category_breakdown["Food"].percentage == 0

    def test_savings_rate(self):
        summary = summarize([_txn(1000, "INCOME", "Salary"), _txn(700)])

        assert summary.savings_rate == Decimal("30")

    def test_top_categories_sorted_and_truncated(self, mixed_transactions):
        summary = summarize(mixed_transactions)
        top = summary.top_categories(3)

        assert [name for name, _ in top] == ["Housing", "Groceries", "Food"]

    def test_display_percentage_rounds_half_up(self):
        summary = summarize([_txn(1, category="A"), _txn(7, category="B")])

        assert summary.category_breakdown["A"].display_percentage == Decimal("12.5")
        assert summary.category_breakdown["B"].display_percentage == Decimal("87.5")


class TestSummarizeByMonth:
    def test_keys_in_month_order(self):
        txns = [
            _txn(10, day=date(2025, 3, 2)),
            _txn(20, day=date(2025, 1, 2)),
            _txn(30, day=date(2025, 3, 30)),
        ]
        monthly = summarize_by_month(txns)

        assert list(monthly) == ["2025-01", "2025-03"]
        assert monthly["2025-03"].total_expenses == Decimal("40")
        assert isinstance(monthly["2025-01"], PeriodSummary)

    def test_empty(self):
        assert summarize_by_month([]) == {}
