"""Tests for the synthetic history generator."""

from collections import Counter
from datetime import date
from decimal import Decimal

import pytest

from budgetbuddy_core.exceptions import InputError
from budgetbuddy_core.models import DateRange, TransactionType
from budgetbuddy_core.seed import RECURRING_EXPENSES, generate_synthetic_history

END = date(2025, 6, 20)


@pytest.fixture
def year_of_history():
    return generate_synthetic_history("u1", 12, end=END, seed=42)


class TestGenerateSyntheticHistory:
    """Tests for generate_synthetic_history()."""

    def test_one_salary_per_month(self, year_of_history):
        salaries = [t for t in year_of_history if t.title == "Software Engineer Salary"]

        assert len(salaries) == 12
        assert all(t.type == TransactionType.INCOME for t in salaries)
        assert all(t.amount == Decimal("100000") for t in salaries)
        assert all(t.date.day == 1 for t in salaries)
        assert len({t.month for t in salaries}) == 12

    def test_recurring_expenses_every_full_month(self, year_of_history):
        titles = {item.title for item in RECURRING_EXPENSES}
        per_month = Counter(t.month for t in year_of_history if t.title in titles)

        assert len(per_month) == 12
        assert all(per_month[m] == len(RECURRING_EXPENSES) for m in per_month if m != "2025-06")
        assert 0 < per_month["2025-06"] < len(RECURRING_EXPENSES)

    def test_recurring_amounts_within_jitter(self, year_of_history):
        base = {item.title: item.amount for item in RECURRING_EXPENSES}
        for txn in year_of_history:
            if txn.title in base:
                expected = Decimal(base[txn.title])
                assert expected * Decimal("0.89") <= txn.amount <= expected * Decimal("1.11")

    def test_all_dates_inside_window(self, year_of_history):
        window = DateRange.rolling(12, end=END)

        assert all(window.contains(t.date) for t in year_of_history)
        assert max(t.date for t in year_of_history) <= END

    @pytest.mark.parametrize("end", [date(2025, 6, 1), date(2025, 6, 10), date(2025, 2, 28)])
    def test_nothing_after_end(self, end):
        history = generate_synthetic_history("u1", 12, end=end, seed=42)

        assert all(DateRange.rolling(12, end=end).contains(t.date) for t in history)

    def test_cut_off_keeps_earlier_months_identical(self):
        early = generate_synthetic_history("u1", 12, end=date(2025, 6, 10), seed=42)
        full = generate_synthetic_history("u1", 12, end=date(2025, 6, 30), seed=42)

        assert [t.id for t in early if t.month != "2025-06"] == [
            t.id for t in full if t.month != "2025-06"
        ]

    def test_two_or_three_one_offs_per_month(self, year_of_history):
        one_offs = Counter(
            t.month
            for t in year_of_history
            if t.description.startswith("Random ") and t.month != "2025-06"
        )

        assert len(one_offs) == 11
        assert all(2 <= n <= 3 for n in one_offs.values())

    def test_quarterly_bonus(self, year_of_history):
        bonuses = [t for t in year_of_history if t.category == "Bonus"]

        assert len(bonuses) == 4
        assert all(t.amount == Decimal("25000") and t.date.day == 15 for t in bonuses)
        assert "2025-06" in {t.month for t in bonuses}

    def test_festival_spikes(self, year_of_history):
        festivals = {t.month: t.amount for t in year_of_history if t.category == "Festival"}

        assert festivals == {"2024-10": Decimal("15000"), "2025-03": Decimal("8000")}

    def test_no_festival_outside_window(self):
        history = generate_synthetic_history("u1", 2, end=date(2025, 6, 1), seed=1)

        assert not any(t.category == "Festival" for t in history)

    def test_seed_is_reproducible(self):
        first = generate_synthetic_history("u1", 3, end=END, seed=7)
        second = generate_synthetic_history("u1", 3, end=END, seed=7)

        assert [(t.id, t.amount, t.date) for t in first] == [(t.id, t.amount, t.date) for t in second]

    def test_owned_by_user(self, year_of_history):
        assert {t.user_id for t in year_of_history} == {"u1"}

    def test_invalid_months(self):
        with pytest.raises(InputError):
            generate_synthetic_history("u1", 0)
