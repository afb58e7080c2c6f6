"""Tests for financial health scoring."""

from decimal import Decimal

import pytest

from budgetbuddy_core.health import calculate_health_score
from budgetbuddy_core.models import FinancialHealthScore, PeriodSummary


def _summary(income, expenses):
    return PeriodSummary(total_income=Decimal(income), total_expenses=Decimal(expenses))


class TestCalculateHealthScore:
    """Tests for calculate_health_score()."""

    def test_typical_month(self):
        score = calculate_health_score(_summary(100000, 70000))

        assert score.savings_score == 100
        assert score.emergency_fund_score == 7
        assert score.budget_score == 100
        assert score.overall == 69
        assert score.rating == "Good"

    def test_explicit_savings_balance(self):
        score = calculate_health_score(
            _summary(100000, 70000),
            savings_balance=Decimal("420000"),
        )

        assert score.emergency_fund_months == Decimal("6")
        assert score.emergency_fund_score == 100
        assert score.overall == 100
        assert score.rating == "Excellent"

    def test_multi_month_period_uses_monthly_figures(self):
        score = calculate_health_score(_summary(1200000, 840000), months=12)

        # 360000 saved covers 5.14 months of 70000 spending
        assert score.emergency_fund_score == 86

    def test_overspending_penalized(self):
        score = calculate_health_score(_summary(1000, 1250))

        assert score.budget_score == 50
        assert score.savings_score == 0
        assert score.emergency_fund_score == 0
        assert score.overall == 17
        assert score.rating == "Needs Improvement"

    def test_heavy_overspending_floors_at_zero(self):
        score = calculate_health_score(_summary(1000, 5000))

        assert score.budget_score == 0

    def test_expenses_without_income(self):
        score = calculate_health_score(_summary(0, 500))

        assert score.budget_score == 0
        assert score.savings_score == 0
        assert score.overall == 0

    def test_empty_period(self):
        score = calculate_health_score(_summary(0, 0))

        assert score.savings_score == 0
        assert score.emergency_fund_score == 0
        assert score.budget_score == 100
        assert score.overall == 33

    def test_low_savings_rate_scaled(self):
        # 10% savings rate -> 50
        score = calculate_health_score(_summary(1000, 900))

        assert score.savings_score == 50


class TestFinancialHealthScore:
    @pytest.mark.parametrize(
        "overall,rating",
        [(100, "Excellent"), (80, "Excellent"), (79, "Good"), (60, "Good"), (59, "Needs Improvement")],
    )
    def test_rating_bands(self, overall, rating):
        score = FinancialHealthScore(
            overall=overall,
            savings_score=0,
            emergency_fund_score=0,
            budget_score=0,
        )
        assert score.rating == rating

    def test_scores_bounded(self):
        with pytest.raises(ValueError):
            FinancialHealthScore(overall=101, savings_score=0, emergency_fund_score=0, budget_score=0)
