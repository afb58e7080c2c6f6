"""Financial health scoring.

Combines three 0-100 component scores into an overall score:
- Savings: savings rate, scaled so a 20% rate scores full marks
- Emergency fund: months of expenses covered, six months scores full marks
- Budget: penalizes spending beyond income
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

import structlog

from .models import FinancialHealthScore, PeriodSummary
from .models.analysis import HUNDRED, ZERO

logger = structlog.get_logger()

SAVINGS_RATE_MULTIPLIER = Decimal("5")
EMERGENCY_MONTH_WEIGHT = Decimal("16.67")
OVERSPEND_PENALTY = Decimal("200")


def _clamp(value: Decimal) -> Decimal:
    return min(max(value, ZERO), HUNDRED)


def _to_score(value: Decimal) -> int:
    return int(_clamp(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_health_score(
    summary: PeriodSummary,
    months: int = 1,
    *,
    savings_balance: Optional[Decimal] = None,
) -> FinancialHealthScore:
    """Score a period's finances.

    Args:
        summary: Aggregated period totals.
        months: Calendar months the summary covers; totals are averaged
            over this to get monthly figures.
        savings_balance: Liquid savings available for emergencies.
            Defaults to the period's net balance, floored at zero.

    Returns:
        FinancialHealthScore with the component and overall scores.
    """
    months = max(months, 1)
    monthly_income = summary.total_income / months
    monthly_expenses = summary.total_expenses / months

    savings = _clamp(summary.savings_rate * SAVINGS_RATE_MULTIPLIER)

    if savings_balance is None:
        savings_balance = max(summary.net_balance, ZERO)
    if monthly_expenses > 0:
        emergency_months = max(Decimal(savings_balance), ZERO) / monthly_expenses
    else:
        emergency_months = ZERO
    emergency = _clamp(emergency_months * EMERGENCY_MONTH_WEIGHT)

    if monthly_expenses <= monthly_income:
        budget = HUNDRED
    elif monthly_income <= 0:
        budget = ZERO
    else:
        overspend = (monthly_expenses - monthly_income) / monthly_income
        budget = _clamp(HUNDRED - overspend * OVERSPEND_PENALTY)

    overall = (savings + emergency + budget) / 3

    score = FinancialHealthScore(
        overall=_to_score(overall),
        savings_score=_to_score(savings),
        emergency_fund_score=_to_score(emergency),
        budget_score=_to_score(budget),
        emergency_fund_months=emergency_months,
    )
    logger.debug("health_scored", overall=score.overall, rating=score.rating)
    return score


__all__ = ["calculate_health_score"]
