"""Monthly bucketing and category trend detection.

Compares the average monthly spend of each expense category over the most
recent three months against the three months before. Months without any
activity still produce a zero-valued bucket so gaps count as zero spend.
"""

import datetime as dt
from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

import structlog

from .exceptions import InputError
from .models import (
    CategoryInsight,
    DateRange,
    MonthlyBucket,
    Transaction,
    TrendAnalysis,
    TrendDirection,
    TrendImpact,
    TrendRecord,
    normalize_category,
)
from .models.analysis import HUNDRED, ZERO

logger = structlog.get_logger()

# Months in each comparison slice
RECENT_WINDOW = 3

# Absolute change (percent) thresholds
REPORTING_THRESHOLD = Decimal("5")
MODERATE_THRESHOLD = Decimal("10")
STRONG_THRESHOLD = Decimal("20")

# Buckets averaged for the next-month projection
PROJECTION_WINDOW = 6

# Latest month vs. monthly average bands for category insights
INSIGHT_UPPER_BAND = Decimal("1.1")
INSIGHT_LOWER_BAND = Decimal("0.9")
CATEGORY_INSIGHT_LIMIT = 3


def build_monthly_buckets(
    transactions: Iterable[Transaction],
    window: DateRange,
) -> list[MonthlyBucket]:
    """Bucket transactions by calendar month, one bucket per month in window."""
    keys = window.month_keys()
    income: dict[str, Decimal] = defaultdict(lambda: ZERO)
    expenses: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)
    categories: dict[str, dict[str, Decimal]] = defaultdict(lambda: defaultdict(lambda: ZERO))

    for txn in transactions:
        if not window.contains(txn.date):
            continue
        key = txn.month
        counts[key] += 1
        if txn.is_income:
            income[key] += txn.amount
        elif txn.is_expense:
            expenses[key] += txn.amount
            categories[key][normalize_category(txn.category)] += txn.amount

    return [
        MonthlyBucket(
            month=key,
            total_income=income[key],
            total_expenses=expenses[key],
            category_totals=dict(sorted(categories[key].items())),
            transaction_count=counts[key],
        )
        for key in keys
    ]


def _mean(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return ZERO
    return sum(values, ZERO) / len(values)


def classify_change(change: Decimal) -> tuple[TrendDirection, TrendImpact]:
    """Map a percentage change onto a direction and impact level."""
    magnitude = abs(change)
    if magnitude > STRONG_THRESHOLD:
        impact = TrendImpact.HIGH
    elif magnitude > MODERATE_THRESHOLD:
        impact = TrendImpact.MEDIUM
    else:
        return TrendDirection.STABLE, TrendImpact.LOW

    direction = TrendDirection.INCREASING if change > 0 else TrendDirection.DECREASING
    return direction, impact


def _category_trend(category: str, series: list[Decimal]) -> TrendRecord:
    recent = series[-RECENT_WINDOW:]
    previous = series[-2 * RECENT_WINDOW:-RECENT_WINDOW]

    recent_avg = _mean(recent)
    previous_avg = _mean(previous)

    if previous_avg > 0:
        change = (recent_avg - previous_avg) / previous_avg * HUNDRED
    else:
        change = ZERO

    direction, impact = classify_change(change)
    return TrendRecord(
        category=category,
        change_percentage=change,
        direction=direction,
        impact=impact,
        recent_average=recent_avg,
        previous_average=previous_avg,
    )


def analyze_trends(
    transactions: Sequence[Transaction],
    window_months: int,
    *,
    end: Optional[dt.date] = None,
    categories: Optional[Iterable[str]] = None,
) -> TrendAnalysis:
    """Compute monthly buckets and category trends over a rolling window.

    Args:
        transactions: Transactions to analyze. Those outside the window are
            ignored.
        window_months: Number of calendar months in the window.
        end: Last day of the window. Defaults to the latest transaction date,
            or today when there are no transactions.
        categories: Categories to always report, even when stable.

    Returns:
        TrendAnalysis with one bucket per month and trend records sorted by
        absolute change, largest first.

    Raises:
        InputError: If window_months is less than 1.
    """
    if window_months < 1:
        raise InputError(
            "window_months must be at least 1",
            field="window_months",
            value=window_months,
            constraint="window_months >= 1",
        )

    if end is None:
        end = max((txn.date for txn in transactions), default=dt.date.today())

    window = DateRange.rolling(window_months, end=end)
    buckets = build_monthly_buckets(transactions, window)

    requested = {normalize_category(c) for c in categories or ()}
    seen = {name for bucket in buckets for name in bucket.category_totals}

    records = []
    for category in sorted(seen | requested):
        series = [bucket.category_totals.get(category, ZERO) for bucket in buckets]
        record = _category_trend(category, series)
        if abs(record.change_percentage) > REPORTING_THRESHOLD or category in requested:
            records.append(record)

    records.sort(key=lambda r: (-abs(r.change_percentage), r.category))

    projection = _mean([b.total_expenses for b in buckets[-PROJECTION_WINDOW:]])

    logger.debug(
        "trends_analyzed",
        window=window.label,
        buckets=len(buckets),
        reported=len(records),
    )

    return TrendAnalysis(
        buckets=buckets,
        trends=records,
        projected_next_month_expenses=projection,
    )


def _insight_text(category: str, direction: TrendDirection, change: int) -> tuple[str, str]:
    name = category.lower()
    if direction == TrendDirection.INCREASING:
        return (
            f"{abs(change)}% increase from your average monthly {name} spending",
            f"Consider reviewing {name} expenses and look for optimization opportunities",
        )
    if direction == TrendDirection.DECREASING:
        return (
            f"{abs(change)}% decrease from your average monthly {name} spending",
            f"Great job controlling {name} expenses! Continue this trend",
        )
    return (
        f"Spending is consistent with your average monthly {name} budget",
        f"Maintain current spending patterns for {name}",
    )


def category_insights(
    buckets: Sequence[MonthlyBucket],
    categories: Iterable[str],
    *,
    limit: int = CATEGORY_INSIGHT_LIMIT,
) -> list[CategoryInsight]:
    """Compare the latest month's spend per category with its monthly average.

    Spend above 110% of the average is ``increasing``, below 90% is
    ``decreasing``, and anything in between (bounds included) is ``stable``.

    Args:
        buckets: Chronological monthly buckets. The last one is the latest month.
        categories: Categories to describe, most important first.
        limit: Maximum number of insights.

    Returns:
        One insight per category, in the given order.
    """
    if not buckets:
        return []

    latest = buckets[-1]
    insights = []
    for category in list(categories)[:limit]:
        name = normalize_category(category)
        current = latest.category_totals.get(name, ZERO)
        average = _mean([b.category_totals.get(name, ZERO) for b in buckets])

        if average > 0:
            change = int(
                ((current - average) / average * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            )
        else:
            change = 0

        if current > average * INSIGHT_UPPER_BAND:
            direction = TrendDirection.INCREASING
        elif current < average * INSIGHT_LOWER_BAND:
            direction = TrendDirection.DECREASING
        else:
            direction = TrendDirection.STABLE

        explanation, recommendation = _insight_text(name, direction, change)
        insights.append(
            CategoryInsight(
                category=name,
                current_spend=current,
                average_spend=average,
                change_percentage=change,
                direction=direction,
                explanation=explanation,
                recommendation=recommendation,
            )
        )
    return insights


__all__ = [
    "RECENT_WINDOW",
    "REPORTING_THRESHOLD",
    "MODERATE_THRESHOLD",
    "STRONG_THRESHOLD",
    "INSIGHT_UPPER_BAND",
    "INSIGHT_LOWER_BAND",
    "CATEGORY_INSIGHT_LIMIT",
    "analyze_trends",
    "build_monthly_buckets",
    "category_insights",
    "classify_change",
]
