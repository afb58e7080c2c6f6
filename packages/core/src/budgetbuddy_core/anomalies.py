"""Overspend detection against per-category averages.

An expense is flagged when it exceeds its category's mean by more than
150%. Only overspending is reported; unusually small expenses are not.
"""

from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

import structlog

from .models import Anomaly, AnomalySeverity, Transaction, normalize_category
from .models.analysis import HUNDRED, ZERO

logger = structlog.get_logger()

FLAG_THRESHOLD = Decimal("1.5")
MEDIUM_THRESHOLD = Decimal("2")
HIGH_THRESHOLD = Decimal("3")


def _category_means(expenses: Sequence[Transaction]) -> dict[str, Decimal]:
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[str, int] = defaultdict(int)
    for txn in expenses:
        category = normalize_category(txn.category)
        totals[category] += txn.amount
        counts[category] += 1
    return {category: totals[category] / counts[category] for category in totals}


def _describe(category: str, severity: AnomalySeverity, variance: Decimal) -> str:
    label = category.lower()
    if severity == AnomalySeverity.HIGH:
        percent = (variance * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return f"Exceptionally high {label} expense - {percent}% above normal"
    if severity == AnomalySeverity.MEDIUM:
        return f"Unusually high {label} expense - review if necessary"
    return f"Slightly elevated {label} expense"


def classify_variance(variance: Decimal) -> AnomalySeverity:
    if variance > HIGH_THRESHOLD:
        return AnomalySeverity.HIGH
    if variance > MEDIUM_THRESHOLD:
        return AnomalySeverity.MEDIUM
    return AnomalySeverity.LOW


def detect_anomalies(transactions: Iterable[Transaction]) -> list[Anomaly]:
    """Flag expenses far above their category mean.

    The mean is taken per category over the supplied set only. Categories
    whose mean is zero are skipped.

    Args:
        transactions: Transactions to scan. Income is ignored.

    Returns:
        Every flagged expense, in input order.
    """
    expenses = [txn for txn in transactions if txn.is_expense]
    means = _category_means(expenses)

    anomalies = []
    for txn in expenses:
        category = normalize_category(txn.category)
        mean = means[category]
        if mean <= 0:
            continue

        variance = abs(txn.amount - mean) / mean
        if variance > FLAG_THRESHOLD and txn.amount > mean:
            severity = classify_variance(variance)
            anomalies.append(
                Anomaly(
                    transaction=txn,
                    expected_amount=mean.quantize(Decimal("1"), rounding=ROUND_HALF_UP),
                    variance=variance,
                    severity=severity,
                    description=_describe(category, severity, variance),
                )
            )

    if anomalies:
        logger.info("anomalies_detected", count=len(anomalies), scanned=len(expenses))

    return anomalies


def top_anomalies(anomalies: Iterable[Anomaly], n: int = 3) -> list[Anomaly]:
    """The ``n`` anomalies with the largest variance, largest first."""
    return sorted(anomalies, key=lambda a: a.variance, reverse=True)[:n]


__all__ = [
    "FLAG_THRESHOLD",
    "MEDIUM_THRESHOLD",
    "HIGH_THRESHOLD",
    "classify_variance",
    "detect_anomalies",
    "top_anomalies",
]
