"""Report models handed to the presentation layer and the insight collaborator."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, Field

from budgetbuddy_core.models.analysis import (
    Anomaly,
    CategoryInsight,
    FinancialHealthScore,
    PeriodSummary,
    TrendAnalysis,
    display_round,
)


def _utc_now() -> datetime:
    """Return current UTC datetime with timezone info."""
    return datetime.now(timezone.utc)


class TopCategory(BaseModel):
    """A top expense category with its share of total expenses."""

    name: str
    amount: Decimal
    percent: Decimal = Field(description="Share of total expenses, not of income")


class ReportSummary(BaseModel):
    """Headline numbers of a report."""

    income: Decimal
    expenses: Decimal
    balance: Decimal
    savings_rate: Decimal
    top_categories: list[TopCategory] = Field(default_factory=list)


class InsightRequest(BaseModel):
    """Aggregated, JSON-serializable input for the insight collaborator.

    Built only from period totals and the category breakdown. Raw
    transactions never leave the engine.
    """

    period_label: str
    total_income: float
    total_expenses: float
    available_balance: float
    savings_rate: float
    categories: dict[str, dict[str, float]] = Field(
        default_factory=dict,
        description="category -> {amount, percentage}",
    )

    @classmethod
    def from_summary(
        cls,
        summary: PeriodSummary,
        period_label: str,
        top_n: Optional[int] = None,
    ) -> "InsightRequest":
        ranked = summary.top_categories(top_n or len(summary.category_breakdown))
        return cls(
            period_label=period_label,
            total_income=float(display_round(summary.total_income)),
            total_expenses=float(display_round(summary.total_expenses)),
            available_balance=float(display_round(summary.net_balance)),
            savings_rate=float(display_round(summary.savings_rate, 1)),
            categories={
                name: {
                    "amount": float(display_round(item.amount)),
                    "percentage": float(item.display_percentage),
                }
                for name, item in ranked
            },
        )


class Report(BaseModel):
    """A complete financial report for one user and period.

    ``period``, ``summary`` and ``insights`` make up the presentation
    payload. The remaining fields carry the detailed analysis.
    """

    user_id: str
    period: str
    summary: ReportSummary
    insights: list[str] = Field(default_factory=list)

    period_summary: PeriodSummary
    monthly_summaries: dict[str, PeriodSummary] = Field(
        default_factory=dict,
        description="Per-month summaries keyed YYYY-MM, for multi-month periods",
    )
    trends: Optional[TrendAnalysis] = None
    category_insights: list[CategoryInsight] = Field(
        default_factory=list,
        description="Latest month vs. monthly average for the top categories",
    )
    anomalies: list[Anomaly] = Field(default_factory=list)
    health: Optional[FinancialHealthScore] = None
    generated_at: datetime = Field(default_factory=_utc_now)

    @property
    def has_insights(self) -> bool:
        return len(self.insights) > 0

    def to_payload(self) -> dict[str, Any]:
        """Presentation shape consumed by the web layer."""
        summary = self.summary
        return {
            "period": self.period,
            "summary": {
                "income": float(summary.income),
                "expenses": float(summary.expenses),
                "balance": float(summary.balance),
                "savingsRate": float(summary.savings_rate),
                "topCategories": [
                    {
                        "name": item.name,
                        "amount": float(item.amount),
                        "percent": float(item.percent),
                    }
                    for item in summary.top_categories
                ],
            },
            "insights": list(self.insights),
        }
