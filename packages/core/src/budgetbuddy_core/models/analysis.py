"""Derived analysis models produced by the aggregation engine.

These models are computed fresh for every request and never persisted:
- Period summaries with category breakdowns
- Monthly buckets and category trend records
- Overspend anomalies
- Financial health scores
"""

from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from budgetbuddy_core.models.financial import Transaction

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def display_round(value: Decimal, places: int = 2) -> Decimal:
    """Round half-up for display. Internal values keep full precision."""
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


class CategoryBreakdown(BaseModel):
    """Spending in one expense category."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(default=ZERO, ge=ZERO)
    percentage: Decimal = Field(
        default=ZERO,
        description="Share of total expenses (0-100), full precision",
    )

    @property
    def display_percentage(self) -> Decimal:
        return display_round(self.percentage, 1)


class PeriodSummary(BaseModel):
    """Income/expense totals and category breakdown for a period."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "examples": [
                {
                    "total_income": "100000",
                    "total_expenses": "70000",
                    "transaction_count": 31,
                    "category_breakdown": {
                        "Housing": {"amount": "28000", "percentage": "40"},
                    },
                }
            ]
        },
    )

    total_income: Decimal = Field(default=ZERO, ge=ZERO)
    total_expenses: Decimal = Field(default=ZERO, ge=ZERO)
    transaction_count: int = Field(default=0, ge=0)
    category_breakdown: dict[str, CategoryBreakdown] = Field(default_factory=dict)

    @computed_field
    @property
    def net_balance(self) -> Decimal:
        """Income minus expenses."""
        return self.total_income - self.total_expenses

    @computed_field
    @property
    def savings_rate(self) -> Decimal:
        """Net balance as a percentage of income; 0 when there is no income."""
        if self.total_income <= 0:
            return ZERO
        return self.net_balance / self.total_income * HUNDRED

    def top_categories(self, n: int = 5) -> list[tuple[str, CategoryBreakdown]]:
        """Get the top N expense categories by amount, largest first."""
        ranked = sorted(
            self.category_breakdown.items(),
            key=lambda item: (-item[1].amount, item[0]),
        )
        return ranked[:n]


class MonthlyBucket(BaseModel):
    """One calendar month of activity inside an analysis window."""

    model_config = ConfigDict(frozen=True)

    month: str = Field(pattern=r"^\d{4}-\d{2}$", description="YYYY-MM")
    total_income: Decimal = Field(default=ZERO, ge=ZERO)
    total_expenses: Decimal = Field(default=ZERO, ge=ZERO)
    category_totals: dict[str, Decimal] = Field(
        default_factory=dict,
        description="Expense totals per category",
    )
    transaction_count: int = Field(default=0, ge=0)

    @property
    def is_empty(self) -> bool:
        return self.transaction_count == 0


class TrendDirection(str, Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class TrendImpact(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TrendRecord(BaseModel):
    """Change in a category's average monthly spend between two windows."""

    model_config = ConfigDict(frozen=True)

    category: str
    change_percentage: Decimal
    direction: TrendDirection
    impact: TrendImpact
    recent_average: Decimal = ZERO
    previous_average: Decimal = ZERO


class TrendAnalysis(BaseModel):
    """Monthly buckets and category trends for a multi-month window."""

    buckets: list[MonthlyBucket] = Field(default_factory=list)
    trends: list[TrendRecord] = Field(default_factory=list)
    projected_next_month_expenses: Decimal = Field(
        default=ZERO,
        description="Mean monthly expenses over the most recent buckets",
    )

    def trend_for(self, category: str) -> Optional[TrendRecord]:
        for record in self.trends:
            if record.category == category:
                return record
        return None


class CategoryInsight(BaseModel):
    """Latest month's spend in a category compared with its monthly average."""

    model_config = ConfigDict(frozen=True)

    category: str
    current_spend: Decimal
    average_spend: Decimal = Field(description="Mean monthly spend across the window")
    change_percentage: int = Field(description="Whole-percent change from the average")
    direction: TrendDirection
    explanation: str = ""
    recommendation: str = ""


class AnomalySeverity(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Anomaly(BaseModel):
    """An expense well above its category's average."""

    model_config = ConfigDict(frozen=True)

    transaction: Transaction
    expected_amount: Decimal = Field(description="Category mean, rounded to a whole amount")
    variance: Decimal = Field(description="Relative deviation from the category mean")
    severity: AnomalySeverity
    description: str = ""

    @property
    def category(self) -> str:
        return self.transaction.category

    @property
    def amount(self) -> Decimal:
        return self.transaction.amount


class FinancialHealthScore(BaseModel):
    """Composite 0-100 score of savings, emergency cushion and budget discipline."""

    model_config = ConfigDict(frozen=True)

    overall: int = Field(ge=0, le=100)
    savings_score: int = Field(ge=0, le=100)
    emergency_fund_score: int = Field(ge=0, le=100)
    budget_score: int = Field(ge=0, le=100)
    emergency_fund_months: Decimal = Field(default=ZERO, ge=ZERO)

    @computed_field
    @property
    def rating(self) -> str:
        if self.overall >= 80:
            return "Excellent"
        if self.overall >= 60:
            return "Good"
        return "Needs Improvement"
