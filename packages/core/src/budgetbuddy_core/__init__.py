"""BudgetBuddy Core - period-based financial aggregation engine."""

from budgetbuddy_core.aggregator import summarize, summarize_by_month
from budgetbuddy_core.anomalies import detect_anomalies, top_anomalies
from budgetbuddy_core.exceptions import (
    BudgetBuddyError,
    ConfigurationError,
    InputError,
    InsightUnavailableError,
    UpstreamUnavailableError,
)
from budgetbuddy_core.health import calculate_health_score
from budgetbuddy_core.interfaces import InsightGenerator, TransactionStore
from budgetbuddy_core.models import (
    Anomaly,
    AnomalySeverity,
    CategoryBreakdown,
    CategoryInsight,
    DateRange,
    FinancialHealthScore,
    InsightRequest,
    MonthlyBucket,
    Pagination,
    PeriodSummary,
    Report,
    ReportSummary,
    TopCategory,
    Transaction,
    TransactionType,
    TrendAnalysis,
    TrendDirection,
    TrendImpact,
    TrendRecord,
    ingest_transactions,
    normalize_category,
)
from budgetbuddy_core.report_generator import ReportAssembler, ReportFormatter
from budgetbuddy_core.seed import RECURRING_EXPENSES, generate_synthetic_history
from budgetbuddy_core.store import InMemoryTransactionStore
from budgetbuddy_core.trends import analyze_trends, category_insights

__version__ = "0.1.0"

__all__ = [
    # Engine
    "summarize",
    "summarize_by_month",
    "analyze_trends",
    "category_insights",
    "detect_anomalies",
    "top_anomalies",
    "calculate_health_score",
    "generate_synthetic_history",
    "RECURRING_EXPENSES",
    # Reports
    "ReportAssembler",
    "ReportFormatter",
    # Collaborators
    "TransactionStore",
    "InsightGenerator",
    "InMemoryTransactionStore",
    # Models
    "Anomaly",
    "AnomalySeverity",
    "CategoryBreakdown",
    "CategoryInsight",
    "DateRange",
    "FinancialHealthScore",
    "InsightRequest",
    "MonthlyBucket",
    "Pagination",
    "PeriodSummary",
    "Report",
    "ReportSummary",
    "TopCategory",
    "Transaction",
    "TransactionType",
    "TrendAnalysis",
    "TrendDirection",
    "TrendImpact",
    "TrendRecord",
    "ingest_transactions",
    "normalize_category",
    # Exceptions
    "BudgetBuddyError",
    "ConfigurationError",
    "InputError",
    "InsightUnavailableError",
    "UpstreamUnavailableError",
]
