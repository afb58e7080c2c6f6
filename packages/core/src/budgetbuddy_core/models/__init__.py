"""Data models for budgetbuddy-core.

This package provides:
- Transaction records, date ranges and ingestion (financial.py)
- Derived summaries, trends, anomalies and health scores (analysis.py)
- Report and insight request models (report.py)
"""

from budgetbuddy_core.models.financial import (
    UNCATEGORIZED,
    DateRange,
    Pagination,
    Transaction,
    TransactionRecord,
    TransactionType,
    ingest_transactions,
    month_key,
    months_between,
    normalize_category,
    shift_month,
)
from budgetbuddy_core.models.analysis import (
    Anomaly,
    AnomalySeverity,
    CategoryBreakdown,
    CategoryInsight,
    FinancialHealthScore,
    MonthlyBucket,
    PeriodSummary,
    TrendAnalysis,
    TrendDirection,
    TrendImpact,
    TrendRecord,
    display_round,
)
from budgetbuddy_core.models.report import (
    InsightRequest,
    Report,
    ReportSummary,
    TopCategory,
)

__all__ = [
    # Transactions
    "UNCATEGORIZED",
    "DateRange",
    "Pagination",
    "Transaction",
    "TransactionRecord",
    "TransactionType",
    "ingest_transactions",
    "month_key",
    "months_between",
    "normalize_category",
    "shift_month",
    # Analysis
    "Anomaly",
    "AnomalySeverity",
    "CategoryBreakdown",
    "CategoryInsight",
    "FinancialHealthScore",
    "MonthlyBucket",
    "PeriodSummary",
    "TrendAnalysis",
    "TrendDirection",
    "TrendImpact",
    "TrendRecord",
    "display_round",
    # Reports
    "InsightRequest",
    "Report",
    "ReportSummary",
    "TopCategory",
]
