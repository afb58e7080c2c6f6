"""Report assembly and rendering.

``ReportAssembler`` fetches a user's transactions for a period, runs the
aggregation, trend, anomaly and health analyses, and optionally asks an
insight generator for narrative tips. ``ReportFormatter`` renders the
finished report as text, Markdown or HTML.
"""

import asyncio
import datetime as dt
import html
import time
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Sequence

import structlog

from .aggregator import summarize, summarize_by_month
from .anomalies import detect_anomalies, top_anomalies
from .exceptions import InputError
from .health import calculate_health_score
from .interfaces import InsightGenerator, TransactionStore
from .models import (
    DateRange,
    InsightRequest,
    PeriodSummary,
    Report,
    ReportSummary,
    TopCategory,
    Transaction,
    display_round,
)
from .trends import CATEGORY_INSIGHT_LIMIT, analyze_trends, category_insights

logger = structlog.get_logger()

DEFAULT_TOP_CATEGORIES = 5


class ReportAssembler:
    """
    Build financial reports for a user and period.

    The store is required; a store failure fails the whole report. The
    insight generator is optional and never trusted: any failure or
    malformed reply leaves the report with an empty insight list.
    """

    def __init__(
        self,
        store: TransactionStore,
        insight_generator: Optional[InsightGenerator] = None,
        *,
        top_categories_limit: int = DEFAULT_TOP_CATEGORIES,
    ):
        """
        Initialize the assembler.

        Args:
            store: Source of transactions.
            insight_generator: Optional generative-AI collaborator.
            top_categories_limit: Number of categories in the report summary.
        """
        if top_categories_limit < 1:
            raise InputError(
                "top_categories_limit must be at least 1",
                field="top_categories_limit",
                value=top_categories_limit,
                constraint="top_categories_limit >= 1",
            )
        self.store = store
        self.insight_generator = insight_generator
        self.top_categories_limit = top_categories_limit

    async def build_report(
        self,
        user_id: str,
        from_date: dt.date,
        to_date: dt.date,
    ) -> Report:
        """
        Build a report for an inclusive date range.

        Args:
            user_id: Owner of the transactions.
            from_date: First day of the period.
            to_date: Last day of the period.

        Returns:
            The assembled Report.

        Raises:
            InputError: If from_date is after to_date.
            Exception: Whatever the store raises is propagated unchanged.
        """
        if from_date > to_date:
            raise InputError(
                "from_date must be on or before to_date",
                field="from_date",
                value=from_date.isoformat(),
                constraint="from_date <= to_date",
            )

        started = time.monotonic()
        period = DateRange(start=from_date, end=to_date)

        try:
            transactions = await self.store.fetch_transactions(user_id, period)
        except Exception as e:
            logger.error(
                "transaction_fetch_failed",
                user_id=user_id,
                period=period.label,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        report = self._analyze(user_id, period, transactions)
        insights = await self._generate_insights(report.period_summary, period.label)
        report = report.model_copy(update={"insights": insights})

        logger.info(
            "report_built",
            user_id=user_id,
            period=period.label,
            transactions=len(transactions),
            anomalies=len(report.anomalies),
            insights=len(insights),
            duration_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return report

    async def build_rolling_report(
        self,
        user_id: str,
        months: int,
        *,
        end: Optional[dt.date] = None,
    ) -> Report:
        """Build a report for the last ``months`` calendar months up to ``end``."""
        try:
            window = DateRange.rolling(months, end=end)
        except ValueError as e:
            raise InputError(
                str(e),
                field="months",
                value=months,
                constraint="months >= 1",
            ) from e
        return await self.build_report(user_id, window.start, window.end)

    def _analyze(
        self,
        user_id: str,
        period: DateRange,
        transactions: Sequence[Transaction],
    ) -> Report:
        """Run the synchronous analyses and assemble the numeric report."""
        span = period.month_span
        summary = summarize(transactions)

        trends = None
        monthly = {}
        spend_insights = []
        if span >= 2:
            trends = analyze_trends(transactions, span, end=period.end)
            monthly = summarize_by_month(transactions)
            spend_insights = category_insights(
                trends.buckets,
                [name for name, _ in summary.top_categories(CATEGORY_INSIGHT_LIMIT)],
            )

        return Report(
            user_id=user_id,
            period=period.label,
            summary=self._headline(summary),
            period_summary=summary,
            monthly_summaries=monthly,
            trends=trends,
            category_insights=spend_insights,
            anomalies=detect_anomalies(transactions),
            health=calculate_health_score(summary, months=span),
        )

    def _headline(self, summary: PeriodSummary) -> ReportSummary:
        return ReportSummary(
            income=display_round(summary.total_income),
            expenses=display_round(summary.total_expenses),
            balance=display_round(summary.net_balance),
            savings_rate=display_round(summary.savings_rate, 1),
            top_categories=[
                TopCategory(
                    name=name,
                    amount=display_round(item.amount),
                    percent=item.display_percentage,
                )
                for name, item in summary.top_categories(self.top_categories_limit)
            ],
        )

    async def _generate_insights(self, summary: PeriodSummary, period_label: str) -> list[str]:
        """Ask the insight generator for tips; any failure yields an empty list."""
        if self.insight_generator is None:
            return []

        request = InsightRequest.from_summary(summary, period_label)
        try:
            result = await self.insight_generator.generate_insights(request)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(
                "insight_generation_failed",
                period=period_label,
                error=str(e),
                error_type=type(e).__name__,
            )
            return []

        if not _is_insight_list(result):
            logger.warning(
                "insight_generation_failed",
                period=period_label,
                error="invalid insight response",
                response_type=type(result).__name__,
            )
            return []

        return list(result)


def _is_insight_list(value: Any) -> bool:
    return (
        isinstance(value, list)
        and len(value) > 0
        and all(isinstance(item, str) for item in value)
    )


# =============================================================================
# RENDERING
# =============================================================================


@dataclass
class ReportSection:
    """A section of the rendered report."""
    title: str
    content: str


class ReportFormatter:
    """
    Render a Report as plain text, Markdown or HTML.

    Sections:
    - Header with the period
    - Overview totals and savings rate
    - Top expense categories
    - Month-by-month totals (multi-month periods)
    - Category trends
    - Latest month vs. average per top category
    - Unusual expenses
    - Financial health
    - Insights
    """

    def __init__(self, currency_symbol: str = "₹", anomaly_limit: int = 3):
        self.currency_symbol = currency_symbol
        self.anomaly_limit = anomaly_limit
        self._sections: list[ReportSection] = []

    def render(self, report: Report, format: str = "text") -> str:
        """
        Render a report.

        Args:
            report: The report to render.
            format: Output format ("text", "markdown", "html").

        Returns:
            The formatted report.
        """
        self._sections = []

        self._add_header(report)
        self._add_overview(report)
        self._add_top_categories(report)
        if report.monthly_summaries:
            self._add_monthly(report)
        if report.trends is not None:
            self._add_trends(report)
        if report.category_insights:
            self._add_category_insights(report)
        self._add_anomalies(report)
        if report.health is not None:
            self._add_health(report)
        self._add_insights(report)

        if format == "markdown":
            return self._format_markdown()
        elif format == "html":
            return self._format_html()
        return self._format_text()

    def _money(self, value: Decimal) -> str:
        sign = "-" if value < 0 else ""
        return f"{sign}{self.currency_symbol}{abs(value):,.2f}"

    def _add_header(self, report: Report) -> None:
        content = f"""
FINANCIAL REPORT
================

Period: {report.period}
Generated: {report.generated_at.strftime('%B %d, %Y')}
""".strip()
        self._sections.append(ReportSection(title="Header", content=content))

    def _add_overview(self, report: Report) -> None:
        summary = report.summary
        content = f"""
Total Income:       {self._money(summary.income)}
Total Expenses:     {self._money(summary.expenses)}
Available Balance:  {self._money(summary.balance)}
Savings Rate:       {summary.savings_rate:.1f}%
Transactions:       {report.period_summary.transaction_count}
""".strip()
        self._sections.append(ReportSection(title="Overview", content=content))

    def _add_top_categories(self, report: Report) -> None:
        if not report.summary.top_categories:
            content = "No expenses recorded in this period."
        else:
            content = "\n".join(
                f"  {item.name:<25} {self._money(item.amount):>14} ({item.percent:.1f}%)"
                for item in report.summary.top_categories
            )
        self._sections.append(ReportSection(title="Top Expense Categories", content=content))

    def _add_monthly(self, report: Report) -> None:
        lines = [f"  {'Month':<10} {'Income':>14} {'Expenses':>14} {'Net':>14}"]
        for month, summary in report.monthly_summaries.items():
            lines.append(
                f"  {month:<10} {self._money(summary.total_income):>14} "
                f"{self._money(summary.total_expenses):>14} "
                f"{self._money(summary.net_balance):>14}"
            )
        self._sections.append(ReportSection(title="Monthly Breakdown", content="\n".join(lines)))

    def _add_trends(self, report: Report) -> None:
        trends = report.trends
        lines = []
        for record in trends.trends:
            change = display_round(record.change_percentage, 1)
            lines.append(
                f"  {record.category:<25} {change:+.1f}% "
                f"({record.direction.value}, {record.impact.value} impact)"
            )
        if not lines:
            lines.append("  Spending is stable across categories.")

        lines.append("")
        lines.append(
            f"Projected next month expenses: {self._money(display_round(trends.projected_next_month_expenses))}"
        )
        self._sections.append(ReportSection(title="Spending Trends", content="\n".join(lines)))

    def _add_category_insights(self, report: Report) -> None:
        lines = []
        for insight in report.category_insights:
            lines.append(
                f"  {insight.category:<25} {self._money(insight.current_spend):>14} "
                f"vs avg {self._money(display_round(insight.average_spend)):>14} ({insight.direction.value})"
            )
            lines.append(f"    {insight.explanation}. {insight.recommendation}.")
        self._sections.append(ReportSection(title="Category Insights", content="\n".join(lines)))

    def _add_anomalies(self, report: Report) -> None:
        flagged = top_anomalies(report.anomalies, self.anomaly_limit)
        if not flagged:
            content = "No unusual expenses detected."
        else:
            lines = []
            for anomaly in flagged:
                txn = anomaly.transaction
                lines.append(
                    f"  {txn.date.isoformat()}  {anomaly.category:<20} "
                    f"{self._money(anomaly.amount)} (expected ~{self._money(anomaly.expected_amount)})"
                )
                lines.append(f"    [{anomaly.severity.value}] {anomaly.description}")
            content = "\n".join(lines)
        self._sections.append(ReportSection(title="Unusual Expenses", content=content))

    def _add_health(self, report: Report) -> None:
        health = report.health
        content = f"""
Overall Score:         {health.overall}/100 ({health.rating})
Savings:               {health.savings_score}/100
Emergency Fund:        {health.emergency_fund_score}/100 ({display_round(health.emergency_fund_months, 1)} months)
Budget Discipline:     {health.budget_score}/100
""".strip()
        self._sections.append(ReportSection(title="Financial Health", content=content))

    def _add_insights(self, report: Report) -> None:
        if report.insights:
            content = "\n".join(f"  • {insight}" for insight in report.insights)
        else:
            content = "No insights available for this period."
        self._sections.append(ReportSection(title="Insights", content=content))

    def _format_text(self) -> str:
        """Format as plain text."""
        output = []
        for section in self._sections:
            if section.title != "Header":
                output.append("")
                output.append("=" * 60)
                output.append(section.title.upper())
                output.append("=" * 60)
            output.append(section.content)
        output.append("")
        return "\n".join(output)

    def _format_markdown(self) -> str:
        """Format as Markdown."""
        output = []
        for section in self._sections:
            if section.title != "Header":
                output.append(f"\n## {section.title}\n")
            output.append("```")
            output.append(section.content)
            output.append("```")
        return "\n".join(output)

    def _format_html(self) -> str:
        """Format as HTML. Section content is escaped."""
        lines = [
            "<!DOCTYPE html>",
            "<html><head><meta charset=\"utf-8\"><title>Financial Report</title>",
            "<style>body{font-family:monospace;margin:40px;}pre{background:#f5f5f5;padding:15px;}</style>",
            "</head><body>",
        ]
        for section in self._sections:
            if section.title != "Header":
                lines.append(f"<h2>{html.escape(section.title)}</h2>")
            lines.append(f"<pre>{html.escape(section.content)}</pre>")
        lines.append("</body></html>")
        return "\n".join(lines)


__all__ = [
    "DEFAULT_TOP_CATEGORIES",
    "ReportAssembler",
    "ReportFormatter",
    "ReportSection",
]
