"""Wiring of the report assembler from configuration."""

from typing import Optional

import structlog

from budgetbuddy_core.interfaces import InsightGenerator, TransactionStore
from budgetbuddy_core.report_generator import ReportAssembler, ReportFormatter

from .config import BudgetBuddyConfig
from .insights import create_insight_generator

logger = structlog.get_logger()


def create_report_assembler(
    store: TransactionStore,
    config: Optional[BudgetBuddyConfig] = None,
    *,
    insight_generator: Optional[InsightGenerator] = None,
) -> ReportAssembler:
    """
    Build a ReportAssembler for a store using configured limits.

    Args:
        store: Transaction store to read from.
        config: Settings. Defaults to ``BudgetBuddyConfig()`` from the environment.
        insight_generator: Overrides the configured Anthropic generator.

    Returns:
        A ready ReportAssembler. Insights are disabled when turned off in
        config or when no generator could be created.
    """
    config = config or BudgetBuddyConfig()

    if insight_generator is None and config.report.enable_insights:
        insight_generator = create_insight_generator(
            config.llm,
            currency_symbol=config.report.currency_symbol,
        )
    elif not config.report.enable_insights:
        insight_generator = None

    logger.info(
        "report_assembler_created",
        env=config.env,
        insights=insight_generator is not None,
        top_categories_limit=config.report.top_categories_limit,
    )
    return ReportAssembler(
        store,
        insight_generator,
        top_categories_limit=config.report.top_categories_limit,
    )


def create_report_formatter(config: Optional[BudgetBuddyConfig] = None) -> ReportFormatter:
    config = config or BudgetBuddyConfig()
    return ReportFormatter(currency_symbol=config.report.currency_symbol)
