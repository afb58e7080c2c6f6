"""BudgetBuddy Agents - configuration and AI insights for financial reports."""

from budgetbuddy_agents.config import (
    BudgetBuddyConfig,
    LLMConfig,
    ReportConfig,
)
from budgetbuddy_agents.insights import (
    AnthropicInsightGenerator,
    build_insight_prompt,
    create_insight_generator,
    parse_insight_response,
)
from budgetbuddy_agents.logging_setup import configure_logging
from budgetbuddy_agents.service import create_report_assembler, create_report_formatter

__version__ = "0.1.0"

__all__ = [
    "AnthropicInsightGenerator",
    "BudgetBuddyConfig",
    "LLMConfig",
    "ReportConfig",
    "build_insight_prompt",
    "configure_logging",
    "create_insight_generator",
    "create_report_assembler",
    "create_report_formatter",
    "parse_insight_response",
]
