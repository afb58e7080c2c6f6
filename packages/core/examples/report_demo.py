#!/usr/bin/env python3
"""
Generate a Financial Report from Synthetic History

Seeds an in-memory store with a year of synthetic transactions, builds a
rolling report and prints it. Insights are requested from Claude when an
API key is configured (BUDGETBUDDY_LLM_API_KEY or ANTHROPIC_API_KEY).

Usage:
    python examples/report_demo.py
    python examples/report_demo.py --months 3 --format markdown
    python examples/report_demo.py --format json --seed 7
"""

import argparse
import asyncio
import json
import sys
from datetime import date

from budgetbuddy_agents import (
    BudgetBuddyConfig,
    configure_logging,
    create_report_assembler,
    create_report_formatter,
)
from budgetbuddy_core import InMemoryTransactionStore, generate_synthetic_history

USER_ID = "demo-user"


async def run(args: argparse.Namespace) -> int:
    config = BudgetBuddyConfig()
    configure_logging(config.log_level)

    end = date.fromisoformat(args.end) if args.end else date.today()
    store = InMemoryTransactionStore(
        generate_synthetic_history(USER_ID, 12, end=end, seed=args.seed)
    )

    assembler = create_report_assembler(store, config)
    months = args.months or config.report.default_rolling_months
    report = await assembler.build_rolling_report(USER_ID, months, end=end)

    if args.format == "json":
        print(json.dumps(report.to_payload(), indent=2, ensure_ascii=False))
    else:
        print(create_report_formatter(config).render(report, format=args.format))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Build a BudgetBuddy report from synthetic data")
    parser.add_argument("--months", type=int, default=None, help="Rolling window in months")
    parser.add_argument("--end", default=None, help="Last day of the window (YYYY-MM-DD)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for the synthetic history")
    parser.add_argument(
        "--format",
        choices=["text", "markdown", "html", "json"],
        default="text",
        help="Output format",
    )
    args = parser.parse_args()
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
