"""LLM-backed report insights using Claude.

Sends only aggregated period numbers (never raw transactions) to the model
and asks for exactly three short coaching tips as a JSON array of strings.
Model output is untrusted: anything that does not parse into a list of
strings is reported as ``InsightUnavailableError``.
"""

import json
import re
from typing import Any, Optional

import structlog

from budgetbuddy_core.exceptions import ConfigurationError, InsightUnavailableError
from budgetbuddy_core.models import InsightRequest

from .config import LLMConfig

logger = structlog.get_logger()

INSIGHT_COUNT = 3
PROVIDER = "anthropic"


def _amount(value: float, symbol: str) -> str:
    return f"{symbol}{value:,.0f}" if float(value).is_integer() else f"{symbol}{value:,.2f}"


def build_insight_prompt(request: InsightRequest, currency_symbol: str = "₹") -> str:
    """Build the coaching prompt from aggregated numbers."""
    if request.categories:
        category_list = "\n".join(
            f"- {name}: {_amount(item['amount'], currency_symbol)} ({item['percentage']}%)"
            for name, item in request.categories.items()
        )
    else:
        category_list = "- No expenses recorded"

    return f"""
You are a friendly and smart financial coach, not a robot.

Your job is to give exactly {INSIGHT_COUNT} good short insights to the user based on their data that feel like you're talking to them directly.

Each insight should reflect the actual data and sound like something a smart money coach would say: short, clear, and practical.

Report for: {request.period_label}
- Total Income: {_amount(request.total_income, currency_symbol)}
- Total Expenses: {_amount(request.total_expenses, currency_symbol)}
- Available Balance: {_amount(request.available_balance, currency_symbol)}
- Savings Rate: {request.savings_rate}%

Top Expense Categories:
{category_list}

Guidelines:
- Keep each insight to one short, realistic, personalized, natural sentence
- Use conversational language and avoid sounding robotic or generic
- Include specific data when helpful and use the {currency_symbol} symbol for amounts
- Be encouraging if the user spent less than they earned
- Format your response exactly like this:

["Insight 1", "Insight 2", "Insight 3"]

Output only a JSON array of {INSIGHT_COUNT} strings. Do not include any explanation, markdown, or notes.
""".strip()


def parse_insight_response(response: str) -> Optional[list[str]]:
    """Parse a JSON array of strings from an LLM reply.

    Tries the whole reply, then a fenced code block, then the first
    bracketed array. Blank entries are dropped.

    Returns:
        The insight strings, or None if no usable array was found.
    """

    def _as_insights(value: Any) -> Optional[list[str]]:
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            return None
        cleaned = [v.strip() for v in value if v.strip()]
        return cleaned or None

    candidates = [response.strip()]

    # Code blocks
    fenced = re.search(r"```(?:json)?\s*(\[.*?\])\s*```", response, re.DOTALL)
    if fenced:
        candidates.append(fenced.group(1))

    # Standalone array
    bracketed = re.search(r"\[.*\]", response, re.DOTALL)
    if bracketed:
        candidates.append(bracketed.group(0))

    for candidate in candidates:
        try:
            parsed = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        insights = _as_insights(parsed)
        if insights is not None:
            return insights

    return None


class AnthropicInsightGenerator:
    """
    Generate report insights with Claude.

    Implements the ``InsightGenerator`` protocol. Timeouts and retries are
    handled by the Anthropic client using the configured limits.
    """

    def __init__(
        self,
        config: Optional[LLMConfig] = None,
        *,
        currency_symbol: str = "₹",
        client: Any = None,
    ):
        """
        Initialize the generator.

        Args:
            config: LLM settings. Defaults to ``LLMConfig()`` from the environment.
            currency_symbol: Symbol used for amounts in the prompt.
            client: Pre-built async client, mainly for tests.

        Raises:
            ImportError: If anthropic package is not installed.
            ConfigurationError: If no API key is available.
        """
        self.config = config or LLMConfig()
        self.currency_symbol = currency_symbol

        if client is not None:
            self.client = client
            return

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "The 'anthropic' package is required for report insights. "
                "Install it with: pip install anthropic"
            )

        if not self.config.has_api_key:
            raise ConfigurationError(
                "Anthropic API key required. Set BUDGETBUDDY_LLM_API_KEY or "
                "ANTHROPIC_API_KEY, or pass it in LLMConfig.",
                config_key="BUDGETBUDDY_LLM_API_KEY",
                expected="Anthropic API key",
            )

        self.client = anthropic.AsyncAnthropic(
            api_key=self.config.api_key,
            timeout=self.config.timeout,
            max_retries=self.config.max_retries,
        )

    async def generate_insights(self, request: InsightRequest) -> Optional[list[str]]:
        """
        Ask Claude for insights on an aggregated period.

        Args:
            request: Aggregated period numbers.

        Returns:
            Up to three insight strings.

        Raises:
            InsightUnavailableError: If the API call fails or the reply
                cannot be parsed.
        """
        prompt = build_insight_prompt(request, self.currency_symbol)

        try:
            response = await self.client.messages.create(
                model=self.config.model,
                max_tokens=self.config.max_tokens,
                temperature=self.config.temperature,
                messages=[{"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise InsightUnavailableError(
                "Insight request failed",
                provider=PROVIDER,
                operation="messages.create",
                api_error=str(e),
            ) from e

        raw_response = "".join(
            getattr(block, "text", "") for block in response.content
        )
        insights = parse_insight_response(raw_response)
        if insights is None:
            raise InsightUnavailableError(
                "Failed to parse insights from LLM response",
                provider=PROVIDER,
                operation="parse_response",
                details={"response_preview": raw_response[:200]},
            )

        logger.debug(
            "insights_generated",
            model=self.config.model,
            count=len(insights),
            input_tokens=getattr(response.usage, "input_tokens", None),
            output_tokens=getattr(response.usage, "output_tokens", None),
        )
        return insights[:INSIGHT_COUNT]


def create_insight_generator(
    config: Optional[LLMConfig] = None,
    *,
    currency_symbol: str = "₹",
) -> Optional[AnthropicInsightGenerator]:
    """
    Factory function to create an AnthropicInsightGenerator if available.

    Returns None if anthropic package is not installed or no API key is
    available, so reports degrade to numbers only.
    """
    try:
        return AnthropicInsightGenerator(config, currency_symbol=currency_symbol)
    except (ImportError, ConfigurationError) as e:
        logger.warning("insight_generator_unavailable", error=str(e))
        return None
