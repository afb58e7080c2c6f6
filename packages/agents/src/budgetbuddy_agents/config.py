"""Configuration system for BudgetBuddy.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults for report generation and the
insight generator.

Usage:
    from budgetbuddy_agents.config import BudgetBuddyConfig

    # Load from environment variables and .env file
    config = BudgetBuddyConfig()

    # Access LLM settings
    print(config.llm.model)

    # Access report settings
    if config.report.enable_insights:
        print("Insights enabled")
"""

import os
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMConfig(BaseSettings):
    """LLM configuration settings.

    Configuration for the model that writes report insights. Supports
    environment variables with the prefix BUDGETBUDDY_LLM_.

    Environment Variables:
        BUDGETBUDDY_LLM_MODEL: Anthropic model name
        BUDGETBUDDY_LLM_TEMPERATURE: Sampling temperature (0.0-2.0)
        BUDGETBUDDY_LLM_MAX_TOKENS: Maximum output tokens
        BUDGETBUDDY_LLM_API_KEY: API key (falls back to ANTHROPIC_API_KEY)
        BUDGETBUDDY_LLM_TIMEOUT: Request timeout in seconds
        BUDGETBUDDY_LLM_MAX_RETRIES: Client-side retry attempts
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGETBUDDY_LLM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    model: str = Field(
        default="claude-sonnet-4-20250514",
        description="Model identifier for the LLM",
    )
    temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for generation",
    )
    max_tokens: int = Field(
        default=1024,
        gt=0,
        le=200000,
        description="Maximum tokens in response",
    )
    api_key: Optional[str] = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY"),
        description="API key for the LLM provider",
    )
    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Request timeout in seconds",
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retry attempts made by the API client",
    )

    @field_validator("model")
    @classmethod
    def validate_model(cls, v: str) -> str:
        """Ensure model name is not empty."""
        if not v or not v.strip():
            raise ValueError("Model name cannot be empty")
        return v.strip()

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


class ReportConfig(BaseSettings):
    """Report configuration settings.

    Environment Variables:
        BUDGETBUDDY_REPORT_TOP_CATEGORIES_LIMIT: Categories in the report summary
        BUDGETBUDDY_REPORT_DEFAULT_ROLLING_MONTHS: Window for rolling reports
        BUDGETBUDDY_REPORT_ENABLE_INSIGHTS: Ask the LLM for insights
        BUDGETBUDDY_REPORT_CURRENCY_SYMBOL: Symbol used in rendered reports
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGETBUDDY_REPORT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    top_categories_limit: int = Field(
        default=5,
        ge=1,
        le=20,
        description="Number of top expense categories in a report",
    )
    default_rolling_months: int = Field(
        default=6,
        ge=1,
        le=60,
        description="Months covered by a rolling report when none is given",
    )
    enable_insights: bool = Field(
        default=True,
        description="Request narrative insights from the LLM",
    )
    currency_symbol: str = Field(
        default="₹",
        min_length=1,
        description="Currency symbol for rendered reports",
    )


class BudgetBuddyConfig(BaseSettings):
    """Root configuration for BudgetBuddy.

    Combines all configuration subsections. Supports loading from environment
    variables and .env files.

    Environment Variables:
        BUDGETBUDDY_ENV: Environment name (development, staging, production, test)
        BUDGETBUDDY_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        config = BudgetBuddyConfig(
            llm=LLMConfig(model="claude-3-5-haiku-latest"),
            report=ReportConfig(top_categories_limit=3),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGETBUDDY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment settings
    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    # Nested configuration
    llm: LLMConfig = Field(default_factory=LLMConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"
