"""Tests for the configuration system."""

import pytest

from budgetbuddy_agents.config import (
    BudgetBuddyConfig,
    LLMConfig,
    ReportConfig,
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Isolate tests from the developer's environment and .env file."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("BUDGETBUDDY_LLM_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)


class TestLLMConfig:
    """Test suite for LLMConfig."""

    def test_default_values(self):
        """LLMConfig should have sensible defaults."""
        config = LLMConfig()

        assert config.model == "claude-sonnet-4-20250514"
        assert config.temperature == 0.3
        assert config.max_tokens == 1024
        assert config.timeout == 30.0
        assert config.max_retries == 2
        assert config.api_key is None
        assert config.has_api_key is False

    def test_custom_values(self):
        """LLMConfig should accept custom values."""
        config = LLMConfig(
            model="claude-3-5-haiku-latest",
            temperature=0.7,
            max_tokens=512,
            api_key="test-key",
            timeout=10.0,
            max_retries=0,
        )

        assert config.model == "claude-3-5-haiku-latest"
        assert config.temperature == 0.7
        assert config.max_tokens == 512
        assert config.api_key == "test-key"
        assert config.has_api_key is True
        assert config.timeout == 10.0
        assert config.max_retries == 0

    def test_temperature_validation(self):
        """Temperature should be between 0.0 and 2.0."""
        LLMConfig(temperature=0.0)
        LLMConfig(temperature=2.0)

        with pytest.raises(ValueError):
            LLMConfig(temperature=-0.1)

        with pytest.raises(ValueError):
            LLMConfig(temperature=2.1)

    def test_model_validation(self):
        """Model name cannot be empty."""
        with pytest.raises(ValueError):
            LLMConfig(model="")

        with pytest.raises(ValueError):
            LLMConfig(model="   ")

    def test_max_retries_validation(self):
        with pytest.raises(ValueError):
            LLMConfig(max_retries=-1)

        with pytest.raises(ValueError):
            LLMConfig(max_retries=11)

    def test_api_key_falls_back_to_anthropic_env(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-fallback")

        assert LLMConfig().api_key == "sk-fallback"

    def test_prefixed_api_key_wins(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-fallback")
        monkeypatch.setenv("BUDGETBUDDY_LLM_API_KEY", "sk-prefixed")

        assert LLMConfig().api_key == "sk-prefixed"

    def test_blank_api_key_is_not_a_key(self):
        assert LLMConfig(api_key="  ").has_api_key is False

    def test_from_environment(self, monkeypatch):
        """LLMConfig should load from environment variables."""
        monkeypatch.setenv("BUDGETBUDDY_LLM_MODEL", "claude-3-opus-20240229")
        monkeypatch.setenv("BUDGETBUDDY_LLM_TEMPERATURE", "0.5")
        monkeypatch.setenv("BUDGETBUDDY_LLM_MAX_TOKENS", "2048")

        config = LLMConfig()

        assert config.model == "claude-3-opus-20240229"
        assert config.temperature == 0.5
        assert config.max_tokens == 2048


class TestReportConfig:
    """Test suite for ReportConfig."""

    def test_default_values(self):
        config = ReportConfig()

        assert config.top_categories_limit == 5
        assert config.default_rolling_months == 6
        assert config.enable_insights is True
        assert config.currency_symbol == "₹"

    def test_limits_validated(self):
        with pytest.raises(ValueError):
            ReportConfig(top_categories_limit=0)

        with pytest.raises(ValueError):
            ReportConfig(top_categories_limit=21)

        with pytest.raises(ValueError):
            ReportConfig(default_rolling_months=61)

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("BUDGETBUDDY_REPORT_TOP_CATEGORIES_LIMIT", "3")
        monkeypatch.setenv("BUDGETBUDDY_REPORT_ENABLE_INSIGHTS", "false")
        monkeypatch.setenv("BUDGETBUDDY_REPORT_CURRENCY_SYMBOL", "$")

        config = ReportConfig()

        assert config.top_categories_limit == 3
        assert config.enable_insights is False
        assert config.currency_symbol == "$"


class TestBudgetBuddyConfig:
    """Test suite for BudgetBuddyConfig."""

    def test_default_values(self):
        config = BudgetBuddyConfig()

        assert config.env == "development"
        assert config.log_level == "INFO"
        assert config.llm.temperature == 0.3
        assert config.report.top_categories_limit == 5

    def test_custom_nested_config(self):
        config = BudgetBuddyConfig(
            llm=LLMConfig(model="custom-model"),
            report=ReportConfig(top_categories_limit=3),
        )

        assert config.llm.model == "custom-model"
        assert config.report.top_categories_limit == 3

    def test_environment_validation(self):
        """Environment should be validated case-insensitively."""
        assert BudgetBuddyConfig(env="PRODUCTION").env == "production"
        assert BudgetBuddyConfig(env="test").env == "test"

        with pytest.raises(ValueError):
            BudgetBuddyConfig(env="invalid")

    def test_log_level_validation(self):
        """Log level should be validated and upper-cased."""
        assert BudgetBuddyConfig(log_level="debug").log_level == "DEBUG"

        with pytest.raises(ValueError):
            BudgetBuddyConfig(log_level="LOUD")

    def test_is_production_property(self):
        assert BudgetBuddyConfig(env="production").is_production is True
        assert BudgetBuddyConfig(env="staging").is_production is False

    def test_loads_from_dotenv_file(self, tmp_path):
        """BudgetBuddyConfig should load from a .env file in the working directory."""
        (tmp_path / ".env").write_text(
            "BUDGETBUDDY_ENV=staging\n"
            "BUDGETBUDDY_LOG_LEVEL=ERROR\n"
            "BUDGETBUDDY_LLM_MODEL=test-model\n"
            "BUDGETBUDDY_REPORT_TOP_CATEGORIES_LIMIT=7\n"
        )

        config = BudgetBuddyConfig()

        assert config.env == "staging"
        assert config.log_level == "ERROR"
        assert config.llm.model == "test-model"
        assert config.report.top_categories_limit == 7

    def test_validates_nested_on_instantiation(self):
        with pytest.raises(ValueError):
            BudgetBuddyConfig(llm=LLMConfig(temperature=5.0))
