"""Custom exceptions for BudgetBuddy.

This module provides the exception hierarchy shared by the aggregation
engine and its collaborators. All exceptions inherit from BudgetBuddyError,
so callers can catch every application-specific error in one place.

Example:
    try:
        report = await assembler.build_report(user_id, start, end)
    except InputError as e:
        return {"error": e.message, **e.details}
    except UpstreamUnavailableError:
        # Store is down - nothing sensible to render
        raise
"""

from typing import Any, Optional


class BudgetBuddyError(Exception):
    """Base exception for all BudgetBuddy errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context.
        recoverable: Whether the error is potentially recoverable.

    Example:
        >>> raise BudgetBuddyError("Something went wrong", details={"code": 500})
        BudgetBuddyError: Something went wrong
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize BudgetBuddyError.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context about the error.
            recoverable: Whether the error is potentially recoverable through
                retry or alternative approaches. Defaults to False.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        """Return string representation of the error."""
        return self.message

    def __repr__(self) -> str:
        """Return detailed representation of the error."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class InputError(BudgetBuddyError):
    """Error raised when caller-supplied input is malformed.

    Raised for problems the caller can fix, such as a date range whose
    start is after its end. Individual malformed transactions are not
    reported this way; ingestion skips them instead.

    Attributes:
        field: The input field that failed validation.
        value: The invalid value (if safe to include).
        constraint: The validation constraint that was violated.

    Example:
        >>> raise InputError(
        ...     "from_date must be on or before to_date",
        ...     field="from_date",
        ...     value="2025-03-01",
        ...     constraint="from_date <= to_date",
        ... )
        InputError: from_date must be on or before to_date
    """

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize InputError.

        Args:
            message: Human-readable error description.
            field: The name of the input that failed validation.
            value: The invalid value.
            constraint: Description of the validation rule violated.
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed by the caller.
                Defaults to True.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.field = field
        self.value = value
        self.constraint = constraint

        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = value
        if constraint:
            self.details["constraint"] = constraint


class UpstreamUnavailableError(BudgetBuddyError):
    """Error raised when the transaction store cannot serve a request.

    A store failure is fatal to the whole report: without transactions
    there is no numeric report to return.

    Attributes:
        source: Name of the store or backend that failed.
        user_id: The user whose data was being fetched.

    Example:
        >>> raise UpstreamUnavailableError(
        ...     "Transaction store timed out",
        ...     source="mongo",
        ...     user_id="u-42",
        ... )
        UpstreamUnavailableError: Transaction store timed out
    """

    def __init__(
        self,
        message: str,
        *,
        source: Optional[str] = None,
        user_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize UpstreamUnavailableError.

        Args:
            message: Human-readable error description.
            source: Identifier of the failing store.
            user_id: User whose transactions were requested.
            details: Optional dictionary with additional context.
            recoverable: Whether a retry may succeed. Defaults to True since
                store outages are usually transient.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.source = source
        self.user_id = user_id

        if source:
            self.details["source"] = source
        if user_id:
            self.details["user_id"] = user_id


class InsightUnavailableError(BudgetBuddyError):
    """Error raised when the generative-AI collaborator fails.

    Covers API failures, timeouts and replies that cannot be parsed into
    a list of insight strings. The report assembler treats this as
    non-fatal and returns the numeric report with no insights.

    Attributes:
        provider: Name of the AI provider.
        operation: The operation being attempted.
        api_error: The underlying API error message (if applicable).
    """

    def __init__(
        self,
        message: str,
        *,
        provider: Optional[str] = None,
        operation: Optional[str] = None,
        api_error: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = True,
    ) -> None:
        """Initialize InsightUnavailableError.

        Args:
            message: Human-readable error description.
            provider: Identifier for the AI provider.
            operation: The specific operation being attempted.
            api_error: The underlying API error message if from an external service.
            details: Optional dictionary with additional context.
            recoverable: Whether the operation can be retried. Defaults to True
                since rate limits and timeouts are transient.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.provider = provider
        self.operation = operation
        self.api_error = api_error

        if provider:
            self.details["provider"] = provider
        if operation:
            self.details["operation"] = operation
        if api_error:
            self.details["api_error"] = api_error


class ConfigurationError(BudgetBuddyError):
    """Error raised when configuration is invalid or missing.

    Attributes:
        config_key: The configuration key that is problematic.
        expected: Description of the expected value or format.
        actual: The actual value found (if any).

    Example:
        >>> raise ConfigurationError(
        ...     "Missing required API key",
        ...     config_key="BUDGETBUDDY_LLM_API_KEY",
        ...     expected="Valid Anthropic API key",
        ... )
        ConfigurationError: Missing required API key
    """

    def __init__(
        self,
        message: str,
        *,
        config_key: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error description.
            config_key: The name of the configuration key that is problematic.
            expected: Description of what value was expected.
            actual: The actual value found (avoid including secrets).
            details: Optional dictionary with additional context.
            recoverable: Whether the error can be fixed at runtime.
                Defaults to False.
        """
        super().__init__(message, details=details, recoverable=recoverable)
        self.config_key = config_key
        self.expected = expected
        self.actual = actual

        if config_key:
            self.details["config_key"] = config_key
        if expected:
            self.details["expected"] = expected
        if actual is not None:
            self.details["actual"] = actual


__all__ = [
    "BudgetBuddyError",
    "InputError",
    "UpstreamUnavailableError",
    "InsightUnavailableError",
    "ConfigurationError",
]
