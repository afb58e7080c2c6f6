"""Core transaction models and ingestion.

This module provides the input-side data structures for the aggregation
engine:
- Transactions tagged by type (income or expense)
- Inclusive date ranges and rolling month windows
- Pagination for store queries
- Validation of externally supplied records at the store boundary

Every downstream component works on validated ``Transaction`` objects and
shares the single ``normalize_category`` definition of "uncategorized".
"""

import datetime as dt
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Union
from uuid import uuid4

import structlog
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

logger = structlog.get_logger()

UNCATEGORIZED = "Other"


def normalize_category(value: Optional[Any]) -> str:
    """Return the canonical category label, mapping missing/blank to "Other"."""
    if value is None:
        return UNCATEGORIZED
    label = str(value).strip()
    return label or UNCATEGORIZED


def month_key(value: dt.date) -> str:
    """Return the ``YYYY-MM`` bucket key for a date."""
    return value.strftime("%Y-%m")


def shift_month(value: dt.date, months: int) -> dt.date:
    """Return the first day of the month ``months`` away from ``value``."""
    index = value.year * 12 + (value.month - 1) + months
    return dt.date(index // 12, index % 12 + 1, 1)


def months_between(start: dt.date, end: dt.date) -> int:
    """Number of calendar months touched by ``start``..``end`` (inclusive)."""
    return (end.year - start.year) * 12 + (end.month - start.month) + 1


class TransactionType(str, Enum):
    """Direction of a transaction. The amount itself is never signed."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class Transaction(BaseModel):
    """A single income or expense record owned by a user.

    Transactions are read-only to the engine. ``amount`` is a non-negative
    magnitude; direction is carried solely by ``type``.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "66b1f0c2a1",
                    "user_id": "u-42",
                    "amount": "8500",
                    "type": "EXPENSE",
                    "category": "Groceries",
                    "date": "2025-01-05",
                    "title": "Monthly Groceries",
                }
            ]
        },
    )

    id: str = Field(
        default_factory=lambda: uuid4().hex,
        validation_alias=AliasChoices("id", "_id"),
        description="Opaque unique identifier",
    )
    user_id: str = Field(
        validation_alias=AliasChoices("user_id", "userId"),
        description="Owner reference",
    )
    amount: Decimal = Field(
        ge=Decimal("0"),
        description="Non-negative magnitude; sign is carried by type",
    )
    type: TransactionType = Field(description="INCOME or EXPENSE")
    category: str = Field(
        default=UNCATEGORIZED,
        description="Free-form category label, blank normalizes to 'Other'",
    )
    title: str = Field(default="", description="Display title")
    description: str = Field(default="", description="Display description")
    created_at: Optional[dt.datetime] = Field(
        default=None,
        validation_alias=AliasChoices("created_at", "createdAt"),
        description="Record creation timestamp, never used for aggregation",
    )
    date: dt.date = Field(description="Economic date the transaction belongs to")

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount_to_decimal(cls, v):
        """Coerce string and float amounts to Decimal."""
        try:
            if isinstance(v, str):
                return Decimal(v.strip())
            if isinstance(v, float):
                return Decimal(str(v))
        except InvalidOperation:
            raise ValueError(f"Invalid amount: {v!r}")
        return v

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        """Accept 'income' / 'Expense' etc."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("category", mode="before")
    @classmethod
    def normalize_category_label(cls, v):
        return normalize_category(v)

    @field_validator("date", mode="before")
    @classmethod
    def truncate_datetime(cls, v):
        """Datetimes (and ISO datetime strings) keep only their date part."""
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return dt.datetime.fromisoformat(v.strip().replace("Z", "+00:00")).date()
        return v

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def month(self) -> str:
        """``YYYY-MM`` key of the economic date."""
        return month_key(self.date)


TransactionRecord = Union[Transaction, Mapping[str, Any]]


def ingest_transactions(
    records: Iterable[TransactionRecord],
    *,
    user_id: Optional[str] = None,
) -> list[Transaction]:
    """Validate externally supplied records into ``Transaction`` objects.

    Malformed records (unknown type, negative or non-finite amount, bad
    date) are skipped and logged rather than failing the whole batch.

    Args:
        records: Transactions or raw mappings as returned by a data store.
        user_id: Owner to assume for records that do not carry one.

    Returns:
        The valid transactions, in input order.
    """
    valid: list[Transaction] = []
    skipped = 0

    for index, record in enumerate(records):
        if isinstance(record, Transaction):
            valid.append(record)
            continue

        try:
            data = dict(record)
            if user_id is not None and "user_id" not in data and "userId" not in data:
                data["user_id"] = user_id
            valid.append(Transaction.model_validate(data))
        except (ValidationError, TypeError, ValueError) as e:
            skipped += 1
            logger.warning(
                "transaction_skipped",
                index=index,
                record_id=_record_id(record),
                error=str(e).splitlines()[0],
            )

    if skipped:
        logger.info("transactions_ingested", accepted=len(valid), skipped=skipped)

    return valid


def _record_id(record: Any) -> Optional[str]:
    if isinstance(record, Mapping):
        value = record.get("id", record.get("_id"))
        return str(value) if value is not None else None
    return None


class DateRange(BaseModel):
    """An inclusive reporting period."""

    model_config = ConfigDict(frozen=True)

    start: dt.date = Field(description="First day of the period (inclusive)")
    end: dt.date = Field(description="Last day of the period (inclusive)")

    @field_validator("end")
    @classmethod
    def end_date_after_start_date(cls, v, info):
        """Validate that end is not before start."""
        if "start" in info.data and v < info.data["start"]:
            raise ValueError("end must be on or after start")
        return v

    @classmethod
    def rolling(cls, months: int, end: Optional[dt.date] = None) -> "DateRange":
        """The last ``months`` calendar months up to and including ``end``.

        Args:
            months: Number of calendar months, counting ``end``'s month.
            end: Last day of the window. Defaults to today.

        Raises:
            ValueError: If months is less than 1.
        """
        if months < 1:
            raise ValueError("months must be at least 1")
        end = end or dt.date.today()
        return cls(start=shift_month(end, -(months - 1)), end=end)

    def contains(self, value: dt.date) -> bool:
        return self.start <= value <= self.end

    @property
    def month_span(self) -> int:
        """Number of calendar months the range touches."""
        return months_between(self.start, self.end)

    def month_keys(self) -> list[str]:
        """Ordered ``YYYY-MM`` keys of every month in the range."""
        return [month_key(shift_month(self.start, i)) for i in range(self.month_span)]

    @property
    def label(self) -> str:
        """Human-readable label, e.g. 'January 01 - March 31, 2025'."""
        if self.start.year == self.end.year:
            return f"{self.start:%B %d} - {self.end:%B %d, %Y}"
        return f"{self.start:%B %d, %Y} - {self.end:%B %d, %Y}"


class Pagination(BaseModel):
    """Page selection for store queries."""

    page_size: int = Field(default=20, ge=1, le=1000)
    page_number: int = Field(default=1, ge=1)

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size
