"""Synthetic transaction history for demos and tests.

Models a salaried household (monthly salary of 100000) with a fixed
catalogue of recurring expenses, a few random one-off expenses each month,
quarterly bonuses and two annual festival spikes. Passing ``seed`` makes
the output reproducible.
"""

import datetime as dt
import random
from decimal import Decimal
from typing import NamedTuple, Optional

import structlog

from .exceptions import InputError
from .models import DateRange, Transaction, TransactionType, shift_month

logger = structlog.get_logger()


class CatalogueItem(NamedTuple):
    amount: int
    title: str
    category: str


SALARY = CatalogueItem(100000, "Software Engineer Salary", "Salary")
QUARTERLY_BONUS = CatalogueItem(25000, "Quarterly Bonus", "Bonus")

RECURRING_EXPENSES: tuple[CatalogueItem, ...] = (
    CatalogueItem(28000, "House Rent", "Housing"),
    CatalogueItem(2500, "Electricity Bill", "Utilities"),
    CatalogueItem(800, "Water Bill", "Utilities"),
    CatalogueItem(1200, "Internet & Cable", "Utilities"),
    CatalogueItem(8500, "Monthly Groceries", "Groceries"),
    CatalogueItem(4200, "Dining Out", "Food"),
    CatalogueItem(1800, "Online Food Orders", "Food"),
    CatalogueItem(3500, "Petrol", "Transportation"),
    CatalogueItem(1200, "Car Maintenance", "Transportation"),
    CatalogueItem(800, "Auto/Cab Rides", "Transportation"),
    CatalogueItem(2200, "Health Insurance Premium", "Healthcare"),
    CatalogueItem(1500, "Medical Expenses", "Healthcare"),
    CatalogueItem(800, "Medicines", "Healthcare"),
    CatalogueItem(6500, "School Fees", "Education"),
    CatalogueItem(3000, "Tuition Classes", "Education"),
    CatalogueItem(1200, "Books & Stationery", "Education"),
    CatalogueItem(2000, "Movie & Entertainment", "Entertainment"),
    CatalogueItem(1500, "Streaming Subscriptions", "Entertainment"),
    CatalogueItem(1200, "Weekend Outings", "Entertainment"),
    CatalogueItem(1800, "Personal Care Items", "Personal Care"),
    CatalogueItem(1200, "Salon & Grooming", "Personal Care"),
    CatalogueItem(2500, "Mobile Recharge", "Utilities"),
    CatalogueItem(1800, "Clothing", "Shopping"),
    CatalogueItem(2200, "Household Items", "Shopping"),
    CatalogueItem(1500, "Gifts & Donations", "Others"),
    CatalogueItem(8000, "SIP Mutual Funds", "Investment"),
    CatalogueItem(5000, "PPF Contribution", "Investment"),
    CatalogueItem(3000, "Emergency Fund", "Savings"),
    CatalogueItem(2000, "Fixed Deposit", "Savings"),
)

ONE_OFF_EXPENSES: tuple[CatalogueItem, ...] = (
    CatalogueItem(1500, "ATM Withdrawal", "Others"),
    CatalogueItem(800, "Coffee Shop", "Food"),
    CatalogueItem(2200, "Online Shopping", "Shopping"),
    CatalogueItem(1200, "Pharmacy", "Healthcare"),
    CatalogueItem(900, "Parking Fees", "Transportation"),
)

# month -> (day, item)
FESTIVALS: dict[int, tuple[int, CatalogueItem]] = {
    10: (20, CatalogueItem(15000, "Diwali Shopping", "Festival")),
    3: (15, CatalogueItem(8000, "Holi Celebration", "Festival")),
}

JITTER = 0.1


class SyntheticHistoryGenerator:
    """Builds a reproducible transaction history for one user."""

    def __init__(self, user_id: str, seed: Optional[int] = None):
        self.user_id = user_id
        self._rng = random.Random(seed)

    def _transaction(
        self,
        item: CatalogueItem,
        kind: TransactionType,
        date: dt.date,
        amount: Optional[int] = None,
        description: str = "",
    ) -> Transaction:
        return Transaction(
            id=f"{self._rng.getrandbits(96):024x}",
            user_id=self.user_id,
            amount=Decimal(item.amount if amount is None else amount),
            type=kind,
            category=item.category,
            title=item.title,
            description=description,
            date=date,
            created_at=dt.datetime.combine(date, dt.time()),
        )

    def _jittered(self, amount: int) -> int:
        variation = (self._rng.random() - 0.5) * 2 * JITTER
        return round(amount * (1 + variation))

    def month(
        self,
        first_day: dt.date,
        offset: int,
        until: Optional[dt.date] = None,
    ) -> list[Transaction]:
        """Transactions for one calendar month.

        Args:
            first_day: First day of the month.
            offset: Months back from the end of the window (0 = latest).
            until: Drop transactions dated after this day. The random draws
                still happen so the rest of the month stays reproducible.
        """
        txns = [
            self._transaction(
                SALARY,
                TransactionType.INCOME,
                first_day,
                description="Monthly salary from tech company",
            )
        ]

        for index, item in enumerate(RECURRING_EXPENSES):
            day = min(28, 5 + index % 23)
            txns.append(
                self._transaction(
                    item,
                    TransactionType.EXPENSE,
                    first_day.replace(day=day),
                    amount=self._jittered(item.amount),
                    description=f"Monthly {item.title.lower()}",
                )
            )

        for _ in range(self._rng.randint(2, 3)):
            item = self._rng.choice(ONE_OFF_EXPENSES)
            txns.append(
                self._transaction(
                    item,
                    TransactionType.EXPENSE,
                    first_day.replace(day=self._rng.randint(1, 28)),
                    description=f"Random {item.title.lower()}",
                )
            )

        if offset % 3 == 0:
            txns.append(
                self._transaction(
                    QUARTERLY_BONUS,
                    TransactionType.INCOME,
                    first_day.replace(day=15),
                    description="Performance-based quarterly bonus",
                )
            )

        if first_day.month in FESTIVALS:
            day, item = FESTIVALS[first_day.month]
            txns.append(
                self._transaction(
                    item,
                    TransactionType.EXPENSE,
                    first_day.replace(day=day),
                    description="Festival shopping and celebrations",
                )
            )

        if until is not None:
            txns = [txn for txn in txns if txn.date <= until]
        return txns


def generate_synthetic_history(
    user_id: str,
    months: int,
    *,
    end: Optional[dt.date] = None,
    seed: Optional[int] = None,
) -> list[Transaction]:
    """Generate ``months`` calendar months of history ending at ``end``.

    Every record falls inside ``DateRange.rolling(months, end)``. Items of the
    last month scheduled after ``end`` are left out.

    Args:
        user_id: Owner of the generated transactions.
        months: Number of calendar months to cover.
        end: Last day of the window. Defaults to today.
        seed: Random seed for reproducible output.

    Returns:
        Transactions in chronological month order.

    Raises:
        InputError: If months is less than 1.
    """
    if months < 1:
        raise InputError(
            "months must be at least 1",
            field="months",
            value=months,
            constraint="months >= 1",
        )

    window = DateRange.rolling(months, end=end or dt.date.today())
    generator = SyntheticHistoryGenerator(user_id, seed=seed)

    transactions: list[Transaction] = []
    for index in range(months):
        first_day = shift_month(window.start, index)
        transactions.extend(generator.month(first_day, offset=months - 1 - index, until=window.end))

    logger.info(
        "synthetic_history_generated",
        user_id=user_id,
        months=months,
        count=len(transactions),
    )
    return transactions


__all__ = [
    "RECURRING_EXPENSES",
    "ONE_OFF_EXPENSES",
    "SyntheticHistoryGenerator",
    "generate_synthetic_history",
]
