"""Tests for the in-memory transaction store."""

import asyncio
from datetime import date

import pytest

from budgetbuddy_core.exceptions import UpstreamUnavailableError
from budgetbuddy_core.interfaces import TransactionStore
from budgetbuddy_core.models import DateRange, Pagination
from budgetbuddy_core.store import InMemoryTransactionStore

JANUARY = DateRange(start=date(2025, 1, 1), end=date(2025, 1, 31))


@pytest.fixture
def store():
    return InMemoryTransactionStore(
        [
            {"id": "a", "user_id": "u1", "amount": 100, "type": "EXPENSE", "date": "2025-01-05"},
            {"id": "b", "user_id": "u1", "amount": 200, "type": "EXPENSE", "date": "2025-01-20"},
            {"id": "c", "user_id": "u1", "amount": 300, "type": "INCOME", "date": "2025-01-31"},
            {"id": "d", "user_id": "u1", "amount": 400, "type": "EXPENSE", "date": "2025-02-01"},
            {"id": "e", "user_id": "u2", "amount": 500, "type": "EXPENSE", "date": "2025-01-10"},
        ]
    )


class TestInMemoryTransactionStore:
    """Tests for InMemoryTransactionStore."""

    def test_satisfies_protocol(self, store):
        assert isinstance(store, TransactionStore)

    def test_fetch_filters_by_user_and_range(self, store):
        txns = asyncio.run(store.fetch_transactions("u1", JANUARY))

        assert [t.id for t in txns] == ["c", "b", "a"]

    def test_range_is_inclusive(self, store):
        txns = asyncio.run(
            store.fetch_transactions("u1", DateRange(start=date(2025, 1, 31), end=date(2025, 2, 1)))
        )

        assert {t.id for t in txns} == {"c", "d"}

    def test_pagination(self, store):
        page = asyncio.run(
            store.fetch_transactions("u1", JANUARY, Pagination(page_size=2, page_number=2))
        )

        assert [t.id for t in page] == ["a"]

    def test_unknown_user(self, store):
        assert asyncio.run(store.fetch_transactions("nobody", JANUARY)) == []

    def test_malformed_records_dropped_on_add(self, store):
        accepted = store.add(
            [
                {"id": "x", "amount": 10, "type": "EXPENSE", "date": "2025-01-02"},
                {"id": "y", "amount": -10, "type": "EXPENSE", "date": "2025-01-02"},
            ],
            user_id="u1",
        )

        assert accepted == 1
        assert store.count("u1") == 5

    def test_last_write_wins(self, store):
        store.add([{"id": "a", "user_id": "u1", "amount": 999, "type": "EXPENSE", "date": "2025-01-05"}])

        txns = asyncio.run(store.fetch_transactions("u1", JANUARY))

        assert store.count("u1") == 4
        assert next(t for t in txns if t.id == "a").amount == 999

    def test_outage(self, store):
        store.available = False

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            asyncio.run(store.fetch_transactions("u1", JANUARY))

        assert exc_info.value.details["user_id"] == "u1"
        assert exc_info.value.recoverable is True

    def test_clear(self, store):
        store.clear("u1")
        assert store.count("u1") == 0
        assert store.count("u2") == 1

        store.clear()
        assert store.count("u2") == 0
