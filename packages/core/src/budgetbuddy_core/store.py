"""In-memory transaction store.

Reference implementation of ``TransactionStore`` for tests and demos.
Records are validated on the way in with ``ingest_transactions``, so
malformed records are dropped at the store boundary.
"""

from collections import defaultdict
from typing import Iterable, Optional

import structlog

from .exceptions import UpstreamUnavailableError
from .models import DateRange, Pagination, Transaction, TransactionRecord, ingest_transactions

logger = structlog.get_logger()


class InMemoryTransactionStore:
    """Keeps transactions per user in process memory.

    Writes are last-write-wins by transaction id. Setting ``available`` to
    False makes every fetch raise ``UpstreamUnavailableError``, which
    simulates a store outage.
    """

    source = "memory"

    def __init__(self, records: Optional[Iterable[TransactionRecord]] = None):
        self._transactions: dict[str, dict[str, Transaction]] = defaultdict(dict)
        self.available = True
        if records is not None:
            self.add(records)

    def add(
        self,
        records: Iterable[TransactionRecord],
        *,
        user_id: Optional[str] = None,
    ) -> int:
        """Validate and store records.

        Args:
            records: Transactions or raw mappings.
            user_id: Owner to assume for records that do not carry one.

        Returns:
            Number of records accepted.
        """
        accepted = ingest_transactions(records, user_id=user_id)
        for txn in accepted:
            self._transactions[txn.user_id][txn.id] = txn
        return len(accepted)

    def clear(self, user_id: Optional[str] = None) -> None:
        if user_id is None:
            self._transactions.clear()
        else:
            self._transactions.pop(user_id, None)

    def count(self, user_id: str) -> int:
        return len(self._transactions.get(user_id, {}))

    async def fetch_transactions(
        self,
        user_id: str,
        date_range: DateRange,
        pagination: Optional[Pagination] = None,
    ) -> list[Transaction]:
        if not self.available:
            raise UpstreamUnavailableError(
                "Transaction store is unavailable",
                source=self.source,
                user_id=user_id,
            )

        matches = [
            txn
            for txn in self._transactions.get(user_id, {}).values()
            if date_range.contains(txn.date)
        ]
        matches.sort(key=lambda t: (t.date, t.id), reverse=True)

        if pagination is not None:
            matches = matches[pagination.offset:pagination.offset + pagination.page_size]

        logger.debug(
            "transactions_fetched",
            user_id=user_id,
            period=date_range.label,
            count=len(matches),
        )
        return matches


__all__ = ["InMemoryTransactionStore"]
