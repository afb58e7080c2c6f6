"""Collaborator protocols for the report assembler.

The assembler talks to two external collaborators: a transaction store and
an optional generative-AI insight generator. Both are defined as
``typing.Protocol`` so any class with matching async methods is accepted
without inheriting from anything.

Example:
    ```python
    class MongoTransactionStore:
        async def fetch_transactions(self, user_id, date_range, pagination=None):
            docs = await self._collection.find(...).to_list(None)
            return ingest_transactions(docs, user_id=user_id)

    assembler = ReportAssembler(MongoTransactionStore(...))
    ```
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from budgetbuddy_core.models import DateRange, InsightRequest, Pagination, Transaction


@runtime_checkable
class TransactionStore(Protocol):
    """Read access to a user's transactions.

    Implementations return validated transactions whose ``date`` falls
    inside ``date_range`` (inclusive). Outages should surface as
    ``UpstreamUnavailableError``.
    """

    async def fetch_transactions(
        self,
        user_id: str,
        date_range: DateRange,
        pagination: Optional[Pagination] = None,
    ) -> list[Transaction]:
        """Fetch transactions for a user within a date range.

        Args:
            user_id: Owner of the transactions.
            date_range: Inclusive period to fetch.
            pagination: Optional page selection. ``None`` returns everything.

        Returns:
            Transactions ordered newest first.
        """
        ...


@runtime_checkable
class InsightGenerator(Protocol):
    """Produces short narrative insights from aggregated numbers.

    Output is untrusted. Callers must tolerate ``None``, exceptions and
    malformed lists.
    """

    async def generate_insights(self, request: InsightRequest) -> Optional[list[str]]:
        """Generate insights for an aggregated period summary.

        Args:
            request: Period totals and category breakdown. Never raw
                transactions.

        Returns:
            A list of insight strings, or None if nothing could be produced.
        """
        ...


__all__ = ["TransactionStore", "InsightGenerator"]
