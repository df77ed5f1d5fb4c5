"""
In-Memory Storage Implementation

Used by tests and when the app runs without a configured data file.
Nothing survives the process.
"""

from typing import Iterable, Optional
from uuid import uuid4

from ledger.aggregation import coerce_transactions
from ledger.models.audit import AuditEvent
from ledger.models.transaction import NewTransaction, Transaction
from ledger.services.storage.interface import (
    AuditStorageInterface,
    TransactionStorageInterface,
)


class InMemoryTransactionStorage(TransactionStorageInterface):
    """Transaction history held in a list."""

    def __init__(self, transactions: Optional[Iterable] = None):
        self._transactions: list[Transaction] = coerce_transactions(transactions or [])

    async def load_transactions(self) -> list[Transaction]:
        return list(self._transactions)

    async def append_transaction(self, new: NewTransaction) -> Transaction:
        transaction = new.with_id(uuid4().hex)
        self._transactions.append(transaction)
        return transaction


class InMemoryAuditStorage(AuditStorageInterface):
    """Audit events held in a list."""

    def __init__(self):
        self.events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self.events.append(event)
        return True

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        if limit <= 0:
            return []
        return list(reversed(self.events))[:limit]
