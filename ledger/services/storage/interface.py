"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the history in a plain JSON file today
2. Use in-memory storage for testing
3. Move to a database later without touching the ledger logic

The history is append-only: there is no update or delete.
"""

from abc import ABC, abstractmethod

from ledger.models.audit import AuditEvent
from ledger.models.transaction import NewTransaction, Transaction


class TransactionStorageInterface(ABC):
    """
    Abstract interface for the transaction history.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def load_transactions(self) -> list[Transaction]:
        """
        Load the complete transaction history.

        Returns:
            All transactions in the order they were appended

        Raises:
            StorageError: If the history cannot be read
            MalformedTransactionError: If a stored record is invalid
        """
        pass

    @abstractmethod
    async def append_transaction(self, new: NewTransaction) -> Transaction:
        """
        Append a transaction to the history.

        Args:
            new: User-entered transaction data

        Returns:
            The stored transaction, with its assigned id

        Raises:
            StorageError: If the write fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageConnectionError(StorageError):
    """Could not reach the storage backend."""
    pass
