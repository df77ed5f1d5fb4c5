"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
The JSON file backend is the default; the in-memory backend serves tests.
"""

from ledger.services.storage.interface import (
    AuditStorageInterface,
    StorageConnectionError,
    StorageError,
    TransactionStorageInterface,
)
from ledger.services.storage.json_file import (
    JsonFileTransactionStorage,
    JsonLinesAuditStorage,
)
from ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryTransactionStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "TransactionStorageInterface",
    # Exceptions
    "StorageConnectionError",
    "StorageError",
    # JSON file implementation
    "JsonFileTransactionStorage",
    "JsonLinesAuditStorage",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryTransactionStorage",
]
