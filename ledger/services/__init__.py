"""Services package."""

from ledger.services.storage import (
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryTransactionStorage,
    JsonFileTransactionStorage,
    JsonLinesAuditStorage,
    StorageConnectionError,
    StorageError,
    TransactionStorageInterface,
)

__all__ = [
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "InMemoryTransactionStorage",
    "JsonFileTransactionStorage",
    "JsonLinesAuditStorage",
    "StorageConnectionError",
    "StorageError",
    "TransactionStorageInterface",
]
