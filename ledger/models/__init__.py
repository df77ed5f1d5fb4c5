"""
Data Models Package

This package contains all Pydantic models used in the Personal Ledger.
All data flowing through the system must conform to these schemas.
"""

from ledger.models.transaction import (
    BalanceInterval,
    Bucket,
    DateRange,
    GroupingMode,
    IntervalSign,
    LedgerRow,
    NewTransaction,
    RowKind,
    SeriesEntry,
    Transaction,
)
from ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger models
    "BalanceInterval",
    "Bucket",
    "DateRange",
    "GroupingMode",
    "IntervalSign",
    "LedgerRow",
    "NewTransaction",
    "RowKind",
    "SeriesEntry",
    "Transaction",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
