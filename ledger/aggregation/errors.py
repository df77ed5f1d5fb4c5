"""
Aggregation Errors

Both errors are caller errors, not transient conditions.
They are raised synchronously and never retried or defaulted away.
"""

from typing import Any, Optional


class LedgerError(Exception):
    """Base exception for the aggregation engine."""
    pass


class InvalidModeError(LedgerError, ValueError):
    """Grouping mode is not one of the recognized values."""

    def __init__(self, mode: Any):
        self.mode = mode
        super().__init__(
            f"Invalid grouping mode: {mode!r}. "
            "Expected one of: none, day, week, month, year"
        )


class MalformedTransactionError(LedgerError, ValueError):
    """A record has an unparseable date, a non-finite amount or a missing field."""

    def __init__(
        self,
        record: Any,
        message: str,
        errors: Optional[list[str]] = None,
    ):
        self.record = record
        self.errors = errors or []
        super().__init__(message)
