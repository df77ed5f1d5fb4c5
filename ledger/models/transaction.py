"""
Core Data Models for Personal Ledger

These models define the schemas for all data flowing through the ledger:
transactions as they come out of storage, and the derived buckets,
balance intervals and table rows built from them.

DESIGN DECISION: Derived models are frozen.
They are constructed fresh per call and handed to the caller,
so nothing downstream can alter a bucket or interval in place.
"""

from datetime import date as date_type
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class GroupingMode(str, Enum):
    """
    Time granularity used to bucket transactions.

    NONE keeps one entry per transaction (most-recent-first).
    The other modes merge transactions sharing a calendar period.
    """
    NONE = "none"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def is_aggregated(self) -> bool:
        return self is not GroupingMode.NONE


class IntervalSign(str, Enum):
    """Direction of one balance interval."""
    POSITIVE = "positive"
    NEGATIVE = "negative"

    @classmethod
    def between(cls, start: Decimal, end: Decimal) -> "IntervalSign":
        # A zero change counts as positive
        return cls.POSITIVE if end >= start else cls.NEGATIVE


class RowKind(str, Enum):
    """Table row styling: income versus expense."""
    SUCCESS = "success"
    DANGER = "danger"


def _reject_numeric_date(v: Any) -> Any:
    """Only ISO strings and date objects are calendar dates here."""
    if isinstance(v, bool) or isinstance(v, (int, float)):
        raise ValueError(f"Expected an ISO-8601 calendar date, got {v!r}")
    if isinstance(v, datetime):
        return v.date()
    return v


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(BaseModel):
    """
    A single signed ledger entry as supplied by storage.

    Positive amounts are income, negative amounts are spending.
    The id is opaque; uniqueness within a loaded set is the
    caller's responsibility and is not checked here.
    """
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque transaction identifier"
    )
    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        description="Signed amount"
    )
    description: str = Field(
        default="",
        description="Free-text description"
    )
    date: date_type = Field(
        ...,
        description="Calendar date of the transaction"
    )

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, v: Any) -> Any:
        return _reject_numeric_date(v)

    def to_record(self) -> dict:
        """
        Convert to the JSON shape used by the data file.

        The amount is written as a decimal string so it reads back exact.
        """
        return {
            "id": self.id,
            "amount": str(self.amount),
            "description": self.description,
            "date": self.date.isoformat(),
        }


class NewTransaction(BaseModel):
    """
    User-entered data for a transaction that is about to be appended.

    Storage assigns the id when the transaction is saved.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    amount: Decimal = Field(
        ...,
        allow_inf_nan=False,
        description="Signed amount"
    )
    description: str = Field(
        default="",
        max_length=500,
        description="Free-text description"
    )
    date: date_type = Field(
        default_factory=date_type.today,
        description="Calendar date of the transaction"
    )

    @field_validator('date', mode='before')
    @classmethod
    def validate_date(cls, v: Any) -> Any:
        return _reject_numeric_date(v)

    def with_id(self, transaction_id: str) -> Transaction:
        return Transaction(
            id=transaction_id,
            amount=self.amount,
            description=self.description,
            date=self.date,
        )


# =============================================================================
# AGGREGATION MODELS
# =============================================================================

class DateRange(BaseModel):
    """Inclusive calendar bounds of a bucket."""
    model_config = ConfigDict(frozen=True)

    start: date_type
    end: date_type

    @model_validator(mode='after')
    def validate_order(self) -> 'DateRange':
        if self.end < self.start:
            raise ValueError("Range end cannot be before start")
        return self


class Bucket(BaseModel):
    """
    Net amount of all transactions sharing one calendar period.

    Only periods with at least one transaction produce a bucket.
    """
    model_config = ConfigDict(frozen=True)

    key: str = Field(
        ...,
        description="Canonical period identifier, e.g. 2024-02 for a month"
    )
    amount: Decimal = Field(
        ...,
        description="Sum of the signed amounts in this period"
    )
    range: DateRange
    count: int = Field(
        default=1,
        ge=1,
        description="Number of transactions in this bucket"
    )


class SeriesEntry(BaseModel):
    """One (label, amount) pair fed to the balance-series builder."""
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    label: str = Field(..., min_length=1)
    amount: Decimal = Field(..., allow_inf_nan=False)


class BalanceInterval(BaseModel):
    """
    One entry's contribution to the running balance.

    start is the balance before the entry, end the balance after it.
    A waterfall chart draws this as a floating bar from start to end.
    """
    model_config = ConfigDict(frozen=True)

    label: str
    start: Decimal
    end: Decimal
    sign: IntervalSign

    @property
    def amount(self) -> Decimal:
        """Net change contributed by this interval."""
        return self.end - self.start


# =============================================================================
# TABLE MODELS
# =============================================================================

class LedgerRow(BaseModel):
    """A transaction as shown in the ledger table."""
    model_config = ConfigDict(frozen=True)

    index: int = Field(
        ...,
        ge=1,
        description="1-based display index, highest for the most recent row"
    )
    id: str
    amount: Decimal
    description: str
    date: date_type
    kind: RowKind

    @classmethod
    def from_transaction(cls, index: int, transaction: Transaction) -> 'LedgerRow':
        return cls(
            index=index,
            id=transaction.id,
            amount=transaction.amount,
            description=transaction.description,
            date=transaction.date,
            kind=RowKind.DANGER if transaction.amount < 0 else RowKind.SUCCESS,
        )
