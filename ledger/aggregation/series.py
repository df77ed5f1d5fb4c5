"""
Balance-Series Builder

Turns an ordered stream of (label, amount) entries into cumulative
[start, end] intervals for a waterfall chart.

DESIGN DECISION: The running total is an explicit accumulator that is
passed into and returned from fold_entry. build_series starts it at zero
on every call, so repeated calls never observe a stale balance.
Entries are consumed in exactly the order given; ordering them is the
caller's job (aggregate() already returns chronological buckets).
"""

from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Iterable, Union

from pydantic import ValidationError

from ledger.aggregation.errors import MalformedTransactionError
from ledger.models.transaction import (
    BalanceInterval,
    Bucket,
    IntervalSign,
    SeriesEntry,
    Transaction,
)


EntryLike = Union[SeriesEntry, Bucket, Transaction, Mapping]


def as_entry(entry: Any) -> SeriesEntry:
    """Normalize a bucket, transaction or {label, amount} mapping."""
    if isinstance(entry, SeriesEntry):
        return entry
    if isinstance(entry, Bucket):
        return SeriesEntry(label=entry.key, amount=entry.amount)
    if isinstance(entry, Transaction):
        return SeriesEntry(label=entry.date.isoformat(), amount=entry.amount)
    try:
        return SeriesEntry.model_validate(entry)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in error['loc']) or 'entry'}: {error['msg']}"
            for error in e.errors()
        ]
        raise MalformedTransactionError(
            entry,
            "Malformed series entry: " + "; ".join(errors),
            errors,
        ) from e


def fold_entry(
    running_total: Decimal,
    entry: EntryLike,
) -> tuple[BalanceInterval, Decimal]:
    """
    Apply one entry to the running total.

    Returns the interval for the entry and the new running total.
    """
    entry = as_entry(entry)
    start = running_total
    end = start + entry.amount
    interval = BalanceInterval(
        label=entry.label,
        start=start,
        end=end,
        sign=IntervalSign.between(start, end),
    )
    return interval, end


def build_series(entries: Iterable[EntryLike]) -> list[BalanceInterval]:
    """
    Build the cumulative balance series for entries in the given order.

    The first interval starts at zero and each later interval starts
    where the previous one ended. Empty input gives an empty series.
    """
    series: list[BalanceInterval] = []
    running_total = Decimal("0")
    for entry in entries:
        interval, running_total = fold_entry(running_total, entry)
        series.append(interval)
    return series


def closing_balance(series: list[BalanceInterval]) -> Decimal:
    """Balance after the last interval, zero for an empty series."""
    return series[-1].end if series else Decimal("0")
