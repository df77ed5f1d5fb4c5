"""
Transaction Aggregator

Groups a flat transaction list into calendar buckets and computes
the net amount of each bucket.

GUARANTEES:
- Every transaction lands in exactly one bucket
- Aggregated modes come back in ascending calendar order,
  whatever order the caller supplied
- Mode NONE comes back most-recent-first (reverse of input order)
- Amounts are summed as Decimals in encounter order, never rounded here
"""

from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from pydantic import ValidationError

from ledger.aggregation.errors import InvalidModeError, MalformedTransactionError
from ledger.aggregation.periods import PERIOD_STRATEGIES, Period
from ledger.models.transaction import Bucket, DateRange, GroupingMode, Transaction


ModeLike = Union[GroupingMode, str, None]


def resolve_mode(mode: ModeLike) -> GroupingMode:
    """
    Resolve a grouping selector value to a GroupingMode.

    None and the empty string mean "no grouping", which is what an
    unselected grouping control submits. Anything else that is not one
    of the five mode values raises InvalidModeError.
    """
    if isinstance(mode, GroupingMode):
        return mode
    if mode is None or mode == "":
        return GroupingMode.NONE
    try:
        return GroupingMode(mode)
    except (ValueError, TypeError):
        raise InvalidModeError(mode) from None


def _describe_errors(exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "record"
        messages.append(f"{location}: {error['msg']}")
    return messages


def coerce_transaction(record: Any) -> Transaction:
    """
    Validate a raw record (e.g. decoded JSON) into a Transaction.

    Raises MalformedTransactionError instead of letting an unparseable
    date or non-finite amount through.
    """
    if isinstance(record, Transaction):
        return record
    try:
        return Transaction.model_validate(record)
    except ValidationError as e:
        errors = _describe_errors(e)
        raise MalformedTransactionError(
            record,
            "Malformed transaction: " + "; ".join(errors),
            errors,
        ) from e


def coerce_transactions(records: Iterable[Any]) -> list[Transaction]:
    return [coerce_transaction(record) for record in records]


def _ungrouped(transactions: list[Transaction]) -> list[Bucket]:
    return [
        Bucket(
            key=t.date.isoformat(),
            amount=t.amount,
            range=DateRange(start=t.date, end=t.date),
            count=1,
        )
        for t in reversed(transactions)
    ]


def aggregate(
    transactions: Iterable[Any],
    mode: ModeLike = GroupingMode.NONE,
) -> list[Bucket]:
    """
    Group transactions into buckets for the given mode.

    Args:
        transactions: Transaction models or mappings with
                      id/amount/description/date fields
        mode: GroupingMode, its string value, or None for no grouping

    Returns:
        For NONE, one bucket per transaction in reverse input order.
        Otherwise one bucket per non-empty period, ascending by start date.

    Raises:
        InvalidModeError: mode is not recognized
        MalformedTransactionError: a record cannot be validated
    """
    grouping = resolve_mode(mode)
    records = coerce_transactions(transactions)

    if not grouping.is_aggregated:
        return _ungrouped(records)

    period_for = PERIOD_STRATEGIES.get(grouping)
    if period_for is None:
        raise InvalidModeError(mode)

    # key -> [period, running amount, transaction count]
    groups: dict[str, list] = {}
    for transaction in records:
        period: Period = period_for(transaction.date)
        group: Optional[list] = groups.get(period.key)
        if group is None:
            group = groups[period.key] = [period, Decimal("0"), 0]
        group[1] += transaction.amount
        group[2] += 1

    buckets = [
        Bucket(
            key=period.key,
            amount=amount,
            range=DateRange(start=period.start, end=period.end),
            count=count,
        )
        for period, amount, count in groups.values()
    ]
    return sorted(buckets, key=lambda bucket: bucket.range.start)


def total_of(buckets: Iterable[Bucket]) -> Decimal:
    """Sum of bucket amounts."""
    return sum((bucket.amount for bucket in buckets), Decimal("0"))
