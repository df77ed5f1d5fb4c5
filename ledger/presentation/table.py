"""
Ledger Table

Builds the rows of the transaction table, its running total and the
free-text row search.

The table always lists the most recent transaction first. The display
index counts down from the number of transactions, so the oldest row
is #1 and a new transaction gets the next number.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ledger.models.transaction import LedgerRow, Transaction


ID_PREFIX = "#"
CENTS = Decimal("0.01")


def build_table_rows(transactions: Iterable[Transaction]) -> list[LedgerRow]:
    """Rows in reverse input order with a countdown display index."""
    ordered = list(transactions)
    total = len(ordered)
    return [
        LedgerRow.from_transaction(total - position, transaction)
        for position, transaction in enumerate(reversed(ordered))
    ]


def total_amount(rows: Iterable[LedgerRow]) -> Decimal:
    return sum((row.amount for row in rows), Decimal("0"))


def format_amount(amount: Decimal) -> str:
    """
    Two decimal places, no symbol; the form shown in the amount column.

    Halves round away from zero, so 0.125 shows as 0.13.
    """
    return f"{amount.quantize(CENTS, rounding=ROUND_HALF_UP):f}"


def format_money(amount: Decimal, currency_symbol: str) -> str:
    return f"{currency_symbol} {format_amount(amount)}"


def _matches(row: LedgerRow, needle: str) -> bool:
    haystack = (
        str(row.index),
        format_amount(row.amount),
        row.description.lower(),
        row.date.isoformat(),
    )
    return any(needle in field for field in haystack)


def search_rows(
    rows: Iterable[LedgerRow],
    query: str,
    currency_symbol: str,
) -> list[LedgerRow]:
    """
    Filter rows by a case-insensitive substring.

    "#12" matches the display index only, "<symbol>40" matches the
    formatted amount only, anything else matches index, amount,
    description or date. An empty query keeps every row.
    """
    rows = list(rows)
    needle = query.strip().lower()
    if not needle:
        return rows

    if needle.startswith(ID_PREFIX):
        index_filter = needle[len(ID_PREFIX):]
        return [row for row in rows if index_filter in str(row.index)]

    symbol = currency_symbol.lower()
    if symbol and needle.startswith(symbol):
        amount_filter = needle[len(symbol):]
        return [row for row in rows if amount_filter in format_amount(row.amount)]

    return [row for row in rows if _matches(row, needle)]
