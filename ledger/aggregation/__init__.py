"""Transaction aggregation and running-balance package."""

from ledger.aggregation.aggregator import (
    aggregate,
    coerce_transaction,
    coerce_transactions,
    resolve_mode,
    total_of,
)
from ledger.aggregation.errors import (
    InvalidModeError,
    LedgerError,
    MalformedTransactionError,
)
from ledger.aggregation.periods import PERIOD_STRATEGIES, Period
from ledger.aggregation.series import (
    as_entry,
    build_series,
    closing_balance,
    fold_entry,
)

__all__ = [
    "aggregate",
    "as_entry",
    "build_series",
    "closing_balance",
    "coerce_transaction",
    "coerce_transactions",
    "fold_entry",
    "resolve_mode",
    "total_of",
    # Calendar strategies
    "PERIOD_STRATEGIES",
    "Period",
    # Errors
    "InvalidModeError",
    "LedgerError",
    "MalformedTransactionError",
]
