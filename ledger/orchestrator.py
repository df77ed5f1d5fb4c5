"""
Main Orchestrator for Personal Ledger

This module ties together all the components and defines the
end-to-end flows for:
1. Viewing (load → table rows → aggregate → balance series → chart)
2. Entry (password check → append → audit)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is appended without the save password
- Invalid modes and malformed records fail loudly, never default
- Every step is audited
"""

import hmac
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from ledger.aggregation import (
    InvalidModeError,
    MalformedTransactionError,
    aggregate,
    build_series,
    closing_balance,
    resolve_mode,
)
from ledger.aggregation.aggregator import ModeLike
from ledger.audit import AuditLogger, create_correlation_id
from ledger.config import get_settings
from ledger.models.transaction import (
    BalanceInterval,
    Bucket,
    GroupingMode,
    LedgerRow,
    NewTransaction,
    Transaction,
)
from ledger.presentation import (
    ChartData,
    build_chart_data,
    build_table_rows,
    format_amount,
    total_amount,
)
from ledger.services.storage import (
    InMemoryAuditStorage,
    InMemoryTransactionStorage,
    JsonFileTransactionStorage,
    JsonLinesAuditStorage,
    StorageError,
    TransactionStorageInterface,
)


class PasswordRejectedError(Exception):
    """Save refused: wrong password, or no save password configured."""
    pass


class LedgerView(BaseModel):
    """Everything the page needs to draw the table and the chart."""
    model_config = ConfigDict(frozen=True)

    mode: GroupingMode
    rows: list[LedgerRow]
    total: Decimal
    buckets: list[Bucket]
    series: list[BalanceInterval]
    chart: ChartData

    @property
    def closing_balance(self) -> Decimal:
        return closing_balance(self.series)


def build_view(
    transactions: list[Transaction],
    mode: ModeLike,
    currency_symbol: str,
) -> LedgerView:
    """
    Assemble a ledger view from an already loaded history.

    The table always lists transactions most-recent-first. Aggregated
    buckets already come back in calendar order; ungrouped buckets come
    back most-recent-first and are put back into entry order so the
    running balance is charted oldest to newest.
    """
    grouping = resolve_mode(mode)
    rows = build_table_rows(transactions)
    buckets = aggregate(transactions, grouping)
    chart_entries = buckets if grouping.is_aggregated else buckets[::-1]
    series = build_series(chart_entries)
    return LedgerView(
        mode=grouping,
        rows=rows,
        total=total_amount(rows),
        buckets=buckets,
        series=series,
        chart=build_chart_data(series, currency_symbol),
    )


class LedgerViewFlow:
    """
    Orchestrates reading the ledger.

    Flow:
    1. Resolve the grouping mode (reject unknown modes up front)
    2. Load the full history from storage
    3. Build table rows, buckets, balance series and chart payload
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        currency_symbol: Optional[str] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        self._currency_symbol = currency_symbol or get_settings().app.currency_symbol

    @property
    def currency_symbol(self) -> str:
        return self._currency_symbol

    async def load_view(
        self,
        mode: ModeLike = GroupingMode.NONE,
        correlation_id: Optional[UUID] = None,
    ) -> LedgerView:
        correlation_id = correlation_id or create_correlation_id()

        try:
            grouping = resolve_mode(mode)
        except InvalidModeError:
            if self._audit_logger:
                await self._audit_logger.log_invalid_mode(
                    mode=str(mode),
                    correlation_id=correlation_id,
                )
            raise

        try:
            transactions = await self._storage.load_transactions()
        except MalformedTransactionError as e:
            if self._audit_logger:
                await self._audit_logger.log_malformed_transaction(
                    error_message=str(e),
                    record=e.record,
                    correlation_id=correlation_id,
                )
            raise
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="load",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_transactions_loaded(
                count=len(transactions),
                correlation_id=correlation_id,
            )

        view = build_view(transactions, grouping, self._currency_symbol)

        if self._audit_logger:
            await self._audit_logger.log_view_built(
                mode=grouping.value,
                bucket_count=len(view.buckets),
                closing_balance=format_amount(view.closing_balance),
                correlation_id=correlation_id,
            )

        return view


class TransactionEntryFlow:
    """
    Orchestrates appending a transaction.

    The password is checked before storage is touched. A rejected
    save is audited and raised; the caller decides what to tell the user.
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        save_password: Optional[str] = None,
    ):
        self._storage = storage
        self._audit_logger = audit_logger
        if save_password is None:
            configured = get_settings().storage.save_password
            save_password = configured.get_secret_value() if configured else ""
        self._save_password = save_password

    def _check_password(self, password: Optional[str]) -> Optional[str]:
        """Return the rejection reason, or None when the password matches."""
        if not self._save_password:
            return "no save password configured"
        if not password or not hmac.compare_digest(
            password.encode("utf-8"),
            self._save_password.encode("utf-8"),
        ):
            return "incorrect password"
        return None

    async def add_transaction(
        self,
        new: NewTransaction,
        password: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Append a transaction after checking the save password.

        Raises:
            PasswordRejectedError: password missing or wrong
            StorageError: the append failed
        """
        correlation_id = correlation_id or create_correlation_id()

        reason = self._check_password(password)
        if reason:
            if self._audit_logger:
                await self._audit_logger.log_save_rejected(
                    reason=reason,
                    correlation_id=correlation_id,
                )
            raise PasswordRejectedError(f"Save rejected: {reason}")

        try:
            transaction = await self._storage.append_transaction(new)
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_storage_error(
                    operation="append",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_transaction_saved(
                transaction_id=transaction.id,
                amount=format_amount(transaction.amount),
                correlation_id=correlation_id,
            )

        return transaction


def create_app_components(
    use_storage: bool = True,
) -> tuple[LedgerViewFlow, TransactionEntryFlow]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use the configured JSON files.
                    Set to False to run against in-memory storage.

    Returns:
        (ledger_view_flow, transaction_entry_flow)
    """
    if use_storage:
        transaction_storage = JsonFileTransactionStorage()
        audit_logger = AuditLogger(JsonLinesAuditStorage())
    else:
        transaction_storage = InMemoryTransactionStorage()
        audit_logger = AuditLogger(InMemoryAuditStorage())

    view_flow = LedgerViewFlow(
        storage=transaction_storage,
        audit_logger=audit_logger,
    )
    entry_flow = TransactionEntryFlow(
        storage=transaction_storage,
        audit_logger=audit_logger,
    )

    return view_flow, entry_flow
