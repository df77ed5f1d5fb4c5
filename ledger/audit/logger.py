"""
Audit Logger

DESIGN DECISION: Every load, save and rejection is logged.
This provides:
1. Traceability of the append-only history
2. Debugging capability when a view cannot be built
3. A record of refused save attempts

The audit logger:
- Is async so it fits the flows that call it
- Gracefully handles failures (a failed audit write never breaks a flow)
- Supports correlation IDs to trace related events
"""

from typing import Any, Optional
from uuid import UUID, uuid4

import structlog

from ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from ledger.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger(__name__)

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_transactions_loaded(
        self,
        count: int,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.transactions_loaded(
            count=count,
            correlation_id=correlation_id,
        ))

    async def log_view_built(
        self,
        mode: str,
        bucket_count: int,
        closing_balance: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.ledger_view_built(
            mode=mode,
            bucket_count=bucket_count,
            closing_balance=closing_balance,
            correlation_id=correlation_id,
        ))

    async def log_invalid_mode(
        self,
        mode: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.invalid_grouping_mode(
            mode=mode,
            correlation_id=correlation_id,
        ))

    async def log_malformed_transaction(
        self,
        error_message: str,
        record: Any,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.malformed_transaction(
            error_message=error_message,
            record=record,
            correlation_id=correlation_id,
        ))

    async def log_transaction_saved(
        self,
        transaction_id: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.transaction_saved(
            transaction_id=transaction_id,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_save_rejected(
        self,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.save_rejected(
            reason=reason,
            correlation_id=correlation_id,
        ))

    async def log_storage_error(
        self,
        operation: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        await self.log(AuditEventBuilder.storage_error(
            operation=operation,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a page load).
    Pass it through all subsequent operations.
    """
    return uuid4()
