"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document is the storage backend because:
1. A personal ledger holds at most a few thousand rows
2. The file can be read and backed up by hand
3. The whole history is read on every load anyway

Layout of the transactions file:

    {"transactions": [{"id": ..., "amount": "12.50", "description": ..., "date": ...}]}

Writes go to a temporary file that then replaces the original, so a
crash mid-write never leaves a half-written history behind.
"""

import json
import os
import tempfile
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union
from uuid import uuid4

import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ledger.aggregation import coerce_transactions
from ledger.config import get_settings
from ledger.models.audit import AuditEvent
from ledger.models.transaction import NewTransaction, Transaction
from ledger.services.storage.interface import (
    AuditStorageInterface,
    StorageConnectionError,
    StorageError,
    TransactionStorageInterface,
)


logger = structlog.get_logger(__name__)

TRANSACTIONS_KEY = "transactions"

io_retry = retry(
    retry=retry_if_exception_type(OSError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
    reraise=True,
)


@io_retry
def _read_text(path: Path) -> Optional[str]:
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")


@io_retry
def _write_text_atomic(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except OSError:
        Path(tmp_name).unlink(missing_ok=True)
        raise


@io_retry
def _append_line(path: Path, line: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as handle:
        handle.write(line + "\n")


class JsonFileTransactionStorage(TransactionStorageInterface):
    """
    Transaction history kept in one JSON file.

    A missing file is an empty ledger. It is created on the first append.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._path = Path(path or get_settings().storage.transactions_path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_records(self) -> list:
        try:
            text = _read_text(self._path)
        except OSError as e:
            raise StorageConnectionError(
                f"Could not read transactions file {self._path}: {e}"
            ) from e

        if text is None or not text.strip():
            return []

        try:
            document = json.loads(text, parse_float=Decimal)
        except json.JSONDecodeError as e:
            raise StorageError(
                f"Transactions file {self._path} is not valid JSON: {e}"
            ) from e

        records = document.get(TRANSACTIONS_KEY) if isinstance(document, dict) else None
        if not isinstance(records, list):
            raise StorageError(
                f"Transactions file {self._path} has no '{TRANSACTIONS_KEY}' list"
            )
        return records

    async def load_transactions(self) -> list[Transaction]:
        records = self._read_records()
        transactions = coerce_transactions(records)
        logger.debug("transactions_read", path=str(self._path), count=len(transactions))
        return transactions

    async def append_transaction(self, new: NewTransaction) -> Transaction:
        records = self._read_records()
        transaction = new.with_id(uuid4().hex)
        records.append(transaction.to_record())

        try:
            _write_text_atomic(
                self._path,
                json.dumps({TRANSACTIONS_KEY: records}, ensure_ascii=False, indent=2),
            )
        except OSError as e:
            raise StorageError(f"Failed to save transaction: {e}") from e

        logger.info(
            "transaction_appended",
            path=str(self._path),
            transaction_id=transaction.id,
        )
        return transaction


class JsonLinesAuditStorage(AuditStorageInterface):
    """Audit log kept as one JSON object per line."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self._path = Path(path or get_settings().storage.audit_log_path)

    async def append_event(self, event: AuditEvent) -> bool:
        try:
            _append_line(self._path, event.to_json_line())
            return True
        except OSError as e:
            # Don't raise - audit logging should not break the main flow
            logger.error(
                "audit_append_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        if limit <= 0:
            return []

        try:
            text = _read_text(self._path)
        except OSError as e:
            raise StorageConnectionError(
                f"Could not read audit log {self._path}: {e}"
            ) from e

        if not text:
            return []

        events = []
        for line in reversed(text.splitlines()):
            if not line.strip():
                continue
            try:
                events.append(AuditEvent.model_validate(json.loads(line)))
            except ValueError:
                logger.warning("audit_line_skipped", path=str(self._path))
                continue
            if len(events) >= limit:
                break
        return events
