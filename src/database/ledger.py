"""
Lightweight in-memory transaction ledger for local development.

Accepts "append transaction" calls and assigns the id and timestamp itself.
It is NOT intended for production use; a real ledger only needs to provide
`add_transaction`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
import uuid

from src.integrations.contracts.interfaces import LedgerEntry, Transaction, TransactionStatus


class InMemoryTransactionLedger:
    def __init__(self) -> None:
        self._entries: List[LedgerEntry] = []

    def add_transaction(self, transaction: Transaction) -> LedgerEntry:
        entry = LedgerEntry(
            id=str(uuid.uuid4()),
            amount=transaction.amount,
            type=transaction.type,
            status=transaction.status,
            details=transaction.details,
            timestamp=datetime.now(timezone.utc),
        )
        self._entries.append(entry)
        return entry

    def get_transaction(self, transaction_id: str) -> Optional[LedgerEntry]:
        return next((e for e in self._entries if e.id == transaction_id), None)

    def list_transactions(self, status: Optional[TransactionStatus] = None) -> List[LedgerEntry]:
        """Newest first, optionally filtered by status."""
        entries = [e for e in self._entries if status is None or e.status == status]
        return list(reversed(entries))

    def __len__(self) -> int:
        return len(self._entries)
