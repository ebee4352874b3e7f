"""Transactions that move money into, out of, or between accounts."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from ledgerapi.money import Money


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"
    TRANSFER = "transfer"

    def __str__(self) -> str:
        return self.value


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Transaction:
    """A single money movement and its processing state."""

    type: TransactionType
    amount: Money
    description: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    status: TransactionStatus = TransactionStatus.PENDING
    from_account_id: uuid.UUID | None = None
    to_account_id: uuid.UUID | None = None
    reference: str = ""
    processed_at: datetime | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def complete(self) -> None:
        """Mark as completed and record when it was processed."""
        now = _utcnow()
        self.status = TransactionStatus.COMPLETED
        self.processed_at = now
        self.updated_at = now

    def fail(self) -> None:
        """Mark as failed and record when it was processed."""
        now = _utcnow()
        self.status = TransactionStatus.FAILED
        self.processed_at = now
        self.updated_at = now

    def cancel(self) -> None:
        """Mark as cancelled; the processing time is left untouched."""
        self.status = TransactionStatus.CANCELLED
        self.updated_at = _utcnow()

    def set_reference(self, ref: str) -> None:
        self.reference = ref
        self.updated_at = _utcnow()


def new_transaction(tx_type: TransactionType, amount: Money, description: str) -> Transaction:
    """Create a pending transaction with a fresh id and timestamps."""
    now = _utcnow()
    return Transaction(
        type=tx_type,
        amount=amount,
        description=description,
        created_at=now,
        updated_at=now,
    )


def new_deposit_transaction(
    to_account_id: uuid.UUID, amount: Money, description: str
) -> Transaction:
    tx = new_transaction(TransactionType.DEPOSIT, amount, description)
    tx.to_account_id = to_account_id
    return tx


def new_withdraw_transaction(
    from_account_id: uuid.UUID, amount: Money, description: str
) -> Transaction:
    tx = new_transaction(TransactionType.WITHDRAW, amount, description)
    tx.from_account_id = from_account_id
    return tx


def new_transfer_transaction(
    from_account_id: uuid.UUID,
    to_account_id: uuid.UUID,
    amount: Money,
    description: str,
) -> Transaction:
    tx = new_transaction(TransactionType.TRANSFER, amount, description)
    tx.from_account_id = from_account_id
    tx.to_account_id = to_account_id
    return tx