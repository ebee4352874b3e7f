"""Bank accounts and the balance rules that govern them."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from ledgerapi.money import Money
from ledgerapi.transaction import Transaction


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"

    def __str__(self) -> str:
        return self.value


class AccountError(Exception):
    """Base class for account rule violations."""


class AccountNotActiveError(AccountError):
    def __init__(self) -> None:
        super().__init__("account is not active")


class InsufficientFundsError(AccountError):
    def __init__(self) -> None:
        super().__init__("insufficient funds")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Account:
    """An account holding a balance for one holder."""

    number: str
    holder_name: str
    balance: Money
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    status: AccountStatus = AccountStatus.ACTIVE
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
    transactions: list[Transaction] = field(default_factory=list)

    def _require_active(self) -> None:
        if self.status != AccountStatus.ACTIVE:
            raise AccountNotActiveError()

    def debit(self, amount: Money) -> None:
        """Take ``amount`` from the balance.

        Raises AccountNotActiveError or InsufficientFundsError; the balance
        is unchanged when either is raised.
        """
        self._require_active()
        if self.balance.amount < amount.amount:
            raise InsufficientFundsError()
        self.balance = Money(self.balance.amount - amount.amount, self.balance.currency)
        self.updated_at = _utcnow()

    def credit(self, amount: Money) -> None:
        """Add ``amount`` to the balance; raises AccountNotActiveError."""
        self._require_active()
        self.balance = Money(self.balance.amount + amount.amount, self.balance.currency)
        self.updated_at = _utcnow()

    def block(self) -> None:
        self.status = AccountStatus.BLOCKED
        self.updated_at = _utcnow()

    def activate(self) -> None:
        self.status = AccountStatus.ACTIVE
        self.updated_at = _utcnow()


def new_account(number: str, holder_name: str, initial_balance: Money) -> Account:
    """Create an active account with a fresh id and timestamps."""
    now = _utcnow()
    return Account(
        number=number,
        holder_name=holder_name,
        balance=initial_balance,
        created_at=now,
        updated_at=now,
    )