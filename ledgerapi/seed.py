"""Sample accounts and transactions for an empty database."""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timedelta

from ledgerapi.account import Account, AccountStatus
from ledgerapi.account_repository import AccountRepository
from ledgerapi.money import Currency, Money
from ledgerapi.repository_base import PaginationRequest
from ledgerapi.transaction import (
    Transaction,
    new_deposit_transaction,
    new_transfer_transaction,
    new_withdraw_transaction,
)
from ledgerapi.transaction_repository import TransactionRepository

log = logging.getLogger(__name__)

_SAMPLE_ACCOUNTS = (
    ("ACC001", "John Doe", 100000, Currency.THB, AccountStatus.ACTIVE, 30),
    ("ACC002", "Jane Smith", 250000, Currency.THB, AccountStatus.ACTIVE, 25),
    ("ACC003", "Bob Johnson", 50000, Currency.USD, AccountStatus.ACTIVE, 20),
    ("ACC004", "Alice Brown", 75000, Currency.THB, AccountStatus.ACTIVE, 15),
    ("ACC005", "Charlie Wilson", 0, Currency.THB, AccountStatus.INACTIVE, 10),
)


def sample_accounts(now: datetime) -> list[Account]:
    """Return the five sample accounts, back-dated relative to ``now``."""
    accounts = []
    for number, holder, amount, currency, status, days in _SAMPLE_ACCOUNTS:
        created = now - timedelta(days=days)
        accounts.append(
            Account(
                number=number,
                holder_name=holder,
                balance=Money(amount, currency),
                status=status,
                created_at=created,
                updated_at=created,
            )
        )
    return accounts


def _backdate(tx: Transaction, reference: str, created: datetime) -> Transaction:
    tx.reference = reference
    tx.created_at = created
    tx.updated_at = created
    return tx


def sample_transactions(accounts: list[Account], now: datetime) -> list[Transaction]:
    """Return sample transactions between the first four of ``accounts``.

    Raises ValueError when fewer than four accounts are given.
    """
    if len(accounts) < 4:
        raise ValueError("at least four accounts are needed for sample transactions")
    john, jane, bob, alice = accounts[:4]

    def days_ago(days: int) -> datetime:
        return now - timedelta(days=days)

    deposit = _backdate(
        new_deposit_transaction(john.id, Money(50000, Currency.THB), "Initial deposit"),
        "TXN001",
        days_ago(29),
    )
    deposit.complete()

    withdrawal = _backdate(
        new_withdraw_transaction(jane.id, Money(25000, Currency.THB), "ATM withdrawal"),
        "TXN002",
        days_ago(24),
    )
    withdrawal.complete()

    transfer = _backdate(
        new_transfer_transaction(
            jane.id, john.id, Money(10000, Currency.THB), "Payment for services"
        ),
        "TXN003",
        days_ago(20),
    )
    transfer.complete()

    pending = _backdate(
        new_deposit_transaction(bob.id, Money(15000, Currency.USD), "Pending deposit"),
        "TXN004",
        days_ago(2),
    )

    failed = _backdate(
        new_withdraw_transaction(
            alice.id, Money(100000, Currency.THB), "Failed withdrawal attempt"
        ),
        "TXN005",
        days_ago(5),
    )
    failed.fail()

    cancelled = _backdate(
        new_transfer_transaction(
            john.id, jane.id, Money(5000, Currency.THB), "Cancelled transfer"
        ),
        "TXN006",
        days_ago(7),
    )
    cancelled.cancel()

    return [deposit, withdrawal, transfer, pending, failed, cancelled]


class Seeder:
    """Fills an empty database with sample data."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._accounts = AccountRepository(connection)
        self._transactions = TransactionRepository(connection)

    def seed_data(self) -> None:
        """Insert the samples unless accounts already exist.

        Raises RuntimeError naming the step that failed.
        """
        log.info("Starting database seeding...")

        try:
            count = self._accounts.get_paginated(PaginationRequest(page_size=1)).total
        except sqlite3.Error as exc:
            raise RuntimeError(f"failed to count accounts: {exc}") from exc

        if count > 0:
            log.info("Database already contains %d accounts. Skipping seeding.", count)
            return

        now = datetime.now().astimezone()
        accounts = sample_accounts(now)
        for account in accounts:
            try:
                self._accounts.create(account)
            except sqlite3.Error as exc:
                raise RuntimeError(
                    f"failed to create account {account.number}: {exc}"
                ) from exc
            log.info("Created account: %s (%s)", account.number, account.holder_name)

        for tx in sample_transactions(accounts, now):
            try:
                self._transactions.create(tx)
            except sqlite3.Error as exc:
                raise RuntimeError(
                    f"failed to create transaction {tx.reference}: {exc}"
                ) from exc
            log.info("Created transaction: %s (%s)", tx.reference, tx.type)

        log.info("Database seeding completed successfully!")