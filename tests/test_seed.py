import sqlite3
from datetime import datetime, timedelta, timezone

import pytest

from ledgerapi.account import AccountStatus
from ledgerapi.account_repository import AccountRepository
from ledgerapi.money import Currency, Money
from ledgerapi.repository_base import migrate
from ledgerapi.seed import Seeder, sample_accounts, sample_transactions
from ledgerapi.transaction import TransactionStatus, TransactionType
from ledgerapi.transaction_repository import TransactionRepository

NOW = datetime(2024, 1, 31, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    migrate(conn)
    yield conn
    conn.close()


def test_sample_accounts_numbers_and_holders():
    accounts = sample_accounts(NOW)
    assert [(a.number, a.holder_name) for a in accounts] == [
        ("ACC001", "John Doe"),
        ("ACC002", "Jane Smith"),
        ("ACC003", "Bob Johnson"),
        ("ACC004", "Alice Brown"),
        ("ACC005", "Charlie Wilson"),
    ]


def test_sample_accounts_balances_and_statuses():
    accounts = sample_accounts(NOW)
    assert [a.balance for a in accounts] == [
        Money(100000, Currency.THB),
        Money(250000, Currency.THB),
        Money(50000, Currency.USD),
        Money(75000, Currency.THB),
        Money(0, Currency.THB),
    ]
    assert [a.status for a in accounts] == [AccountStatus.ACTIVE] * 4 + [
        AccountStatus.INACTIVE
    ]


def test_sample_accounts_are_backdated():
    accounts = sample_accounts(NOW)
    assert [NOW - a.created_at for a in accounts] == [
        timedelta(days=d) for d in (30, 25, 20, 15, 10)
    ]
    assert all(a.created_at == a.updated_at for a in accounts)
    assert len({a.id for a in accounts}) == len(accounts)


def test_sample_transactions_references_types_and_statuses():
    txs = sample_transactions(sample_accounts(NOW), NOW)
    assert [t.reference for t in txs] == [
        "TXN001", "TXN002", "TXN003", "TXN004", "TXN005", "TXN006",
    ]
    assert [t.type for t in txs] == [
        TransactionType.DEPOSIT,
        TransactionType.WITHDRAW,
        TransactionType.TRANSFER,
        TransactionType.DEPOSIT,
        TransactionType.WITHDRAW,
        TransactionType.TRANSFER,
    ]
    assert [t.status for t in txs] == [
        TransactionStatus.COMPLETED,
        TransactionStatus.COMPLETED,
        TransactionStatus.COMPLETED,
        TransactionStatus.PENDING,
        TransactionStatus.FAILED,
        TransactionStatus.CANCELLED,
    ]


def test_sample_transactions_link_accounts():
    john, jane, bob, alice, _ = sample_accounts(NOW)
    txs = sample_transactions([john, jane, bob, alice], NOW)
    deposit, withdrawal, transfer, pending, failed, cancelled = txs
    assert (deposit.from_account_id, deposit.to_account_id) == (None, john.id)
    assert (withdrawal.from_account_id, withdrawal.to_account_id) == (jane.id, None)
    assert (transfer.from_account_id, transfer.to_account_id) == (jane.id, john.id)
    assert pending.to_account_id == bob.id
    assert failed.from_account_id == alice.id
    assert (cancelled.from_account_id, cancelled.to_account_id) == (john.id, jane.id)


def test_sample_transactions_processing_times():
    txs = sample_transactions(sample_accounts(NOW), NOW)
    by_ref = {t.reference: t for t in txs}
    assert by_ref["TXN004"].processed_at is None
    assert by_ref["TXN006"].processed_at is None
    assert by_ref["TXN001"].processed_at is not None and by_ref["TXN001"].processed_at > NOW
    assert NOW - by_ref["TXN001"].created_at == timedelta(days=29)
    assert NOW - by_ref["TXN004"].updated_at == timedelta(days=2)


def test_sample_transactions_need_four_accounts():
    with pytest.raises(ValueError):
        sample_transactions(sample_accounts(NOW)[:3], NOW)


def test_seed_data_populates_empty_database(connection):
    Seeder(connection).seed_data()
    accounts = AccountRepository(connection).get_all()
    txs = TransactionRepository(connection).get_all()
    assert sorted(a.number for a in accounts) == [a.number for a in sample_accounts(NOW)]
    assert sorted(t.reference for t in txs) == [
        t.reference for t in sample_transactions(sample_accounts(NOW), NOW)
    ]


def test_seeded_transfer_points_at_stored_accounts(connection):
    Seeder(connection).seed_data()
    accounts = AccountRepository(connection)
    transfer = TransactionRepository(connection).find_by_reference("TXN003")
    assert accounts.get_by_id(transfer.from_account_id).holder_name == "Jane Smith"
    assert accounts.get_by_id(transfer.to_account_id).holder_name == "John Doe"
    assert transfer.amount == Money(10000, Currency.THB)


def test_seed_data_twice_adds_nothing(connection):
    seeder = Seeder(connection)
    seeder.seed_data()
    first = len(AccountRepository(connection).get_all())
    seeder.seed_data()
    assert len(AccountRepository(connection).get_all()) == first
    assert len(TransactionRepository(connection).get_all()) == len(
        sample_transactions(sample_accounts(NOW), NOW)
    )


def test_seed_data_skips_non_empty_database(connection):
    repo = AccountRepository(connection)
    existing = sample_accounts(NOW)[0]
    repo.create(existing)
    Seeder(connection).seed_data()
    assert [a.id for a in repo.get_all()] == [existing.id]
    assert TransactionRepository(connection).get_all() == []


def test_seed_data_without_tables_fails():
    conn = sqlite3.connect(":memory:")
    with pytest.raises(RuntimeError, match="failed to count accounts"):
        Seeder(conn).seed_data()
    conn.close()