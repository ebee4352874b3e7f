# ledgerapi

A small account and transaction management library built on the Python
standard library alone (Python 3.10 or newer). It provides:

- **Money** values held as whole minor units (cents, satang) with a currency.
- **Accounts** that can be debited, credited, blocked and reactivated.
- **Transactions** (deposit, withdraw, transfer) with a pending → completed /
  failed / cancelled life cycle.
- **Repositories** over a SQLite connection, with plain and paginated queries.
- A **seeder** that fills an empty database with sample accounts and
  transactions.
- A minimal **WSGI router** with route groups and path parameters.

## Money

`ledgerapi.money.Money` is an immutable value of an integer `amount` and a
`Currency` (`Currency.THB` or `Currency.USD`).

```python
from ledgerapi.money import Money, Currency, CurrencyMismatchError

price = Money(12345, Currency.USD)
print(price)             # 123.45 USD
price.to_float()         # 123.45

total = price.add(Money(55, Currency.USD))        # Money(12400, USD)
change = price - Money(345, Currency.USD)         # same as price.subtract(...)

try:
    price.add(Money(100, Currency.THB))
except CurrencyMismatchError as exc:
    print(exc)           # cannot add money with different currencies
```

`is_zero()`, `is_negative()` and `is_positive()` test the sign of the amount.
`CurrencyMismatchError` is a `ValueError`.

## Accounts

```python
from ledgerapi.account import new_account, AccountNotActiveError, InsufficientFundsError
from ledgerapi.money import Money, Currency

account = new_account("ACC100", "Example Holder", Money(10000, Currency.USD))
account.debit(Money(2500, Currency.USD))     # balance 7500
account.credit(Money(500, Currency.USD))     # balance 8000

account.block()
try:
    account.debit(Money(100, Currency.USD))
except AccountNotActiveError as exc:
    print(exc)           # account is not active

account.activate()
try:
    account.debit(Money(1_000_000, Currency.USD))
except InsufficientFundsError as exc:
    print(exc)           # insufficient funds
```

A new account is `AccountStatus.ACTIVE`; the other statuses are `INACTIVE`
and `BLOCKED`. Debits and credits are refused unless the account is active,
and a debit larger than the balance is refused; in both cases the balance is
left unchanged. Only the amount of the money passed in is used, its currency
is not compared with the balance's. Both errors derive from `AccountError`.
Every change refreshes the account's `updated_at` timestamp.

## Transactions

```python
from ledgerapi.transaction import (
    new_deposit_transaction,
    new_withdraw_transaction,
    new_transfer_transaction,
    TransactionStatus,
)

deposit = new_deposit_transaction(account.id, Money(5000, Currency.USD), "Salary")
deposit.set_reference("REF-0001")
deposit.complete()
assert deposit.status is TransactionStatus.COMPLETED
assert deposit.processed_at is not None
```

A deposit sets only `to_account_id`, a withdrawal only `from_account_id`, a
transfer both. A new transaction is pending; `complete()` and `fail()` record
when it was processed, `cancel()` does not. `new_transaction` creates one of
any `TransactionType` with neither account set.

## Storage

Storage is SQLite. `ledgerapi.database.open_database` takes a connection
string of the form `sqlite:///relative.db`, `sqlite:////absolute/path.db`,
`sqlite:///:memory:` or a bare file path. When the string is empty, the
`CONNECTION_STRINGS_DEFAULT` environment variable is used instead. The
database file is created if it does not exist, and foreign keys are enabled.

```python
from ledgerapi.database import create_db_initializer

with create_db_initializer("sqlite:///ledger.db") as initializer:
    initializer.init()   # creates the account and transaction tables
    initializer.seed()   # adds sample data if there are no accounts yet
    connection = initializer.connection
    ...
```

`open_database`, `create_db_initializer` and `init()` raise `DatabaseError`
when no connection string is given, the scheme is not `sqlite`, the path is
empty, the connection fails, or the tables cannot be created. `seed()` (and
`ledgerapi.seed.Seeder.seed_data`) does nothing when accounts already exist,
and raises `RuntimeError` naming the step that failed otherwise. The sample
data itself is available from `sample_accounts(now)` and
`sample_transactions(accounts, now)` in `ledgerapi.seed`.

`ledgerapi.repository_base.migrate(connection)` creates the tables on any
open connection.

### Repositories

```python
from ledgerapi.account_repository import AccountRepository
from ledgerapi.transaction_repository import TransactionRepository
from ledgerapi.repository_base import PaginationRequest, RecordNotFoundError
from ledgerapi.account import AccountStatus

accounts = AccountRepository(connection)
page = accounts.find_by_status_paginated(AccountStatus.ACTIVE, PaginationRequest(page=1, page_size=10))
print(page.total, page.total_pages, [a.number for a in page.data])

matches = accounts.find_by_holder_name("smith")   # substring match
by_number = accounts.find_by_number("ACC100")

transactions = TransactionRepository(connection)
history = transactions.find_by_account_id(account.id)   # newest first
```

Every repository offers `get_by_id`, `get_all`, `get_paginated`, `create`,
`update` (insert or replace by id) and `delete` (a missing id is not an
error). `create` raises `sqlite3.IntegrityError` on a duplicate id, account
number or transaction reference.

`AccountRepository` adds `find_by_number`, `find_by_status`,
`find_by_holder_name` and paginated forms of the last two. Holder names are
matched with SQLite `LIKE`, which ignores case for ASCII letters.

`TransactionRepository` adds `find_by_account_id`, `find_by_status`,
`find_by_type`, `find_by_reference` and `find_by_date_range(start, end)`
(both ends inclusive), with paginated forms of all but `find_by_reference`.
Its list queries return the newest transactions first.

Lookups of a single record raise `RecordNotFoundError` (a `LookupError`) when
nothing matches. A `PaginationResponse` carries `data`, `page`, `page_size`,
`total` and `total_pages`; a page number or page size of zero or less falls
back to page 1 and a page size of 10.

## Routing

`ledgerapi.router.Router` is a WSGI application:

```python
from ledgerapi.router import Router

def health(request):
    return {"status": "ok", "message": "Server is running"}

def get_account(request):
    return 200, {"id": request.params["id"]}

router = Router()
v1 = router.group("/api/v1")
v1.group("/health").get("", health)
v1.group("/accounts").get("/:id", get_account)

router.start(":8080")   # serves with wsgiref until interrupted
```

Paths may hold `:name` segments and a final `*name` catch-all; literal
segments win over parameters. A handler receives a request with `method`,
`path`, `params`, `query` (as from `urllib.parse.parse_qs`), `body`,
`environ` and a `json()` method, and returns a payload or a
`(status, payload)` pair: dicts and lists are sent as JSON, `str` as text,
`bytes` as they are, and `None` as an empty body. Unknown paths get a 404; a
path that matches only with or without a trailing slash is redirected. An
exception in a handler is logged and answered with an empty 500. Each request
is logged through the `logging` module. Registering the same method and path
shape twice raises `ValueError`.

`register_routes` and `register_group_routes` let a module attach its routes
with a single function, and any WSGI server can serve the router directly.

## What is not included

The package has no command-line program and ships no HTTP endpoints of its
own: the router starts with no routes, so handlers for accounts and
transactions (creating, listing, processing or cancelling them over HTTP)
have to be written by the application. There is no generated API
documentation. Storage is SQLite only; other database servers are not
supported.

## Running the tests

Install the `test` extra and run pytest from the project directory.