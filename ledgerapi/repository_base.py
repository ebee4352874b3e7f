"""Generic SQLite-backed repository with pagination support."""

from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, ClassVar, Generic, Mapping, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

_SCHEMA = """
CREATE TABLE IF NOT EXISTS accounts (
    id TEXT PRIMARY KEY,
    number TEXT NOT NULL,
    holder_name TEXT NOT NULL,
    amount INTEGER NOT NULL,
    currency TEXT NOT NULL,
    status TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE UNIQUE INDEX IF NOT EXISTS idx_accounts_number ON accounts (number);

CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    type TEXT NOT NULL,
    status TEXT NOT NULL,
    amount INTEGER NOT NULL,
    currency TEXT NOT NULL,
    from_account_id TEXT REFERENCES accounts (id),
    to_account_id TEXT REFERENCES accounts (id),
    description TEXT NOT NULL,
    reference TEXT NOT NULL,
    processed_at TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_transactions_from_account_id ON transactions (from_account_id);
CREATE INDEX IF NOT EXISTS idx_transactions_to_account_id ON transactions (to_account_id);
CREATE UNIQUE INDEX IF NOT EXISTS idx_transactions_reference ON transactions (reference);
"""


def migrate(connection: sqlite3.Connection) -> None:
    """Create the account and transaction tables and their indexes if missing."""
    connection.executescript(_SCHEMA)


class RecordNotFoundError(LookupError):
    """Raised when a lookup that expects one record finds none."""

    def __init__(self, message: str = "record not found") -> None:
        super().__init__(message)


@dataclass(frozen=True)
class PaginationRequest:
    """Which page to fetch; values below one fall back to the defaults."""

    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class PaginationResponse(Generic[T]):
    """One page of results together with totals over the whole query."""

    data: list[T]
    page: int
    page_size: int
    total: int
    total_pages: int


def _normalize(request: PaginationRequest | None) -> tuple[int, int]:
    request = request or PaginationRequest()
    page = request.page if request.page > 0 else DEFAULT_PAGE
    page_size = request.page_size if request.page_size > 0 else DEFAULT_PAGE_SIZE
    return page, page_size


def _quote(name: str) -> str:
    return f'"{name}"'


class SqlRepository(ABC, Generic[T]):
    """CRUD operations over one table, mapping rows to entities.

    Subclasses name the table and its columns (the key column among them)
    and convert between entities and rows.
    """

    table: ClassVar[str]
    columns: ClassVar[tuple[str, ...]]
    key_column: ClassVar[str] = "id"

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    @abstractmethod
    def _to_row(self, entity: T) -> Mapping[str, Any]:
        """Return the column values for ``entity``."""

    @abstractmethod
    def _from_row(self, row: Mapping[str, Any]) -> T:
        """Build an entity from a row keyed by column name."""

    @staticmethod
    def _encode_key(value: Any) -> Any:
        return str(value)

    @staticmethod
    def _encode_time(value: datetime | None) -> str | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(timespec="microseconds")

    @staticmethod
    def _decode_time(value: str | None) -> datetime | None:
        return None if value is None else datetime.fromisoformat(value)

    def _query(
        self,
        where: str = "",
        params: Sequence[Any] = (),
        order: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[T]:
        sql = f"SELECT {', '.join(map(_quote, self.columns))} FROM {_quote(self.table)}"
        args = list(params)
        if where:
            sql += f" WHERE {where}"
        if order:
            sql += f" ORDER BY {order}"
        if limit is not None:
            sql += " LIMIT ? OFFSET ?"
            args += [limit, offset]
        rows = self._connection.execute(sql, args).fetchall()
        return [self._from_row(dict(zip(self.columns, row))) for row in rows]

    def _count(self, where: str = "", params: Sequence[Any] = ()) -> int:
        sql = f"SELECT COUNT(*) FROM {_quote(self.table)}"
        if where:
            sql += f" WHERE {where}"
        (total,) = self._connection.execute(sql, list(params)).fetchone()
        return total

    def _first(self, where: str, params: Sequence[Any]) -> T:
        found = self._query(where, params, limit=1)
        if not found:
            raise RecordNotFoundError()
        return found[0]

    def _paginate(
        self,
        request: PaginationRequest | None,
        where: str = "",
        params: Sequence[Any] = (),
        order: str | None = None,
    ) -> PaginationResponse[T]:
        page, page_size = _normalize(request)
        total = self._count(where, params)
        data = self._query(
            where, params, order, limit=page_size, offset=(page - 1) * page_size
        )
        return PaginationResponse(
            data=data,
            page=page,
            page_size=page_size,
            total=total,
            total_pages=-(-total // page_size),
        )

    def get_by_id(self, entity_id: Any) -> T:
        """Return the entity with this key; raises RecordNotFoundError."""
        return self._first(f"{_quote(self.key_column)} = ?", [self._encode_key(entity_id)])

    def get_all(self) -> list[T]:
        return self._query()

    def get_paginated(self, request: PaginationRequest | None = None) -> PaginationResponse[T]:
        return self._paginate(request)

    def create(self, entity: T) -> None:
        """Insert a new row; raises sqlite3.IntegrityError on a key clash."""
        row = self._to_row(entity)
        names = ", ".join(map(_quote, self.columns))
        marks = ", ".join("?" for _ in self.columns)
        with self._connection:
            self._connection.execute(
                f"INSERT INTO {_quote(self.table)} ({names}) VALUES ({marks})",
                [row[c] for c in self.columns],
            )

    def update(self, entity: T) -> None:
        """Save the entity, inserting it if its key is not yet stored."""
        row = self._to_row(entity)
        names = ", ".join(map(_quote, self.columns))
        marks = ", ".join("?" for _ in self.columns)
        assignments = ", ".join(
            f"{_quote(c)} = excluded.{_quote(c)}" for c in self.columns if c != self.key_column
        )
        with self._connection:
            self._connection.execute(
                f"INSERT INTO {_quote(self.table)} ({names}) VALUES ({marks}) "
                f"ON CONFLICT ({_quote(self.key_column)}) DO UPDATE SET {assignments}",
                [row[c] for c in self.columns],
            )

    def delete(self, entity_id: Any) -> None:
        """Remove the entity with this key; a missing key is not an error."""
        with self._connection:
            self._connection.execute(
                f"DELETE FROM {_quote(self.table)} WHERE {_quote(self.key_column)} = ?",
                [self._encode_key(entity_id)],
            )