"""Storage and queries for transactions."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Mapping

from ledgerapi.money import Currency, Money
from ledgerapi.repository_base import PaginationRequest, PaginationResponse, SqlRepository
from ledgerapi.transaction import Transaction, TransactionStatus, TransactionType

_NEWEST_FIRST = "created_at DESC"
_BY_ACCOUNT = "from_account_id = ? OR to_account_id = ?"
_BY_STATUS = "status = ?"
_BY_TYPE = "type = ?"
_BY_DATES = "created_at >= ? AND created_at <= ?"


def _optional_uuid(value: str | None) -> uuid.UUID | None:
    return None if value is None else uuid.UUID(value)


def _optional_str(value: uuid.UUID | None) -> str | None:
    return None if value is None else str(value)


class TransactionRepository(SqlRepository[Transaction]):
    """Transactions stored in the ``transactions`` table.

    Every query except lookups by key or reference returns the newest first.
    """

    table = "transactions"
    columns = (
        "id",
        "type",
        "status",
        "amount",
        "currency",
        "from_account_id",
        "to_account_id",
        "description",
        "reference",
        "processed_at",
        "created_at",
        "updated_at",
    )

    def _to_row(self, entity: Transaction) -> Mapping[str, Any]:
        return {
            "id": str(entity.id),
            "type": TransactionType(entity.type).value,
            "status": TransactionStatus(entity.status).value,
            "amount": entity.amount.amount,
            "currency": str(entity.amount.currency),
            "from_account_id": _optional_str(entity.from_account_id),
            "to_account_id": _optional_str(entity.to_account_id),
            "description": entity.description,
            "reference": entity.reference,
            "processed_at": self._encode_time(entity.processed_at),
            "created_at": self._encode_time(entity.created_at),
            "updated_at": self._encode_time(entity.updated_at),
        }

    def _from_row(self, row: Mapping[str, Any]) -> Transaction:
        return Transaction(
            id=uuid.UUID(row["id"]),
            type=TransactionType(row["type"]),
            status=TransactionStatus(row["status"]),
            amount=Money(row["amount"], Currency(row["currency"])),
            from_account_id=_optional_uuid(row["from_account_id"]),
            to_account_id=_optional_uuid(row["to_account_id"]),
            description=row["description"],
            reference=row["reference"],
            processed_at=self._decode_time(row["processed_at"]),
            created_at=self._decode_time(row["created_at"]),
            updated_at=self._decode_time(row["updated_at"]),
        )

    def _dates(self, start: datetime, end: datetime) -> list[str | None]:
        return [self._encode_time(start), self._encode_time(end)]

    def find_by_account_id(self, account_id: uuid.UUID) -> list[Transaction]:
        """Transactions where the account is the source or the destination."""
        key = str(account_id)
        return self._query(_BY_ACCOUNT, [key, key], _NEWEST_FIRST)

    def find_by_account_id_paginated(
        self, account_id: uuid.UUID, request: PaginationRequest | None = None
    ) -> PaginationResponse[Transaction]:
        key = str(account_id)
        return self._paginate(request, _BY_ACCOUNT, [key, key], _NEWEST_FIRST)

    def find_by_status(self, status: TransactionStatus) -> list[Transaction]:
        return self._query(_BY_STATUS, [TransactionStatus(status).value], _NEWEST_FIRST)

    def find_by_status_paginated(
        self, status: TransactionStatus, request: PaginationRequest | None = None
    ) -> PaginationResponse[Transaction]:
        return self._paginate(
            request, _BY_STATUS, [TransactionStatus(status).value], _NEWEST_FIRST
        )

    def find_by_type(self, tx_type: TransactionType) -> list[Transaction]:
        return self._query(_BY_TYPE, [TransactionType(tx_type).value], _NEWEST_FIRST)

    def find_by_type_paginated(
        self, tx_type: TransactionType, request: PaginationRequest | None = None
    ) -> PaginationResponse[Transaction]:
        return self._paginate(
            request, _BY_TYPE, [TransactionType(tx_type).value], _NEWEST_FIRST
        )

    def find_by_reference(self, reference: str) -> Transaction:
        """Return the transaction with this reference; raises RecordNotFoundError."""
        return self._first("reference = ?", [reference])

    def find_by_date_range(self, start: datetime, end: datetime) -> list[Transaction]:
        """Transactions created between ``start`` and ``end``, both inclusive."""
        return self._query(_BY_DATES, self._dates(start, end), _NEWEST_FIRST)

    def find_by_date_range_paginated(
        self, start: datetime, end: datetime, request: PaginationRequest | None = None
    ) -> PaginationResponse[Transaction]:
        return self._paginate(request, _BY_DATES, self._dates(start, end), _NEWEST_FIRST)