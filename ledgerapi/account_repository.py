"""Storage and queries for accounts."""

from __future__ import annotations

import uuid
from typing import Any, Mapping

from ledgerapi.account import Account, AccountStatus
from ledgerapi.money import Currency, Money
from ledgerapi.repository_base import PaginationRequest, PaginationResponse, SqlRepository

_BY_STATUS = "status = ?"
_BY_HOLDER = "holder_name LIKE ?"


class AccountRepository(SqlRepository[Account]):
    """Accounts stored in the ``accounts`` table."""

    table = "accounts"
    columns = (
        "id",
        "number",
        "holder_name",
        "amount",
        "currency",
        "status",
        "created_at",
        "updated_at",
    )

    def _to_row(self, entity: Account) -> Mapping[str, Any]:
        return {
            "id": str(entity.id),
            "number": entity.number,
            "holder_name": entity.holder_name,
            "amount": entity.balance.amount,
            "currency": str(entity.balance.currency),
            "status": AccountStatus(entity.status).value,
            "created_at": self._encode_time(entity.created_at),
            "updated_at": self._encode_time(entity.updated_at),
        }

    def _from_row(self, row: Mapping[str, Any]) -> Account:
        return Account(
            id=uuid.UUID(row["id"]),
            number=row["number"],
            holder_name=row["holder_name"],
            balance=Money(row["amount"], Currency(row["currency"])),
            status=AccountStatus(row["status"]),
            created_at=self._decode_time(row["created_at"]),
            updated_at=self._decode_time(row["updated_at"]),
        )

    @staticmethod
    def _holder_pattern(holder_name: str) -> str:
        return f"%{holder_name}%"

    def find_by_number(self, number: str) -> Account:
        """Return the account with this number; raises RecordNotFoundError."""
        return self._first("number = ?", [number])

    def find_by_status(self, status: AccountStatus) -> list[Account]:
        return self._query(_BY_STATUS, [AccountStatus(status).value])

    def find_by_status_paginated(
        self, status: AccountStatus, request: PaginationRequest | None = None
    ) -> PaginationResponse[Account]:
        return self._paginate(request, _BY_STATUS, [AccountStatus(status).value])

    def find_by_holder_name(self, holder_name: str) -> list[Account]:
        """Accounts whose holder name contains ``holder_name``, ignoring case."""
        return self._query(_BY_HOLDER, [self._holder_pattern(holder_name)])

    def find_by_holder_name_paginated(
        self, holder_name: str, request: PaginationRequest | None = None
    ) -> PaginationResponse[Account]:
        return self._paginate(request, _BY_HOLDER, [self._holder_pattern(holder_name)])