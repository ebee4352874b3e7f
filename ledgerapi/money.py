"""Monetary amounts held as integer minor units."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Currency(str, Enum):
    """Supported currencies."""

    THB = "THB"
    USD = "USD"

    def __str__(self) -> str:
        return self.value


class CurrencyMismatchError(ValueError):
    """Raised when arithmetic mixes two different currencies."""


@dataclass(frozen=True)
class Money:
    """An amount in minor units (cents, satang) and its currency.

    Integer minor units keep arithmetic free of floating-point error.
    """

    amount: int
    currency: Currency

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_negative(self) -> bool:
        return self.amount < 0

    def is_positive(self) -> bool:
        return self.amount > 0

    def add(self, other: Money) -> Money:
        """Return the sum; both amounts must share a currency."""
        if self.currency != other.currency:
            raise CurrencyMismatchError("cannot add money with different currencies")
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: Money) -> Money:
        """Return the difference; both amounts must share a currency."""
        if self.currency != other.currency:
            raise CurrencyMismatchError("cannot subtract money with different currencies")
        return Money(self.amount - other.amount, self.currency)

    def to_float(self) -> float:
        """Return the amount in major units."""
        return self.amount / 100

    def __str__(self) -> str:
        return f"{self.to_float():.2f} {_currency_code(self.currency)}"

    __add__ = add
    __sub__ = subtract


def _currency_code(currency: Currency | str) -> str:
    return currency.value if isinstance(currency, Currency) else str(currency)