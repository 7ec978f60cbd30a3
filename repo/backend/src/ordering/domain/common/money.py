from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Non-negative amount in cents precision.

    Amounts with finer precision than cents are rejected rather than rounded,
    so a stored subtotal always reads back exactly as given.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValueError("amount must be a Decimal")
        if not self.amount.is_finite():
            raise ValueError("amount must be finite")
        if self.amount < 0:
            raise ValueError("amount must be >= 0")
        try:
            cents = self.amount.quantize(_CENTS)
        except InvalidOperation as exc:
            raise ValueError(f"amount out of range: {self.amount}") from exc
        if cents != self.amount:
            raise ValueError(f"amount has more than two decimal places: {self.amount}")
        object.__setattr__(self, "amount", cents)

    @classmethod
    def of(cls, value: Decimal | int | str) -> Money:
        try:
            amount = value if isinstance(value, Decimal) else Decimal(str(value))
        except InvalidOperation as exc:
            raise ValueError(f"invalid amount: {value!r}") from exc
        return cls(amount=amount)

    @classmethod
    def zero(cls) -> Money:
        return cls(amount=Decimal("0"))

    def __add__(self, other: Money) -> Money:
        return Money(amount=self.amount + other.amount)

    def __str__(self) -> str:
        return str(self.amount)
