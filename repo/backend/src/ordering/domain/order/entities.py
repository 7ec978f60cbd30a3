from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum

from ordering.domain.common.ids import (
    MAX_ID,
    OrderId,
    OrderLineId,
    ProductId,
    RestaurantId,
    UserId,
)
from ordering.domain.common.money import Money

# Column limits: INTEGER quantity, NUMERIC(10, 2) subtotal.
MAX_QUANTITY = MAX_ID
MAX_SUBTOTAL = Decimal("99999999.99")


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class OrderType(str, Enum):
    DINE_IN = "dine-in"
    DELIVERY = "delivery"
    TAKEOUT = "takeout"


class OrderValidationError(Exception):
    pass


@dataclass(frozen=True)
class OrderLineDraft:
    product_id: ProductId
    quantity: int
    subtotal: Money


@dataclass(frozen=True)
class OrderDraft:
    """Caller input for a new order; identifiers and timestamp are assigned by the store."""

    user_id: UserId
    restaurant_id: RestaurantId
    type: OrderType
    lines: tuple[OrderLineDraft, ...]
    status: OrderStatus = OrderStatus.PENDING


@dataclass(frozen=True)
class OrderLine:
    line_id: OrderLineId
    product_id: ProductId
    quantity: int
    subtotal: Money


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    user_id: UserId
    restaurant_id: RestaurantId
    status: OrderStatus
    type: OrderType
    created_at: datetime
    lines: tuple[OrderLine, ...] = field(default_factory=tuple)

    @property
    def total(self) -> Money:
        total = Money.zero()
        for line in self.lines:
            total = total + line.subtotal
        return total

    def with_lines(self, lines: list[OrderLine]) -> Order:
        return replace(self, lines=tuple(lines))


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_id(value: object, label: str) -> None:
    if not _is_int(value) or value < 1:
        raise OrderValidationError(f"{label} must be a positive integer")
    if value > MAX_ID:
        raise OrderValidationError(f"{label} must be <= {MAX_ID}")


def validate_draft(draft: OrderDraft) -> None:
    _check_id(draft.user_id, "user_id")
    _check_id(draft.restaurant_id, "restaurant_id")
    if not isinstance(draft.status, OrderStatus):
        raise OrderValidationError(f"unknown order status: {draft.status!r}")
    if not isinstance(draft.type, OrderType):
        raise OrderValidationError(f"unknown order type: {draft.type!r}")
    if not draft.lines:
        raise OrderValidationError("order must contain at least one line")

    for position, line in enumerate(draft.lines):
        _check_id(line.product_id, f"line {position}: product_id")
        if not _is_int(line.quantity) or line.quantity < 1:
            raise OrderValidationError(f"line {position}: quantity must be >= 1")
        if line.quantity > MAX_QUANTITY:
            raise OrderValidationError(f"line {position}: quantity must be <= {MAX_QUANTITY}")
        if not isinstance(line.subtotal, Money):
            raise OrderValidationError(f"line {position}: subtotal must be a Money amount")
        if line.subtotal.amount > MAX_SUBTOTAL:
            raise OrderValidationError(f"line {position}: subtotal must be <= {MAX_SUBTOTAL}")
