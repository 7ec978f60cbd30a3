from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class OrderLineResponse(BaseModel):
    lineId: int
    productId: int
    quantity: int
    subtotal: Decimal


class OrderResponse(BaseModel):
    orderId: int
    userId: int
    restaurantId: int
    status: str
    type: str
    createdAt: datetime
    lines: list[OrderLineResponse] = Field(default_factory=list)
    total: Decimal


class OrderListResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)


class DeleteOrderResponse(BaseModel):
    orderId: int
    deleted: bool
