from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ordering.domain.common.ids import OrderId
from ordering.domain.order.entities import Order


@dataclass(frozen=True)
class OrderCreated:
    order: Order
    occurred_at: datetime


@dataclass(frozen=True)
class OrderDeleted:
    order_id: OrderId
    occurred_at: datetime
