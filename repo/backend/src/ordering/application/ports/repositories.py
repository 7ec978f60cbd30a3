from __future__ import annotations

from enum import Enum
from typing import Protocol

from ordering.domain.common.ids import OrderId
from ordering.domain.order.entities import Order, OrderDraft


class OrderStore(Protocol):
    def create(self, draft: OrderDraft) -> Order: ...

    def list_all(self) -> list[Order]: ...

    def find_by_id(self, order_id: OrderId) -> Order | None: ...

    def delete_by_id(self, order_id: OrderId) -> bool: ...

    def ping(self) -> bool: ...


class PersistenceError(Exception):
    """Storage-layer failure; the original driver error is chained as ``__cause__``."""


class StorageBackend(str, Enum):
    RELATIONAL = "relational"
    DOCUMENT = "document"
