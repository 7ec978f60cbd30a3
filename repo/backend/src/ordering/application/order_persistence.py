from __future__ import annotations

import logging
from typing import Callable, TypeVar

from ordering.application.metrics.order_store import (
    record_order_created,
    record_order_deleted,
    record_store_failure,
)
from ordering.application.ports.repositories import OrderStore, PersistenceError, StorageBackend
from ordering.domain.common.ids import OrderId
from ordering.domain.order.entities import Order, OrderDraft, validate_draft

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OrderPersistence:
    """Backend-agnostic entry point for order persistence.

    The store is bound once at construction and never swapped. Both store
    variants return the same ``Order`` shape; every storage failure reaches
    callers as ``PersistenceError`` and invalid drafts are rejected with
    ``OrderValidationError`` before the store is touched.
    """

    def __init__(self, store: OrderStore, backend: StorageBackend) -> None:
        self._store = store
        self.backend = backend

    def create(self, draft: OrderDraft) -> Order:
        validate_draft(draft)
        order = self._call("create", lambda: self._store.create(draft))
        record_order_created(self.backend.value)
        logger.info(
            "order_created",
            extra={
                "order_id": order.order_id,
                "backend": self.backend.value,
                "line_count": len(order.lines),
            },
        )
        return order

    def list_all(self) -> list[Order]:
        return self._call("list_all", self._store.list_all)

    def find_by_id(self, order_id: OrderId) -> Order | None:
        return self._call("find_by_id", lambda: self._store.find_by_id(order_id))

    def delete_by_id(self, order_id: OrderId) -> bool:
        deleted = self._call("delete_by_id", lambda: self._store.delete_by_id(order_id))
        if deleted:
            record_order_deleted(self.backend.value)
        logger.info(
            "order_deleted" if deleted else "order_delete_noop",
            extra={"order_id": order_id, "backend": self.backend.value},
        )
        return deleted

    def ping(self) -> bool:
        try:
            return self._store.ping()
        except Exception:
            logger.exception("order_store_ping_failed", extra={"backend": self.backend.value})
            return False

    def _call(self, operation: str, action: Callable[[], T]) -> T:
        try:
            return action()
        except PersistenceError:
            self._record_failure(operation)
            raise
        except (TimeoutError, OSError) as exc:
            self._record_failure(operation)
            raise PersistenceError(f"order store {operation} failed: {exc}") from exc

    def _record_failure(self, operation: str) -> None:
        record_store_failure(self.backend.value, operation)
        logger.exception(
            "order_store_failed",
            extra={"backend": self.backend.value, "operation": operation},
        )
