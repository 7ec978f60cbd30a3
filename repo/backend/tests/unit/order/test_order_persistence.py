from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
from prometheus_client import REGISTRY

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from ordering.application.order_persistence import OrderPersistence
from ordering.application.ports.repositories import PersistenceError, StorageBackend
from ordering.domain.common.ids import OrderId, OrderLineId, ProductId, RestaurantId, UserId
from ordering.domain.common.money import Money
from ordering.domain.order.entities import (
    Order,
    OrderDraft,
    OrderLine,
    OrderLineDraft,
    OrderType,
    OrderValidationError,
)


class RecordingOrderStore:
    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[str] = []
        self._error = error
        self._orders: dict[int, Order] = {}

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        if self._error is not None:
            raise self._error

    def create(self, draft: OrderDraft) -> Order:
        self._maybe_fail("create")
        order = Order(
            order_id=OrderId(len(self._orders) + 1),
            user_id=draft.user_id,
            restaurant_id=draft.restaurant_id,
            status=draft.status,
            type=draft.type,
            created_at=datetime.now(timezone.utc),
            lines=tuple(
                OrderLine(OrderLineId(i), line.product_id, line.quantity, line.subtotal)
                for i, line in enumerate(draft.lines, start=1)
            ),
        )
        self._orders[order.order_id] = order
        return order

    def list_all(self) -> list[Order]:
        self._maybe_fail("list_all")
        return list(self._orders.values())

    def find_by_id(self, order_id: OrderId) -> Order | None:
        self._maybe_fail("find_by_id")
        return self._orders.get(order_id)

    def delete_by_id(self, order_id: OrderId) -> bool:
        self._maybe_fail("delete_by_id")
        return self._orders.pop(order_id, None) is not None

    def ping(self) -> bool:
        self._maybe_fail("ping")
        return True


def _draft(quantity: int = 1) -> OrderDraft:
    return OrderDraft(
        user_id=UserId(7),
        restaurant_id=RestaurantId(3),
        type=OrderType.TAKEOUT,
        lines=(OrderLineDraft(ProductId(1), quantity, Money.of("1.50")),),
    )


def _sample(name: str, **labels: str) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_invalid_draft_never_reaches_the_store() -> None:
    store = RecordingOrderStore()
    persistence = OrderPersistence(store=store, backend=StorageBackend.RELATIONAL)

    with pytest.raises(OrderValidationError):
        persistence.create(_draft(quantity=0))

    assert store.calls == []


def test_create_delegates_and_counts() -> None:
    store = RecordingOrderStore()
    persistence = OrderPersistence(store=store, backend=StorageBackend.DOCUMENT)
    before = _sample("ordering_orders_created_total", backend="document")

    order = persistence.create(_draft())

    assert store.calls == ["create"]
    assert order.order_id == 1
    assert _sample("ordering_orders_created_total", backend="document") == before + 1


def test_persistence_error_propagates_unchanged_and_is_counted() -> None:
    original = PersistenceError("constraint violated")
    persistence = OrderPersistence(
        store=RecordingOrderStore(error=original),
        backend=StorageBackend.RELATIONAL,
    )
    before = _sample(
        "ordering_store_failures_total", backend="relational", operation="create"
    )

    with pytest.raises(PersistenceError) as exc_info:
        persistence.create(_draft())

    assert exc_info.value is original
    assert (
        _sample("ordering_store_failures_total", backend="relational", operation="create")
        == before + 1
    )


@pytest.mark.parametrize("error", [TimeoutError("timed out"), ConnectionResetError("reset")])
def test_driver_timeouts_surface_as_persistence_error(error: Exception) -> None:
    persistence = OrderPersistence(
        store=RecordingOrderStore(error=error),
        backend=StorageBackend.DOCUMENT,
    )

    with pytest.raises(PersistenceError) as exc_info:
        persistence.find_by_id(OrderId(1))

    assert exc_info.value.__cause__ is error


def test_delete_returns_false_for_missing_order() -> None:
    persistence = OrderPersistence(store=RecordingOrderStore(), backend=StorageBackend.DOCUMENT)
    order = persistence.create(_draft())

    assert persistence.delete_by_id(order.order_id) is True
    assert persistence.delete_by_id(order.order_id) is False


def test_ping_reports_false_when_store_raises() -> None:
    persistence = OrderPersistence(
        store=RecordingOrderStore(error=PersistenceError("down")),
        backend=StorageBackend.RELATIONAL,
    )
    assert persistence.ping() is False


def test_backend_is_exposed() -> None:
    persistence = OrderPersistence(store=RecordingOrderStore(), backend=StorageBackend.DOCUMENT)
    assert persistence.backend is StorageBackend.DOCUMENT
