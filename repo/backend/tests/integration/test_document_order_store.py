from __future__ import annotations

import json
import sys
from pathlib import Path

import fakeredis
import pytest
import redis

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from ordering.application.ports.repositories import PersistenceError
from ordering.domain.common.ids import OrderId, ProductId, RestaurantId, UserId
from ordering.domain.common.money import Money
from ordering.domain.order.entities import OrderDraft, OrderLineDraft, OrderStatus, OrderType
from ordering.infrastructure.documents.order_store import RedisDocumentOrderStore


def _draft(product_ids: list[int]) -> OrderDraft:
    return OrderDraft(
        user_id=UserId(7),
        restaurant_id=RestaurantId(3),
        status=OrderStatus.CONFIRMED,
        type=OrderType.DELIVERY,
        lines=tuple(
            OrderLineDraft(product_id=ProductId(product_id), quantity=2, subtotal=Money.of("3.10"))
            for product_id in product_ids
        ),
    )


class _FailingPipeline:
    def __init__(self, pipeline) -> None:
        self._pipeline = pipeline

    def __getattr__(self, name: str):
        return getattr(self._pipeline, name)

    def execute(self):
        self._pipeline.reset()
        raise redis.ConnectionError("connection lost")


def test_order_is_stored_as_one_document_with_embedded_lines(
    redis_client: fakeredis.FakeRedis,
    document_store: RedisDocumentOrderStore,
) -> None:
    order = document_store.create(_draft([11, 12]))

    raw = redis_client.get(f"orders:doc:{order.order_id}")
    document = json.loads(raw)

    assert document["user_id"] == 7
    assert document["type"] == "delivery"
    assert [line["product_id"] for line in document["lines"]] == [11, 12]
    assert [line["subtotal"] for line in document["lines"]] == ["3.10", "3.10"]
    assert redis_client.keys("orders:doc:*") == [f"orders:doc:{order.order_id}".encode()]


def test_line_ids_are_positions_inside_the_document(
    document_store: RedisDocumentOrderStore,
) -> None:
    first = document_store.create(_draft([1, 2, 3]))
    second = document_store.create(_draft([4, 5]))

    assert [line.line_id for line in first.lines] == [1, 2, 3]
    assert [line.line_id for line in second.lines] == [1, 2]


def test_list_all_includes_embedded_lines(document_store: RedisDocumentOrderStore) -> None:
    first = document_store.create(_draft([1]))
    second = document_store.create(_draft([2, 3]))

    listed = document_store.list_all()

    assert [order.order_id for order in listed] == [first.order_id, second.order_id]
    assert [len(order.lines) for order in listed] == [1, 2]


def test_failed_write_leaves_nothing_visible(
    redis_client: fakeredis.FakeRedis,
    document_store: RedisDocumentOrderStore,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    real_pipeline = redis_client.pipeline
    monkeypatch.setattr(
        redis_client,
        "pipeline",
        lambda transaction=True: _FailingPipeline(real_pipeline(transaction=transaction)),
    )

    with pytest.raises(PersistenceError) as exc_info:
        document_store.create(_draft([1, 2]))

    assert isinstance(exc_info.value.__cause__, redis.ConnectionError)
    monkeypatch.undo()
    assert document_store.list_all() == []
    assert document_store.find_by_id(OrderId(1)) is None


def test_malformed_document_raises_persistence_error(
    redis_client: fakeredis.FakeRedis,
    document_store: RedisDocumentOrderStore,
) -> None:
    redis_client.set("orders:doc:5", "{not json")

    with pytest.raises(PersistenceError):
        document_store.find_by_id(OrderId(5))


def test_prefix_isolates_collections(redis_client: fakeredis.FakeRedis) -> None:
    kitchen = RedisDocumentOrderStore(redis_client, prefix="kitchen-orders")
    store = RedisDocumentOrderStore(redis_client, prefix="orders")

    kitchen.create(_draft([1]))

    assert store.list_all() == []
    assert len(kitchen.list_all()) == 1
