from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any

import redis

from ordering.application.ports.repositories import OrderStore, PersistenceError
from ordering.domain.common.ids import OrderId, OrderLineId, ProductId, RestaurantId, UserId
from ordering.domain.common.money import Money
from ordering.domain.order.entities import (
    Order,
    OrderDraft,
    OrderLine,
    OrderStatus,
    OrderType,
)
from ordering.infrastructure.cache.redis_client import ping_redis


class RedisDocumentOrderStore(OrderStore):
    """Stores each order as one JSON document with its lines embedded.

    Keys under ``prefix``:

    - ``<prefix>:seq``: order id counter, only ever incremented
    - ``<prefix>:doc:<id>``: the order document
    - ``<prefix>:index``: sorted set of order ids, scored by id

    Line ids are positions inside the document (1..n), not global keys.
    """

    def __init__(self, client: redis.Redis, prefix: str = "orders") -> None:
        self._client = client
        self._prefix = prefix

    def create(self, draft: OrderDraft) -> Order:
        try:
            order_id = OrderId(int(self._client.incr(self._seq_key())))
            order = Order(
                order_id=order_id,
                user_id=draft.user_id,
                restaurant_id=draft.restaurant_id,
                status=draft.status,
                type=draft.type,
                created_at=datetime.now(timezone.utc),
                lines=tuple(
                    OrderLine(
                        line_id=OrderLineId(position),
                        product_id=line.product_id,
                        quantity=line.quantity,
                        subtotal=line.subtotal,
                    )
                    for position, line in enumerate(draft.lines, start=1)
                ),
            )
            pipeline = self._client.pipeline(transaction=True)
            pipeline.set(self._doc_key(order_id), json.dumps(_to_document(order)))
            pipeline.zadd(self._index_key(), {str(order_id): order_id})
            pipeline.execute()
        except redis.RedisError as exc:
            raise PersistenceError(f"order create failed: {exc}") from exc
        return order

    def list_all(self) -> list[Order]:
        try:
            order_ids = self._client.zrange(self._index_key(), 0, -1)
            if not order_ids:
                return []
            raw_documents = self._client.mget(
                [self._doc_key(OrderId(int(order_id))) for order_id in order_ids]
            )
        except redis.RedisError as exc:
            raise PersistenceError(f"order list failed: {exc}") from exc
        return [_from_raw(raw) for raw in raw_documents if raw is not None]

    def find_by_id(self, order_id: OrderId) -> Order | None:
        try:
            raw = self._client.get(self._doc_key(order_id))
        except redis.RedisError as exc:
            raise PersistenceError(f"order lookup failed: {exc}") from exc
        if raw is None:
            return None
        return _from_raw(raw)

    def delete_by_id(self, order_id: OrderId) -> bool:
        try:
            pipeline = self._client.pipeline(transaction=True)
            pipeline.delete(self._doc_key(order_id))
            pipeline.zrem(self._index_key(), str(order_id))
            deleted_count, _ = pipeline.execute()
        except redis.RedisError as exc:
            raise PersistenceError(f"order delete failed: {exc}") from exc
        return deleted_count > 0

    def ping(self) -> bool:
        return ping_redis(self._client)

    def _seq_key(self) -> str:
        return f"{self._prefix}:seq"

    def _doc_key(self, order_id: OrderId) -> str:
        return f"{self._prefix}:doc:{order_id}"

    def _index_key(self) -> str:
        return f"{self._prefix}:index"


def _to_document(order: Order) -> dict[str, Any]:
    return {
        "order_id": order.order_id,
        "user_id": order.user_id,
        "restaurant_id": order.restaurant_id,
        "status": order.status.value,
        "type": order.type.value,
        "created_at": order.created_at.isoformat(),
        "lines": [
            {
                "line_id": line.line_id,
                "product_id": line.product_id,
                "quantity": line.quantity,
                "subtotal": str(line.subtotal.amount),
            }
            for line in order.lines
        ],
    }


def _from_raw(raw: bytes | str) -> Order:
    try:
        document = json.loads(raw)
        return Order(
            order_id=OrderId(document["order_id"]),
            user_id=UserId(document["user_id"]),
            restaurant_id=RestaurantId(document["restaurant_id"]),
            status=OrderStatus(document["status"]),
            type=OrderType(document["type"]),
            created_at=datetime.fromisoformat(document["created_at"]),
            lines=tuple(
                OrderLine(
                    line_id=OrderLineId(line["line_id"]),
                    product_id=ProductId(line["product_id"]),
                    quantity=line["quantity"],
                    subtotal=Money.of(line["subtotal"]),
                )
                for line in document["lines"]
            ),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise PersistenceError(f"malformed order document: {exc}") from exc
