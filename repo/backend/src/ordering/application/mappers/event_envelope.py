from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from ordering.domain.order.events import OrderCreated, OrderDeleted


def _serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    payload: dict[str, Any],
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)


def serialize_order_created(
    event: OrderCreated,
    *,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    order = event.order
    return _serialize_event(
        event_type="order.created",
        occurred_at=event.occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={
            "orderId": order.order_id,
            "userId": order.user_id,
            "restaurantId": order.restaurant_id,
            "status": order.status.value,
            "type": order.type.value,
            "createdAt": order.created_at.isoformat(),
            "total": str(order.total),
            "lines": [
                {
                    "lineId": line.line_id,
                    "productId": line.product_id,
                    "quantity": line.quantity,
                    "subtotal": str(line.subtotal),
                }
                for line in order.lines
            ],
        },
    )


def serialize_order_deleted(
    event: OrderDeleted,
    *,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    return _serialize_event(
        event_type="order.deleted",
        occurred_at=event.occurred_at,
        trace_id=trace_id,
        request_id=request_id,
        payload={"orderId": event.order_id},
    )
