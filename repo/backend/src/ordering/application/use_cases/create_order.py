from __future__ import annotations

import logging
from datetime import datetime, timezone

from ordering.application.dto.requests import CreateOrderRequest
from ordering.application.dto.responses import OrderResponse
from ordering.application.mappers.event_envelope import serialize_order_created
from ordering.application.mappers.order_mapper import to_order_response
from ordering.application.order_persistence import OrderPersistence
from ordering.application.ports.publisher import EventPublisher
from ordering.application.use_cases.context import TraceContext
from ordering.domain.common.ids import ProductId, RestaurantId, UserId
from ordering.domain.common.money import Money
from ordering.domain.order.entities import (
    OrderDraft,
    OrderLineDraft,
    OrderStatus,
    OrderType,
    OrderValidationError,
)
from ordering.domain.order.events import OrderCreated

logger = logging.getLogger(__name__)


class CreateOrder:
    def __init__(
        self,
        order_persistence: OrderPersistence,
        publisher: EventPublisher,
        events_channel: str,
    ) -> None:
        self._order_persistence = order_persistence
        self._publisher = publisher
        self._events_channel = events_channel

    def execute(self, request_dto: CreateOrderRequest, trace_ctx: TraceContext) -> OrderResponse:
        order = self._order_persistence.create(to_draft(request_dto))

        message = serialize_order_created(
            OrderCreated(order=order, occurred_at=datetime.now(timezone.utc)),
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        try:
            self._publisher.publish(channel=self._events_channel, message=message)
        except Exception:
            logger.warning(
                "order_event_publish_failed",
                exc_info=True,
                extra={"order_id": order.order_id},
            )

        return to_order_response(order)


def to_draft(request_dto: CreateOrderRequest) -> OrderDraft:
    try:
        status = OrderStatus(request_dto.status)
    except ValueError as exc:
        raise OrderValidationError(f"unknown order status: {request_dto.status}") from exc
    try:
        order_type = OrderType(request_dto.type)
    except ValueError as exc:
        raise OrderValidationError(f"unknown order type: {request_dto.type}") from exc

    lines: list[OrderLineDraft] = []
    for position, request_line in enumerate(request_dto.lines):
        try:
            subtotal = Money.of(request_line.subtotal)
        except ValueError as exc:
            raise OrderValidationError(f"line {position}: {exc}") from exc
        lines.append(
            OrderLineDraft(
                product_id=ProductId(request_line.product_id),
                quantity=request_line.quantity,
                subtotal=subtotal,
            )
        )

    return OrderDraft(
        user_id=UserId(request_dto.user_id),
        restaurant_id=RestaurantId(request_dto.restaurant_id),
        status=status,
        type=order_type,
        lines=tuple(lines),
    )
