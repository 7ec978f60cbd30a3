from __future__ import annotations

import logging
from datetime import datetime, timezone

from ordering.application.dto.responses import DeleteOrderResponse
from ordering.application.mappers.event_envelope import serialize_order_deleted
from ordering.application.order_persistence import OrderPersistence
from ordering.application.ports.publisher import EventPublisher
from ordering.application.use_cases.context import TraceContext
from ordering.domain.common.ids import OrderId
from ordering.domain.order.events import OrderDeleted

logger = logging.getLogger(__name__)


class DeleteOrder:
    def __init__(
        self,
        order_persistence: OrderPersistence,
        publisher: EventPublisher,
        events_channel: str,
    ) -> None:
        self._order_persistence = order_persistence
        self._publisher = publisher
        self._events_channel = events_channel

    def execute(self, order_id: OrderId, trace_ctx: TraceContext) -> DeleteOrderResponse:
        deleted = self._order_persistence.delete_by_id(order_id)
        if deleted:
            message = serialize_order_deleted(
                OrderDeleted(order_id=order_id, occurred_at=datetime.now(timezone.utc)),
                trace_id=trace_ctx.trace_id,
                request_id=trace_ctx.request_id,
            )
            try:
                self._publisher.publish(channel=self._events_channel, message=message)
            except Exception:
                logger.warning(
                    "order_event_publish_failed",
                    exc_info=True,
                    extra={"order_id": order_id},
                )
        return DeleteOrderResponse(orderId=order_id, deleted=deleted)
