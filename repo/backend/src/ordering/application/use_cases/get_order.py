from __future__ import annotations

from ordering.application.dto.responses import OrderResponse
from ordering.application.mappers.order_mapper import to_order_response
from ordering.application.order_persistence import OrderPersistence
from ordering.domain.common.ids import OrderId


class OrderNotFoundError(Exception):
    pass


class GetOrder:
    def __init__(self, order_persistence: OrderPersistence) -> None:
        self._order_persistence = order_persistence

    def execute(self, order_id: OrderId) -> OrderResponse:
        order = self._order_persistence.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(f"order {order_id} not found")
        return to_order_response(order)
