from __future__ import annotations

from ordering.application.dto.responses import OrderListResponse
from ordering.application.mappers.order_mapper import to_order_response
from ordering.application.order_persistence import OrderPersistence


class ListOrders:
    """Overview listing; the relational backend returns headers without lines."""

    def __init__(self, order_persistence: OrderPersistence) -> None:
        self._order_persistence = order_persistence

    def execute(self) -> OrderListResponse:
        orders = self._order_persistence.list_all()
        return OrderListResponse(orders=[to_order_response(order) for order in orders])
