from __future__ import annotations

from ordering.application.dto.responses import OrderLineResponse, OrderResponse
from ordering.domain.order.entities import Order


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        orderId=order.order_id,
        userId=order.user_id,
        restaurantId=order.restaurant_id,
        status=order.status.value,
        type=order.type.value,
        createdAt=order.created_at,
        lines=[
            OrderLineResponse(
                lineId=line.line_id,
                productId=line.product_id,
                quantity=line.quantity,
                subtotal=line.subtotal.amount,
            )
            for line in order.lines
        ],
        total=order.total.amount,
    )
