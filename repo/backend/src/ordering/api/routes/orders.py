from __future__ import annotations

from fastapi import APIRouter, Depends, Path, status

from ordering.api.dependencies import AppServices, get_services
from ordering.api.middleware.request_id import get_request_id
from ordering.application.dto.requests import CreateOrderRequest
from ordering.application.dto.responses import (
    DeleteOrderResponse,
    OrderListResponse,
    OrderResponse,
)
from ordering.application.use_cases.context import TraceContext
from ordering.application.use_cases.create_order import CreateOrder
from ordering.application.use_cases.delete_order import DeleteOrder
from ordering.application.use_cases.get_order import GetOrder
from ordering.application.use_cases.list_orders import ListOrders
from ordering.domain.common.ids import MAX_ID, OrderId
from ordering.infrastructure.observability.otel import current_trace_id

router = APIRouter()


def _trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())


@router.post("/v1/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    request_dto: CreateOrderRequest,
    services: AppServices = Depends(get_services),
) -> OrderResponse:
    use_case = CreateOrder(
        order_persistence=services.order_persistence,
        publisher=services.publisher,
        events_channel=services.events_channel,
    )
    return use_case.execute(request_dto=request_dto, trace_ctx=_trace_context())


@router.get("/v1/orders", response_model=OrderListResponse)
def list_orders(services: AppServices = Depends(get_services)) -> OrderListResponse:
    return ListOrders(order_persistence=services.order_persistence).execute()


@router.get("/v1/orders/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int = Path(ge=1, le=MAX_ID),
    services: AppServices = Depends(get_services),
) -> OrderResponse:
    return GetOrder(order_persistence=services.order_persistence).execute(OrderId(order_id))


@router.delete("/v1/orders/{order_id}", response_model=DeleteOrderResponse)
def delete_order(
    order_id: int = Path(ge=1, le=MAX_ID),
    services: AppServices = Depends(get_services),
) -> DeleteOrderResponse:
    use_case = DeleteOrder(
        order_persistence=services.order_persistence,
        publisher=services.publisher,
        events_channel=services.events_channel,
    )
    return use_case.execute(order_id=OrderId(order_id), trace_ctx=_trace_context())
