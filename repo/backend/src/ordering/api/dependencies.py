from __future__ import annotations

from dataclasses import dataclass

from starlette.requests import Request

from ordering.application.order_persistence import OrderPersistence
from ordering.application.ports.publisher import EventPublisher
from ordering.infrastructure.bootstrap import build_event_publisher, build_order_persistence
from ordering.infrastructure.config import Settings


@dataclass(frozen=True)
class AppServices:
    order_persistence: OrderPersistence
    publisher: EventPublisher
    events_channel: str


def build_services(settings: Settings) -> AppServices:
    return AppServices(
        order_persistence=build_order_persistence(settings),
        publisher=build_event_publisher(settings),
        events_channel=settings.events_channel,
    )


def get_services(request: Request) -> AppServices:
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise RuntimeError("application services are not initialised")
    return services
