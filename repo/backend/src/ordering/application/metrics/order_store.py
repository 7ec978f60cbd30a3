from __future__ import annotations

from prometheus_client import Counter

ORDERS_CREATED_TOTAL = Counter(
    "ordering_orders_created_total",
    "Total number of orders persisted.",
    ["backend"],
)

ORDERS_DELETED_TOTAL = Counter(
    "ordering_orders_deleted_total",
    "Total number of orders removed.",
    ["backend"],
)

STORE_FAILURES_TOTAL = Counter(
    "ordering_store_failures_total",
    "Total number of failed order store operations.",
    ["backend", "operation"],
)


def record_order_created(backend: str) -> None:
    ORDERS_CREATED_TOTAL.labels(backend=backend).inc()


def record_order_deleted(backend: str) -> None:
    ORDERS_DELETED_TOTAL.labels(backend=backend).inc()


def record_store_failure(backend: str, operation: str) -> None:
    STORE_FAILURES_TOTAL.labels(backend=backend, operation=operation).inc()
