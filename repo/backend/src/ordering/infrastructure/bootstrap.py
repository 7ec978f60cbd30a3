"""Composition root: binds the configured order store into the facade once per process."""

from __future__ import annotations

from ordering.application.order_persistence import OrderPersistence
from ordering.application.ports.publisher import EventPublisher
from ordering.application.ports.repositories import OrderStore, StorageBackend
from ordering.infrastructure.cache.redis_client import get_redis_client
from ordering.infrastructure.config import ConfigurationError, Settings
from ordering.infrastructure.db.repositories.order_repo import SqlAlchemyOrderStore
from ordering.infrastructure.db.session import get_engine
from ordering.infrastructure.documents.order_store import RedisDocumentOrderStore
from ordering.infrastructure.messaging.redis_publisher import (
    NullEventPublisher,
    RedisEventPublisher,
)


def build_order_store(settings: Settings) -> OrderStore:
    if settings.backend is StorageBackend.RELATIONAL:
        if not settings.database_url:
            raise ConfigurationError("DATABASE_URL is not set")
        return SqlAlchemyOrderStore(
            get_engine(settings.database_url, settings.storage_timeout_seconds)
        )

    if not settings.redis_url:
        raise ConfigurationError("REDIS_URL is not set")
    return RedisDocumentOrderStore(
        get_redis_client(settings.redis_url, settings.storage_timeout_seconds),
        prefix=settings.document_prefix,
    )


def build_order_persistence(settings: Settings) -> OrderPersistence:
    return OrderPersistence(store=build_order_store(settings), backend=settings.backend)


def build_event_publisher(settings: Settings) -> EventPublisher:
    if not settings.redis_url:
        return NullEventPublisher()
    return RedisEventPublisher(
        get_redis_client(settings.redis_url, settings.storage_timeout_seconds)
    )
