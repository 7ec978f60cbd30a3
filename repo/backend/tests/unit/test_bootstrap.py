from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from ordering.application.ports.repositories import StorageBackend
from ordering.infrastructure.bootstrap import (
    build_event_publisher,
    build_order_persistence,
    build_order_store,
)
from ordering.infrastructure.config import Settings
from ordering.infrastructure.db.repositories.order_repo import SqlAlchemyOrderStore
from ordering.infrastructure.documents.order_store import RedisDocumentOrderStore
from ordering.infrastructure.messaging.redis_publisher import (
    NullEventPublisher,
    RedisEventPublisher,
)


def _settings(backend: StorageBackend, redis_url: str | None = None) -> Settings:
    return Settings(
        backend=backend,
        database_url="sqlite:///:memory:",
        redis_url=redis_url,
    )


def test_relational_settings_bind_sqlalchemy_store() -> None:
    store = build_order_store(_settings(StorageBackend.RELATIONAL))
    assert isinstance(store, SqlAlchemyOrderStore)


def test_document_settings_bind_redis_store() -> None:
    store = build_order_store(
        _settings(StorageBackend.DOCUMENT, redis_url="redis://localhost:6379/0")
    )
    assert isinstance(store, RedisDocumentOrderStore)


def test_both_variants_can_be_built_side_by_side() -> None:
    relational = build_order_persistence(_settings(StorageBackend.RELATIONAL))
    document = build_order_persistence(
        _settings(StorageBackend.DOCUMENT, redis_url="redis://localhost:6379/0")
    )

    assert relational.backend is StorageBackend.RELATIONAL
    assert document.backend is StorageBackend.DOCUMENT


def test_publisher_falls_back_to_null_without_redis() -> None:
    assert isinstance(build_event_publisher(_settings(StorageBackend.RELATIONAL)), NullEventPublisher)
    assert isinstance(
        build_event_publisher(
            _settings(StorageBackend.RELATIONAL, redis_url="redis://localhost:6379/0")
        ),
        RedisEventPublisher,
    )
