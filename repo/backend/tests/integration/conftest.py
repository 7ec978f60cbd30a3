from __future__ import annotations

import sys
from pathlib import Path
from typing import Iterator

import fakeredis
import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from ordering.application.order_persistence import OrderPersistence
from ordering.application.ports.repositories import StorageBackend
from ordering.infrastructure.db.models import order as order_models  # noqa: F401
from ordering.infrastructure.db.models.base import Base, ProductModel, RestaurantModel, UserModel
from ordering.infrastructure.db.repositories.order_repo import SqlAlchemyOrderStore
from ordering.infrastructure.db.session import enable_sqlite_foreign_keys
from ordering.infrastructure.documents.order_store import RedisDocumentOrderStore

KNOWN_USER_IDS = (7, 8)
KNOWN_RESTAURANT_IDS = (3,)
KNOWN_PRODUCT_IDS = (1, 2, 3)


@pytest.fixture
def engine(tmp_path: Path) -> Iterator[Engine]:
    engine = create_engine(f"sqlite:///{tmp_path / 'orders.db'}")
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)

    with Session(engine) as session:
        session.add_all([UserModel(id=user_id, name=f"user {user_id}") for user_id in KNOWN_USER_IDS])
        session.add_all(
            [
                RestaurantModel(id=restaurant_id, name=f"restaurant {restaurant_id}")
                for restaurant_id in KNOWN_RESTAURANT_IDS
            ]
        )
        session.flush()
        session.add_all(
            [
                ProductModel(id=product_id, restaurant_id=3, name=f"product {product_id}")
                for product_id in KNOWN_PRODUCT_IDS
            ]
        )
        session.commit()

    yield engine
    engine.dispose()


@pytest.fixture
def redis_client() -> Iterator[fakeredis.FakeRedis]:
    client = fakeredis.FakeRedis()
    client.flushall()
    yield client
    client.flushall()


@pytest.fixture
def relational_store(engine: Engine) -> SqlAlchemyOrderStore:
    return SqlAlchemyOrderStore(engine)


@pytest.fixture
def document_store(redis_client: fakeredis.FakeRedis) -> RedisDocumentOrderStore:
    return RedisDocumentOrderStore(redis_client, prefix="orders")


@pytest.fixture(params=[StorageBackend.RELATIONAL, StorageBackend.DOCUMENT], ids=lambda b: b.value)
def persistence(
    request: pytest.FixtureRequest,
    relational_store: SqlAlchemyOrderStore,
    document_store: RedisDocumentOrderStore,
) -> OrderPersistence:
    backend: StorageBackend = request.param
    if backend is StorageBackend.RELATIONAL:
        return OrderPersistence(store=relational_store, backend=backend)
    return OrderPersistence(store=document_store, backend=backend)
