from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import Engine, delete, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ordering.application.ports.repositories import OrderStore, PersistenceError
from ordering.domain.common.ids import (
    OrderId,
    OrderLineId,
    ProductId,
    RestaurantId,
    UserId,
    is_storable_id,
)
from ordering.domain.common.money import Money
from ordering.domain.order.entities import (
    Order,
    OrderDraft,
    OrderLine,
    OrderStatus,
    OrderType,
)
from ordering.infrastructure.db.models.order import OrderLineModel, OrderModel
from ordering.infrastructure.db.session import ping_database, transaction_scope

logger = logging.getLogger(__name__)


class SqlAlchemyOrderStore(OrderStore):
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def create(self, draft: OrderDraft) -> Order:
        try:
            with transaction_scope(self._engine) as session:
                header = session.execute(
                    insert(OrderModel)
                    .values(
                        user_id=draft.user_id,
                        restaurant_id=draft.restaurant_id,
                        status=draft.status.value,
                        type=draft.type.value,
                    )
                    .returning(OrderModel.id, OrderModel.created_at)
                ).one()

                lines: list[OrderLine] = []
                for line in draft.lines:
                    line_id = session.execute(
                        insert(OrderLineModel)
                        .values(
                            order_id=header.id,
                            product_id=line.product_id,
                            quantity=line.quantity,
                            subtotal=line.subtotal.amount,
                        )
                        .returning(OrderLineModel.id)
                    ).scalar_one()
                    lines.append(
                        OrderLine(
                            line_id=OrderLineId(line_id),
                            product_id=line.product_id,
                            quantity=line.quantity,
                            subtotal=line.subtotal,
                        )
                    )
        except SQLAlchemyError as exc:
            logger.warning(
                "order_create_rolled_back",
                extra={"line_count": len(draft.lines)},
            )
            raise PersistenceError(f"order create failed: {exc}") from exc

        return Order(
            order_id=OrderId(header.id),
            user_id=draft.user_id,
            restaurant_id=draft.restaurant_id,
            status=draft.status,
            type=draft.type,
            created_at=_as_utc(header.created_at),
            lines=tuple(lines),
        )

    def list_all(self) -> list[Order]:
        """Return every order header.

        Lines are not loaded here: the overview listing is a single header
        read, so each returned order has an empty ``lines`` tuple. Use
        ``find_by_id`` for the full order.
        """
        try:
            with Session(self._engine) as session:
                models = list(session.execute(select(OrderModel)).scalars().all())
                return [self._header_to_domain(model) for model in models]
        except SQLAlchemyError as exc:
            raise PersistenceError(f"order list failed: {exc}") from exc

    def find_by_id(self, order_id: OrderId) -> Order | None:
        # Ids outside the key column range were never assigned.
        if not is_storable_id(order_id):
            return None
        header_statement = select(OrderModel).where(OrderModel.id == order_id).limit(1)
        lines_statement = (
            select(OrderLineModel)
            .where(OrderLineModel.order_id == order_id)
            .order_by(OrderLineModel.id)
        )
        try:
            with Session(self._engine) as session:
                model = session.execute(header_statement).scalar_one_or_none()
                if model is None:
                    return None
                line_models = list(session.execute(lines_statement).scalars().all())
                order = self._header_to_domain(model)
        except SQLAlchemyError as exc:
            raise PersistenceError(f"order lookup failed: {exc}") from exc

        return order.with_lines([self._line_to_domain(line) for line in line_models])

    def delete_by_id(self, order_id: OrderId) -> bool:
        if not is_storable_id(order_id):
            return False
        # order_lines rows go with the header through ON DELETE CASCADE.
        statement = (
            delete(OrderModel)
            .where(OrderModel.id == order_id)
            .execution_options(synchronize_session=False)
        )
        try:
            with transaction_scope(self._engine) as session:
                result = session.execute(statement)
                return result.rowcount > 0
        except SQLAlchemyError as exc:
            raise PersistenceError(f"order delete failed: {exc}") from exc

    def ping(self) -> bool:
        return ping_database(self._engine)

    def _header_to_domain(self, model: OrderModel) -> Order:
        return Order(
            order_id=OrderId(model.id),
            user_id=UserId(model.user_id),
            restaurant_id=RestaurantId(model.restaurant_id),
            status=OrderStatus(model.status),
            type=OrderType(model.type),
            created_at=_as_utc(model.created_at),
        )

    def _line_to_domain(self, model: OrderLineModel) -> OrderLine:
        return OrderLine(
            line_id=OrderLineId(model.id),
            product_id=ProductId(model.product_id),
            quantity=model.quantity,
            subtotal=Money.of(model.subtotal),
        )


def _as_utc(created_at: datetime) -> datetime:
    if created_at.tzinfo is None:
        return created_at.replace(tzinfo=timezone.utc)
    return created_at
