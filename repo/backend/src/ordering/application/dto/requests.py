from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class CreateOrderLineRequest(CamelBaseModel):
    product_id: int
    quantity: int
    subtotal: Decimal


class CreateOrderRequest(CamelBaseModel):
    user_id: int
    restaurant_id: int
    status: str = "PENDING"
    type: str
    lines: list[CreateOrderLineRequest] = Field(min_length=1)
