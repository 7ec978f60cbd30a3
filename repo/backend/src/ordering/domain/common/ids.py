from __future__ import annotations

from typing import NewType

UserId = NewType("UserId", int)
RestaurantId = NewType("RestaurantId", int)
ProductId = NewType("ProductId", int)
OrderId = NewType("OrderId", int)
OrderLineId = NewType("OrderLineId", int)

# Largest value an INTEGER key column holds on every supported database.
MAX_ID = 2**31 - 1


def is_storable_id(value: int) -> bool:
    return 1 <= value <= MAX_ID
