"""Conversion of API responses into flat order records.

Single-order lookups come back with nested ``{edges: [{node: ...}]}``
connections that have to be unwrapped. Bulk exports emit records that are
already flat, so they are validated as-is and never go through the
connection path.
"""

from collections.abc import Iterable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from src.shopify.errors import ShopifyDecodeError

from .models import (
    Connection,
    FulfillmentOrder,
    FulfillmentOrderQueryResult,
    Order,
    OrderBase,
    OrderQueryResult,
)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


def unwrap_connection(connection: Connection[T] | None) -> list[T]:
    """Return the nodes of a connection in edge order; ``None`` gives ``[]``."""
    if connection is None:
        return []
    return connection.nodes()


def unwrap_fulfillment_order(result: FulfillmentOrderQueryResult) -> FulfillmentOrder:
    return FulfillmentOrder(
        id=result.id,
        status=result.status,
        line_items=unwrap_connection(result.line_items),
    )


def unwrap_order(result: OrderQueryResult) -> Order:
    """Flatten an order and its line item and fulfillment order connections.

    Base fields are copied across unchanged. Fulfillment orders have their
    own line item connections unwrapped as well.
    """
    base = {name: getattr(result, name) for name in OrderBase.model_fields}
    return Order.model_validate(
        {
            **base,
            "line_items": unwrap_connection(result.line_items),
            "fulfillment_orders": [
                unwrap_fulfillment_order(fo)
                for fo in unwrap_connection(result.fulfillment_orders)
            ],
        }
    )


def parse_model(model: type[M], payload: Any) -> M:
    """Validate a raw payload, turning shape mismatches into ShopifyDecodeError."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ShopifyDecodeError(
            f"Unexpected {model.__name__} payload: {e.error_count()} validation error(s)"
        ) from e


def parse_flat_orders(records: Iterable[dict[str, Any]]) -> list[Order]:
    """Validate bulk export records as flat orders, keeping export order."""
    return [parse_model(Order, record) for record in records]


def parse_flat_fulfillment_orders(records: Iterable[dict[str, Any]]) -> list[FulfillmentOrder]:
    """Validate bulk export records as flat fulfillment orders, keeping export order."""
    return [parse_model(FulfillmentOrder, record) for record in records]
