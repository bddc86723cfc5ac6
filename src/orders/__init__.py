"""Order resource: typed records and the service that fetches and updates them."""

from .interfaces import BulkRunner, GraphExecutor, OrderService
from .models import (
    FulfillmentOrder,
    FulfillmentOrderLineItem,
    LineItem,
    MoneyBag,
    Order,
    OrderInput,
    OrderQueryResult,
)
from .service import ShopifyOrderService, build_order_service

__all__ = [
    "BulkRunner",
    "GraphExecutor",
    "OrderService",
    "FulfillmentOrder",
    "FulfillmentOrderLineItem",
    "LineItem",
    "MoneyBag",
    "Order",
    "OrderInput",
    "OrderQueryResult",
    "ShopifyOrderService",
    "build_order_service",
]
