"""Shopify Admin GraphQL transport, documents and errors."""

from .client import ShopifyClient
from .errors import (
    BulkJobError,
    InvalidQueryValueError,
    ShopifyAPIError,
    ShopifyClientError,
    ShopifyDecodeError,
    ShopifyThrottledError,
    ShopifyTransportError,
    ShopifyUserError,
    UnexpectedNodeTypeError,
)
from .queries import CompiledQuery, OrderOperation, compile_operation

__all__ = [
    "ShopifyClient",
    "BulkJobError",
    "InvalidQueryValueError",
    "ShopifyAPIError",
    "ShopifyClientError",
    "ShopifyDecodeError",
    "ShopifyThrottledError",
    "ShopifyTransportError",
    "ShopifyUserError",
    "UnexpectedNodeTypeError",
    "CompiledQuery",
    "OrderOperation",
    "compile_operation",
]
