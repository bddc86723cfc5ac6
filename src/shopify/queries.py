"""GraphQL documents for the order resource.

Single-order lookups and mutations bind their inputs as GraphQL variables.
Bulk export documents cannot carry variables (``bulkOperationRunQuery``
takes a bare query string), so their filter values are spliced in by
``substitute``, which only accepts values from a restricted grammar.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from .errors import InvalidQueryValueError
from .fragments import (
    FULFILLMENT_ORDER_LINE_ITEM_FIELDS,
    LINE_ITEM_EXPORT_FIELDS,
    LINE_ITEM_FIELDS,
    ORDER_BASE_FIELDS,
    USER_ERROR_FIELDS,
    connection,
)

if TYPE_CHECKING:
    from src.orders.models import OrderInput

# Fixed ceilings for single-order lookups; anything past them is truncated.
LINE_ITEMS_PAGE_SIZE = 50
FULFILLMENT_ORDERS_PAGE_SIZE = 5
FULFILLMENT_ORDER_LINE_ITEMS_PAGE_SIZE = 50

# Quotes, backslashes, braces and control characters would let a value
# close the string literal it is placed in and extend the document.
_FORBIDDEN_VALUE_CHARS = re.compile(r'["\\{}\x00-\x1f\x7f]')
_PLACEHOLDER = re.compile(r"\$([a-zA-Z_][a-zA-Z0-9_]*)")


class OrderOperation(str, Enum):
    """Operations supported by the order accessor."""

    GET = "get"
    LIST = "list"
    LIST_ALL = "list_all"
    UPDATE = "update"
    FULFILLMENT_ORDERS_AT_LOCATION = "fulfillment_orders_at_location"


@dataclass(frozen=True)
class CompiledQuery:
    """A complete GraphQL document and the variables bound to it.

    Attributes:
        operation: The operation the document was built for.
        document: Self-contained query or mutation text.
        variables: Bound GraphQL variables (empty for bulk documents).
    """

    operation: OrderOperation
    document: str
    variables: dict[str, Any] = field(default_factory=dict)


def validate_substitution_value(name: str, value: str, allow_empty: bool = False) -> str:
    """Check that a value is safe to splice into a quoted query argument.

    Args:
        name: Placeholder name, used in the error message.
        value: The value to check.
        allow_empty: Accept an empty string (an empty search filter matches everything).

    Returns:
        The value unchanged.

    Raises:
        InvalidQueryValueError: If the value is not a string, is empty when
            empty values are not allowed, or
            contains a quote, backslash, brace or control character.
    """
    if not isinstance(value, str):
        raise InvalidQueryValueError(f"Value for ${name} must be a string")
    if not value and not allow_empty:
        raise InvalidQueryValueError(f"Value for ${name} must be a non-empty string")
    match = _FORBIDDEN_VALUE_CHARS.search(value)
    if match:
        raise InvalidQueryValueError(
            f"Value for ${name} contains forbidden character {match.group()!r}"
        )
    return value


def substitute(
    document: str,
    values: dict[str, str],
    allow_empty: frozenset[str] = frozenset(),
) -> str:
    """Replace ``$name`` placeholders in a bulk document with literal values.

    This is the only place query text is built from caller input. Every
    placeholder in the document must have a value and every value must pass
    ``validate_substitution_value``. Only placeholders named in ``allow_empty``
    may be given an empty string.

    Example:
        >>> substitute('{ orders(query: "$query") { edges { node { id } } } }',
        ...            {"query": "status:open"})
        '{ orders(query: "status:open") { edges { node { id } } } }'
    """
    for name, value in values.items():
        validate_substitution_value(name, value, allow_empty=name in allow_empty)

    def replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in values:
            raise InvalidQueryValueError(f"No value supplied for ${name}")
        return values[name]

    return _PLACEHOLDER.sub(replace, document)


def build_order_get_query(order_id: str) -> CompiledQuery:
    """Build the lookup for one order with its line items and fulfillment orders."""
    fulfillment_order_fields = "\nid\nstatus\n" + connection(
        f"lineItems(first: {FULFILLMENT_ORDER_LINE_ITEMS_PAGE_SIZE})",
        FULFILLMENT_ORDER_LINE_ITEM_FIELDS,
    )
    order_fields = (
        ORDER_BASE_FIELDS
        + connection(f"lineItems(first: {LINE_ITEMS_PAGE_SIZE})", LINE_ITEM_FIELDS)
        + connection(
            f"fulfillmentOrders(first: {FULFILLMENT_ORDERS_PAGE_SIZE})",
            fulfillment_order_fields,
        )
    )
    document = (
        "query order($id: ID!) {\n"
        "  node(id: $id) {\n"
        "    __typename\n"
        f"    ... on Order {{{order_fields}}}\n"
        "  }\n"
        "}\n"
    )
    return CompiledQuery(OrderOperation.GET, document, {"id": order_id})


def build_orders_list_query(query: str) -> CompiledQuery:
    """Build the bulk export of orders matching a search filter."""
    order_fields = ORDER_BASE_FIELDS + connection("lineItems", LINE_ITEM_FIELDS)
    document = "{\n" + connection('orders(query: "$query")', order_fields) + "}\n"
    return CompiledQuery(
        OrderOperation.LIST,
        substitute(document, {"query": query}, allow_empty=frozenset({"query"})),
    )


def build_orders_list_all_query() -> CompiledQuery:
    """Build the bulk export of every order, with a reduced line item selection."""
    order_fields = ORDER_BASE_FIELDS + connection("lineItems", LINE_ITEM_EXPORT_FIELDS)
    document = "{\n" + connection("orders", order_fields) + "}\n"
    return CompiledQuery(OrderOperation.LIST_ALL, document)


def build_order_update_mutation(order_input: "OrderInput") -> CompiledQuery:
    """Build the ``orderUpdate`` mutation; unset input fields are left out."""
    document = (
        "mutation orderUpdate($input: OrderInput!) {\n"
        "  orderUpdate(input: $input) {\n"
        f"    userErrors {{{USER_ERROR_FIELDS}}}\n"
        "  }\n"
        "}\n"
    )
    return CompiledQuery(
        OrderOperation.UPDATE, document, {"input": order_input.to_variables()}
    )


def build_fulfillment_orders_at_location_query(
    order_id: str,
    location_id: str,
) -> CompiledQuery:
    """Build the bulk export of an order's fulfillment orders assigned to a location."""
    fulfillment_order_fields = "\nid\nstatus\n" + connection(
        "lineItems", FULFILLMENT_ORDER_LINE_ITEM_FIELDS
    )
    document = (
        "{\n"
        '  order(id: "$id") {\n'
        + connection('fulfillmentOrders(query: "$query")', fulfillment_order_fields)
        + "  }\n"
        "}\n"
    )
    location_filter = f"assigned_location_id:{validate_substitution_value('location_id', location_id)}"
    return CompiledQuery(
        OrderOperation.FULFILLMENT_ORDERS_AT_LOCATION,
        substitute(document, {"id": order_id, "query": location_filter}),
    )


_BUILDERS: dict[OrderOperation, Callable[..., CompiledQuery]] = {
    OrderOperation.GET: build_order_get_query,
    OrderOperation.LIST: build_orders_list_query,
    OrderOperation.LIST_ALL: build_orders_list_all_query,
    OrderOperation.UPDATE: build_order_update_mutation,
    OrderOperation.FULFILLMENT_ORDERS_AT_LOCATION: build_fulfillment_orders_at_location_query,
}


def compile_operation(operation: OrderOperation | str, **params: Any) -> CompiledQuery:
    """Build the document for an operation from its keyword parameters.

    Example:
        >>> compiled = compile_operation("get", order_id="gid://shopify/Order/1")
        >>> compiled.variables
        {'id': 'gid://shopify/Order/1'}
    """
    return _BUILDERS[OrderOperation(operation)](**params)
