"""Order resource accessor.

Dispatches each operation by intent:
- one order (``get``) or one change (``update``) goes through the
  synchronous GraphQL executor
- many orders (``list``, ``list_all``) or an unbounded set of fulfillment
  orders goes through a bulk export, which is not subject to the API's page
  size and query cost limits

The service keeps no state besides its collaborators, so one instance can
be shared between threads.
"""

from __future__ import annotations

from typing import Any

from src.config import Settings, get_settings
from src.logging_config import get_logger
from src.shopify.client import ShopifyClient
from src.shopify.errors import ShopifyDecodeError, ShopifyUserError, UnexpectedNodeTypeError
from src.shopify.queries import CompiledQuery, OrderOperation, compile_operation

from .interfaces import BulkRunner, GraphExecutor
from .models import ID, FulfillmentOrder, Order, OrderInput, OrderQueryResult, UserError
from .unwrap import parse_flat_fulfillment_orders, parse_flat_orders, parse_model, unwrap_order

logger = get_logger(__name__)

ORDER_TYPENAME = "Order"


class ShopifyOrderService:
    """Order access backed by a GraphQL executor and a bulk runner.

    Args:
        executor: Runs single queries and mutations.
        bulk_runner: Runs bulk exports.
        strict_node_type: What ``get`` does when the id belongs to a node
            that is not an Order. False returns None, matching a missing
            node; True raises UnexpectedNodeTypeError.

    Example:
        >>> service = ShopifyOrderService(ShopifyClient(), my_bulk_runner)
        >>> order = service.get("gid://shopify/Order/1")
        >>> open_orders = service.list("status:open")
    """

    def __init__(
        self,
        executor: GraphExecutor,
        bulk_runner: BulkRunner,
        *,
        strict_node_type: bool = False,
    ):
        self._executor = executor
        self._bulk_runner = bulk_runner
        self.strict_node_type = strict_node_type

    @property
    def executor(self) -> GraphExecutor:
        return self._executor

    @property
    def bulk_runner(self) -> BulkRunner:
        return self._bulk_runner

    def get(self, order_id: ID) -> Order | None:
        """Fetch one order with up to 50 line items and 5 fulfillment orders.

        Returns:
            The unwrapped order, or None if the id resolves to nothing (or,
            unless strict, to a node of another type).

        Raises:
            UnexpectedNodeTypeError: In strict mode, for a non-Order node.
            ShopifyDecodeError: In strict mode, when the node carries no
                ``__typename``.
        """
        compiled = compile_operation(OrderOperation.GET, order_id=order_id)
        data = self._query(compiled)

        node = data.get("node")
        if node is None:
            return None

        result = parse_model(OrderQueryResult, node)
        if result.typename is None and self.strict_node_type:
            raise ShopifyDecodeError(f"Node response for {order_id} has no __typename")
        # Without __typename the node is indistinguishable from a non-Order
        # node, so permissive mode treats it as one.
        if result.typename != ORDER_TYPENAME:
            if self.strict_node_type:
                raise UnexpectedNodeTypeError(order_id, result.typename)
            logger.debug(
                "Node is not an order",
                extra={"order_id": order_id, "typename": result.typename},
            )
            return None

        return unwrap_order(result)

    def list(self, query: str) -> list[Order]:
        """Export every order matching a search filter, e.g. ``status:open``."""
        compiled = compile_operation(OrderOperation.LIST, query=query)
        return parse_flat_orders(self._bulk_query(compiled))

    def list_all(self) -> list[Order]:
        """Export every order in the shop.

        Line items carry a reduced field set (no SKU, title or vendor).
        """
        compiled = compile_operation(OrderOperation.LIST_ALL)
        return parse_flat_orders(self._bulk_query(compiled))

    def update(self, order_input: OrderInput) -> None:
        """Apply an order update.

        Fields left as None are not sent. An empty tag list or note is sent
        and clears the value.

        Raises:
            ShopifyUserError: If the API rejects the change.
        """
        compiled = compile_operation(OrderOperation.UPDATE, order_input=order_input)
        logger.debug(
            "Dispatching order mutation",
            extra={"operation": compiled.operation.value, "order_id": order_input.id},
        )
        data = self._executor.mutate(compiled.document, compiled.variables)

        payload = data.get("orderUpdate")
        if payload is None:
            raise ShopifyDecodeError("Mutation response has no orderUpdate payload")

        user_errors = [parse_model(UserError, e) for e in payload.get("userErrors") or []]
        if user_errors:
            raise ShopifyUserError(user_errors)

    def get_fulfillment_orders_at_location(
        self,
        order_id: ID,
        location_id: ID,
    ) -> list[FulfillmentOrder]:
        """Export an order's fulfillment orders assigned to one location."""
        compiled = compile_operation(
            OrderOperation.FULFILLMENT_ORDERS_AT_LOCATION,
            order_id=order_id,
            location_id=location_id,
        )
        return parse_flat_fulfillment_orders(self._bulk_query(compiled))

    def _query(self, compiled: CompiledQuery) -> dict[str, Any]:
        logger.debug(
            "Dispatching synchronous query",
            extra={"operation": compiled.operation.value},
        )
        return self._executor.query(compiled.document, compiled.variables)

    def _bulk_query(self, compiled: CompiledQuery) -> list[dict[str, Any]]:
        logger.debug(
            "Dispatching bulk export",
            extra={"operation": compiled.operation.value},
        )
        return self._bulk_runner.bulk_query(compiled.document)


def build_order_service(
    bulk_runner: BulkRunner,
    settings: Settings | None = None,
) -> ShopifyOrderService:
    """Wire an order service to a ShopifyClient configured from settings."""
    settings = settings or get_settings()
    return ShopifyOrderService(
        ShopifyClient(settings),
        bulk_runner,
        strict_node_type=settings.shopify_strict_node_type,
    )
