"""Protocols for the order service and the collaborators it runs on.

The service only depends on these contracts, so any transport or bulk
export implementation (or a test fake) can be plugged in.
"""

from __future__ import annotations

from typing import Any, Protocol

from .models import ID, FulfillmentOrder, Order, OrderInput


class GraphExecutor(Protocol):
    """Synchronous GraphQL request/response transport.

    Both methods return the response's ``data`` object and raise
    ShopifyTransportError, ShopifyDecodeError or ShopifyAPIError.
    """

    def query(self, document: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        ...

    def mutate(self, document: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        ...


class BulkRunner(Protocol):
    """Asynchronous bulk export of an unbounded query."""

    def bulk_query(self, document: str) -> list[dict[str, Any]]:
        """Run a bulk export and return its records, already flattened.

        Nested connections in the document come back as plain lists on the
        parent record, in export order. Raises BulkJobError on any failure;
        no partial results are returned.
        """
        ...


class OrderService(Protocol):
    """Read and update access to orders."""

    def get(self, order_id: ID) -> Order | None:
        ...

    def list(self, query: str) -> list[Order]:
        ...

    def list_all(self) -> list[Order]:
        ...

    def update(self, order_input: OrderInput) -> None:
        ...

    def get_fulfillment_orders_at_location(
        self, order_id: ID, location_id: ID
    ) -> list[FulfillmentOrder]:
        ...
