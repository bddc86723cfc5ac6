"""Tests for connection unwrapping and flat record parsing.

Tests cover:
- Edge order and count preservation
- Null and missing connections
- Full order round trip through nested connections
- Flat bulk records and shape mismatches
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from src.orders.models import Connection, LineItem, OrderQueryResult
from src.orders.unwrap import (
    parse_flat_fulfillment_orders,
    parse_flat_orders,
    unwrap_connection,
    unwrap_order,
)
from src.shopify.errors import ShopifyDecodeError

from conftest import line_item_node, order_node


class TestUnwrapConnection:
    """Tests for the generic connection unwrap."""

    @pytest.mark.parametrize("count", [0, 1, 7])
    def test_yields_one_node_per_edge_in_order(self, count):
        connection = Connection[LineItem].model_validate(
            {"edges": [{"node": {"id": f"gid://shopify/LineItem/{i}"}} for i in range(count)]}
        )
        nodes = unwrap_connection(connection)
        assert [n.id for n in nodes] == [f"gid://shopify/LineItem/{i}" for i in range(count)]

    def test_keeps_duplicates(self):
        """Nodes are neither deduplicated nor resorted."""
        connection = Connection[LineItem].model_validate(
            {"edges": [{"node": {"id": "b"}}, {"node": {"id": "a"}}, {"node": {"id": "b"}}]}
        )
        assert [n.id for n in unwrap_connection(connection)] == ["b", "a", "b"]

    def test_none_gives_empty_list(self):
        assert unwrap_connection(None) == []

    def test_null_edges_give_empty_list(self):
        connection = Connection[LineItem].model_validate({"edges": None})
        assert unwrap_connection(connection) == []


class TestUnwrapOrder:
    """Tests for flattening a single-order lookup."""

    def test_round_trip_counts(self, sample_order_node):
        """3 line items and 2 fulfillment orders with 2 lines each."""
        order = unwrap_order(OrderQueryResult.model_validate(sample_order_node))

        assert len(order.line_items) == 3
        assert len(order.fulfillment_orders) == 2
        for fulfillment_order in order.fulfillment_orders:
            assert len(fulfillment_order.line_items) == 2

    def test_round_trip_leaf_values(self, sample_order_node):
        """Unwrapped records should carry the exact leaf node values."""
        order = unwrap_order(OrderQueryResult.model_validate(sample_order_node))

        expected = [LineItem.model_validate(line_item_node(i)) for i in (1, 2, 3)]
        assert order.line_items == expected

        first_fo = order.fulfillment_orders[0]
        assert first_fo.id == "gid://shopify/FulfillmentOrder/1"
        assert first_fo.status == "OPEN"
        assert [li.id for li in first_fo.line_items] == [
            "gid://shopify/FulfillmentOrderLineItem/11",
            "gid://shopify/FulfillmentOrderLineItem/12",
        ]
        assert first_fo.line_items[1].remaining_quantity == 2
        assert first_fo.line_items[1].total_quantity == 3
        assert first_fo.line_items[1].line_item.sku == "SKU-002"

    def test_base_fields_copied(self, sample_order_node):
        order = unwrap_order(OrderQueryResult.model_validate(sample_order_node))

        assert order.id == "gid://shopify/Order/1001"
        assert order.legacy_resource_id == "1001"
        assert order.name == "#1001"
        assert order.created_at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert order.customer.display_name == "Jane Doe"
        assert order.client_ip == "203.0.113.5"
        assert order.tax_lines[0].rate_percentage == 19.0
        assert order.total_received_set.shop_money.amount == Decimal("34.99")
        assert order.total_received_set.presentment_money.currency_code == "EUR"
        assert order.shipping_address.city == "Berlin"
        assert order.shipping_line.title == "Standard"
        assert order.note == "Leave at the door"

    def test_tags_keep_order_and_duplicates(self, sample_order_node):
        order = unwrap_order(OrderQueryResult.model_validate(sample_order_node))
        assert order.tags == ["vip", "wholesale", "vip"]

    def test_missing_connections_unwrap_to_empty(self):
        node = order_node()
        del node["lineItems"]
        node["fulfillmentOrders"] = None

        order = unwrap_order(OrderQueryResult.model_validate(node))

        assert order.line_items == []
        assert order.fulfillment_orders == []

    def test_null_fulfillment_order_lines_unwrap_to_empty(self):
        node = order_node(fulfillment_orders=1)
        node["fulfillmentOrders"]["edges"][0]["node"]["lineItems"] = None

        order = unwrap_order(OrderQueryResult.model_validate(node))

        assert order.fulfillment_orders[0].line_items == []

    def test_flat_and_connection_forms_agree(self, sample_order_node):
        """A flat record with the same data should equal the unwrapped one."""
        flat = dict(sample_order_node)
        del flat["__typename"]
        flat["lineItems"] = [edge["node"] for edge in flat["lineItems"]["edges"]]
        flat["fulfillmentOrders"] = [
            {**edge["node"], "lineItems": [e["node"] for e in edge["node"]["lineItems"]["edges"]]}
            for edge in flat["fulfillmentOrders"]["edges"]
        ]

        [parsed] = parse_flat_orders([flat])

        assert parsed == unwrap_order(OrderQueryResult.model_validate(sample_order_node))


class TestFlatRecords:
    """Tests for bulk export records, which arrive already flat."""

    def test_orders_keep_export_order(self):
        records = [{"id": "gid://shopify/Order/2"}, {"id": "gid://shopify/Order/1"}]
        assert [o.id for o in parse_flat_orders(records)] == [
            "gid://shopify/Order/2",
            "gid://shopify/Order/1",
        ]

    def test_flat_line_items_are_lists(self):
        [order] = parse_flat_orders(
            [{"id": "gid://shopify/Order/1", "lineItems": [{"id": "a"}, {"id": "b"}]}]
        )
        assert [li.id for li in order.line_items] == ["a", "b"]
        assert order.fulfillment_orders == []
        assert order.tags == []

    def test_null_lists_become_empty(self):
        [order] = parse_flat_orders([{"id": "x", "tags": None, "lineItems": None, "taxLines": None}])
        assert order.tags == []
        assert order.line_items == []
        assert order.tax_lines == []

    def test_fulfillment_orders(self):
        records = [
            {
                "id": "gid://shopify/FulfillmentOrder/1",
                "status": "OPEN",
                "lineItems": [{"id": "l1", "remainingQuantity": 1, "lineItem": {"sku": "A"}}],
            }
        ]
        [fulfillment_order] = parse_flat_fulfillment_orders(records)
        assert fulfillment_order.line_items[0].line_item.sku == "A"

    def test_shape_mismatch_raises_decode_error(self):
        with pytest.raises(ShopifyDecodeError, match="Order"):
            parse_flat_orders([{"id": "x", "lineItems": "not a list"}])
