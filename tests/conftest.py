"""Shared fixtures: hand-written fakes for the order service collaborators."""

from typing import Any

import pytest

from src.orders.service import ShopifyOrderService


class FakeGraphExecutor:
    """Records every call and returns canned ``data`` objects (or raises)."""

    def __init__(self):
        self.query_calls: list[tuple[str, dict[str, Any] | None]] = []
        self.mutate_calls: list[tuple[str, dict[str, Any] | None]] = []
        self.query_response: dict[str, Any] | Exception = {}
        self.mutate_response: dict[str, Any] | Exception = {}

    def query(self, document: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        self.query_calls.append((document, variables))
        if isinstance(self.query_response, Exception):
            raise self.query_response
        return self.query_response

    def mutate(self, document: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        self.mutate_calls.append((document, variables))
        if isinstance(self.mutate_response, Exception):
            raise self.mutate_response
        return self.mutate_response


class FakeBulkRunner:
    """Records every submitted document and returns canned records (or raises)."""

    def __init__(self):
        self.documents: list[str] = []
        self.records: list[dict[str, Any]] | Exception = []

    def bulk_query(self, document: str) -> list[dict[str, Any]]:
        self.documents.append(document)
        if isinstance(self.records, Exception):
            raise self.records
        return self.records


@pytest.fixture
def executor():
    return FakeGraphExecutor()


@pytest.fixture
def bulk_runner():
    return FakeBulkRunner()


@pytest.fixture
def service(executor, bulk_runner):
    return ShopifyOrderService(executor, bulk_runner)


def money_bag(amount: str, currency: str = "EUR") -> dict[str, Any]:
    money = {"amount": amount, "currencyCode": currency}
    return {"presentmentMoney": money, "shopMoney": dict(money)}


def line_item_node(index: int) -> dict[str, Any]:
    return {
        "id": f"gid://shopify/LineItem/{index}",
        "sku": f"SKU-{index:03d}",
        "quantity": index,
        "fulfillableQuantity": index,
        "vendor": "ACME",
        "title": f"Product {index}",
        "variantTitle": "Large",
        "product": {"id": f"gid://shopify/Product/{index}", "legacyResourceId": str(index)},
        "variant": {
            "id": f"gid://shopify/ProductVariant/{index}",
            "legacyResourceId": str(100 + index),
            "selectedOptions": [{"name": "Size", "value": "Large"}],
        },
        "originalTotalSet": money_bag(f"{index * 10}.00"),
        "originalUnitPriceSet": money_bag("10.00"),
        "discountedUnitPriceSet": money_bag("8.50"),
    }


def fulfillment_order_node(index: int, line_item_count: int = 2) -> dict[str, Any]:
    return {
        "id": f"gid://shopify/FulfillmentOrder/{index}",
        "status": "OPEN",
        "lineItems": {
            "edges": [
                {
                    "node": {
                        "id": f"gid://shopify/FulfillmentOrderLineItem/{index}{n}",
                        "remainingQuantity": n,
                        "totalQuantity": n + 1,
                        "lineItem": {"sku": f"SKU-{n:03d}"},
                    }
                }
                for n in range(1, line_item_count + 1)
            ]
        },
    }


def order_node(line_items: int = 3, fulfillment_orders: int = 2) -> dict[str, Any]:
    """An Order node as returned by the single-order lookup."""
    return {
        "__typename": "Order",
        "id": "gid://shopify/Order/1001",
        "legacyResourceId": "1001",
        "name": "#1001",
        "createdAt": "2024-01-15T10:30:00Z",
        "customer": {
            "id": "gid://shopify/Customer/7",
            "legacyResourceId": "7",
            "firstName": "Jane",
            "displayName": "Jane Doe",
            "email": "jane@example.com",
        },
        "clientIp": "203.0.113.5",
        "shippingAddress": {
            "address1": "Main St 1",
            "address2": None,
            "city": "Berlin",
            "province": None,
            "country": "Germany",
            "zip": "10115",
        },
        "shippingLine": {"title": "Standard", "originalPriceSet": money_bag("4.99")},
        "taxLines": [
            {"priceSet": money_bag("3.80"), "rate": 0.19, "ratePercentage": 19.0, "title": "VAT"}
        ],
        "totalReceivedSet": money_bag("34.99"),
        "note": "Leave at the door",
        "tags": ["vip", "wholesale", "vip"],
        "lineItems": {"edges": [{"node": line_item_node(i)} for i in range(1, line_items + 1)]},
        "fulfillmentOrders": {
            "edges": [{"node": fulfillment_order_node(i)} for i in range(1, fulfillment_orders + 1)]
        },
    }


@pytest.fixture
def sample_order_node():
    return order_node()
