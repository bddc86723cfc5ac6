"""Typed order records mapped from the Shopify Admin GraphQL API.

Records come in two shapes:
- flat (``Order``, ``FulfillmentOrder``), as produced by bulk exports where
  every nested collection is already a plain list
- connection (``OrderQueryResult``, ``FulfillmentOrderQueryResult``), which
  keeps the wire's ``{edges: [{node: ...}]}`` nesting until unwrapped

All records are immutable snapshots built fresh for each request.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

ID = str

T = TypeVar("T")


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


def _none_to_connection(value: Any) -> Any:
    return {} if value is None else value


class ShopifyModel(BaseModel):
    """Base for all records: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class MoneyV2(ShopifyModel):
    amount: Decimal
    currency_code: str


class MoneyBag(ShopifyModel):
    """The same amount in presentment (customer-facing) and shop currency."""

    presentment_money: MoneyV2 | None = None
    shop_money: MoneyV2 | None = None


class Customer(ShopifyModel):
    id: ID | None = None
    legacy_resource_id: str | None = None
    first_name: str | None = None
    display_name: str | None = None
    email: str | None = None


class MailingAddress(ShopifyModel):
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    province: str | None = None
    country: str | None = None
    zip: str | None = None


class ShippingLine(ShopifyModel):
    title: str | None = None
    original_price_set: MoneyBag | None = None


class TaxLine(ShopifyModel):
    price_set: MoneyBag | None = None
    rate: float | None = None
    rate_percentage: float | None = None
    title: str | None = None


class SelectedOption(ShopifyModel):
    name: str
    value: str


class LineItemProduct(ShopifyModel):
    id: ID | None = None
    legacy_resource_id: str | None = None


class LineItemVariant(ShopifyModel):
    id: ID | None = None
    legacy_resource_id: str | None = None
    selected_options: Annotated[list[SelectedOption], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )


class LineItem(ShopifyModel):
    id: ID | None = None
    sku: str | None = None
    quantity: int | None = None
    fulfillable_quantity: int | None = None
    vendor: str | None = None
    title: str | None = None
    variant_title: str | None = None
    product: LineItemProduct | None = None
    variant: LineItemVariant | None = None
    original_total_set: MoneyBag | None = None
    original_unit_price_set: MoneyBag | None = None
    discounted_unit_price_set: MoneyBag | None = None


class FulfillmentOrderLineItem(ShopifyModel):
    id: ID | None = None
    remaining_quantity: int | None = None
    total_quantity: int | None = None
    # Most queries only select the SKU of the originating line item.
    line_item: LineItem | None = None


class FulfillmentOrder(ShopifyModel):
    id: ID | None = None
    status: str | None = None
    line_items: Annotated[
        list[FulfillmentOrderLineItem], BeforeValidator(_none_to_list)
    ] = Field(default_factory=list)


class Edge(ShopifyModel, Generic[T]):
    node: T


class Connection(ShopifyModel, Generic[T]):
    """An ordered list of edges, each wrapping one node."""

    edges: Annotated[list[Edge[T]], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )

    def nodes(self) -> list[T]:
        return [edge.node for edge in self.edges]


class OrderBase(ShopifyModel):
    id: ID | None = None
    legacy_resource_id: str | None = None
    name: str | None = None
    created_at: datetime | None = None
    customer: Customer | None = None
    client_ip: str | None = None
    tax_lines: Annotated[list[TaxLine], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )
    total_received_set: MoneyBag | None = None
    shipping_address: MailingAddress | None = None
    shipping_line: ShippingLine | None = None
    note: str | None = None
    tags: Annotated[list[str], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )


class Order(OrderBase):
    """Flat order: nested collections are plain lists."""

    line_items: Annotated[list[LineItem], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )
    fulfillment_orders: Annotated[
        list[FulfillmentOrder], BeforeValidator(_none_to_list)
    ] = Field(default_factory=list)


class FulfillmentOrderQueryResult(ShopifyModel):
    id: ID | None = None
    status: str | None = None
    line_items: Annotated[
        Connection[FulfillmentOrderLineItem], BeforeValidator(_none_to_connection)
    ] = Field(default_factory=Connection[FulfillmentOrderLineItem])


class OrderQueryResult(OrderBase):
    """Order as returned by a single-node lookup, nested connections intact."""

    typename: str | None = Field(default=None, alias="__typename")
    line_items: Annotated[
        Connection[LineItem], BeforeValidator(_none_to_connection)
    ] = Field(default_factory=Connection[LineItem])
    fulfillment_orders: Annotated[
        Connection[FulfillmentOrderQueryResult], BeforeValidator(_none_to_connection)
    ] = Field(default_factory=Connection[FulfillmentOrderQueryResult])


class OrderInput(ShopifyModel):
    """Mutable subset of an order accepted by ``orderUpdate``.

    ``None`` means "leave unchanged" and is never sent. An empty list or
    string is sent as-is and clears the value remotely.
    """

    id: ID
    tags: list[str] | None = None
    note: str | None = None

    def to_variables(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class UserError(ShopifyModel):
    field: Annotated[list[str], BeforeValidator(_none_to_list)] = Field(
        default_factory=list
    )
    message: str

    def __str__(self) -> str:
        if self.field:
            return f"{'.'.join(self.field)}: {self.message}"
        return self.message
