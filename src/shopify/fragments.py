"""Reusable GraphQL field selections for order documents.

Each constant is the body of a selection set (without the surrounding
braces) so it can be dropped into any document that needs it.
"""

MONEY_V2_FIELDS = """
amount
currencyCode
"""

MONEY_BAG_FIELDS = f"""
presentmentMoney {{{MONEY_V2_FIELDS}}}
shopMoney {{{MONEY_V2_FIELDS}}}
"""

MAILING_ADDRESS_FIELDS = """
address1
address2
city
province
country
zip
"""

CUSTOMER_FIELDS = """
id
legacyResourceId
firstName
displayName
email
"""

# Shared by get, list and list-all.
ORDER_BASE_FIELDS = f"""
id
legacyResourceId
name
createdAt
customer {{{CUSTOMER_FIELDS}}}
clientIp
shippingAddress {{{MAILING_ADDRESS_FIELDS}}}
shippingLine {{
  originalPriceSet {{{MONEY_BAG_FIELDS}}}
  title
}}
taxLines {{
  priceSet {{{MONEY_BAG_FIELDS}}}
  rate
  ratePercentage
  title
}}
totalReceivedSet {{{MONEY_BAG_FIELDS}}}
note
tags
"""

LINE_ITEM_PRODUCT_FIELDS = """
product {
  id
  legacyResourceId
}
"""

LINE_ITEM_VARIANT_FIELDS = """
variant {
  id
  legacyResourceId
  selectedOptions {
    name
    value
  }
}
"""

LINE_ITEM_FIELDS = f"""
id
sku
quantity
fulfillableQuantity
{LINE_ITEM_PRODUCT_FIELDS}
vendor
title
variantTitle
{LINE_ITEM_VARIANT_FIELDS}
originalTotalSet {{{MONEY_BAG_FIELDS}}}
originalUnitPriceSet {{{MONEY_BAG_FIELDS}}}
discountedUnitPriceSet {{{MONEY_BAG_FIELDS}}}
"""

# Reduced selection for whole-shop exports: no sku, vendor, titles or totals.
LINE_ITEM_EXPORT_FIELDS = f"""
id
quantity
{LINE_ITEM_PRODUCT_FIELDS}
{LINE_ITEM_VARIANT_FIELDS}
originalUnitPriceSet {{{MONEY_BAG_FIELDS}}}
discountedUnitPriceSet {{{MONEY_BAG_FIELDS}}}
"""

FULFILLMENT_ORDER_LINE_ITEM_FIELDS = """
id
remainingQuantity
totalQuantity
lineItem {
  sku
}
"""

USER_ERROR_FIELDS = """
field
message
"""


def connection(field: str, node_fields: str) -> str:
    """Wrap a node selection in the ``edges { node { ... } }`` connection shape.

    Args:
        field: Connection field including any arguments, e.g. ``lineItems(first: 50)``.
        node_fields: Selection set body for each node.
    """
    return f"{field} {{\n  edges {{\n    node {{{node_fields}}}\n  }}\n}}\n"
