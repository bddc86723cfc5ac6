"""Exception hierarchy shared by the GraphQL transport and the order accessor."""

from typing import Any


class ShopifyClientError(Exception):
    """Base exception for Shopify client errors."""

    pass


class ShopifyTransportError(ShopifyClientError):
    """Raised when the Shopify API could not be reached or answered with an HTTP error."""

    pass


class ShopifyThrottledError(ShopifyTransportError):
    """Raised when the API is throttled and max retries exceeded."""

    pass


class ShopifyDecodeError(ShopifyClientError):
    """Raised when a response body or payload does not have the expected shape."""

    pass


class ShopifyAPIError(ShopifyClientError):
    """Raised when the Shopify API returns top-level GraphQL errors."""

    def __init__(self, message: str, errors: list[Any] | None = None):
        super().__init__(message)
        self.errors = errors or []

    @property
    def messages(self) -> list[str]:
        return [error_message(e) for e in self.errors]


def error_message(error: Any) -> str:
    """Message of one GraphQL error entry; entries that are not objects are stringified."""
    if isinstance(error, dict):
        return error.get("message", "Unknown error")
    return str(error)


class ShopifyUserError(ShopifyClientError):
    """Raised when a mutation is accepted but the change is rejected.

    Carries every user error reported by the API so callers can tell
    "change rejected" apart from "request malformed" (ShopifyAPIError).
    """

    def __init__(self, user_errors: list[Any]):
        self.user_errors = list(user_errors)
        rendered = "; ".join(str(e) for e in self.user_errors)
        super().__init__(f"User errors: {rendered}")


class BulkJobError(ShopifyClientError):
    """Raised by bulk runners when an export fails to submit, run, or decode."""

    pass


class UnexpectedNodeTypeError(ShopifyClientError):
    """Raised in strict mode when an id resolves to a node that is not an Order."""

    def __init__(self, node_id: str, typename: str | None):
        super().__init__(f"Node {node_id} is a {typename or 'unknown type'}, expected Order")
        self.node_id = node_id
        self.typename = typename


class InvalidQueryValueError(ShopifyClientError, ValueError):
    """Raised when a value cannot be safely substituted into a query document."""

    pass
