"""Shopify GraphQL API client with throttling and backoff.

Synchronous transport for single-order lookups and mutations:
- Monitors rate limit (throttling) via extensions.cost
- Implements proactive throttling when points are low
- Uses exponential backoff on 429 errors and timeouts
- Maps HTTP, decoding and GraphQL failures onto the shared error hierarchy
"""

import random
import time
from dataclasses import dataclass
from typing import Any

import requests

from src.config import Settings, get_settings
from src.logging_config import get_logger

from .errors import (
    ShopifyAPIError,
    ShopifyDecodeError,
    ShopifyThrottledError,
    ShopifyTransportError,
    error_message,
)

logger = get_logger(__name__)


@dataclass
class ThrottleStatus:
    """Tracks the current state of Shopify's rate limiting.

    Shopify GraphQL API uses a cost-based throttling system where each query
    consumes points from a bucket that refills over time.

    Attributes:
        requested_cost: The cost that was requested for the query.
        actual_cost: The actual cost charged for the query (may differ).
        currently_available: Points currently available in the bucket.
        restore_rate: Points restored per second.
        maximum_available: Maximum bucket capacity.
    """

    requested_cost: float
    actual_cost: float
    currently_available: float
    restore_rate: float
    maximum_available: float

    @classmethod
    def from_extensions(cls, extensions: dict[str, Any]) -> "ThrottleStatus":
        """Parse throttle status from the 'extensions' field of a GraphQL response."""
        cost = extensions.get("cost", {})
        throttle = cost.get("throttleStatus", {})

        return cls(
            requested_cost=cost.get("requestedQueryCost", 0),
            actual_cost=cost.get("actualQueryCost", 0) or 0,
            currently_available=throttle.get("currentlyAvailable", 1000),
            restore_rate=throttle.get("restoreRate", 50),
            maximum_available=throttle.get("maximumAvailable", 1000),
        )

    def wait_time_seconds(self, next_query_cost: float) -> float:
        """Seconds to wait until the bucket holds ``next_query_cost`` points, or 0."""
        if self.currently_available >= next_query_cost:
            return 0

        points_needed = next_query_cost - self.currently_available
        # 10% buffer over the exact restore time
        return max(0, (points_needed / self.restore_rate) * 1.1)


class ShopifyClient:
    """GraphQL executor for the Shopify Admin API.

    Implements the ``GraphExecutor`` protocol consumed by the order service:
    ``query`` and ``mutate`` both return the response's ``data`` object.

    Example:
        >>> with ShopifyClient() as client:
        ...     data = client.query("query { shop { name } }")
    """

    INITIAL_BACKOFF_SECONDS = 1.0
    MAX_BACKOFF_SECONDS = 60.0

    # The single-order lookup (50 line items, 5x50 fulfillment order lines)
    # is the most expensive document this client sends.
    ESTIMATED_QUERY_COST = 350

    def __init__(
        self,
        settings: Settings | None = None,
        session: requests.Session | None = None,
    ):
        """Initialize the Shopify client.

        Args:
            settings: Application settings. If None, loads from environment.
            session: HTTP session to use. A new one is created if None.
        """
        self.settings = settings or get_settings()
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Content-Type": "application/json",
                "X-Shopify-Access-Token": self.settings.shopify_api_token,
            }
        )
        self._last_throttle_status: ThrottleStatus | None = None

    def query(self, document: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a GraphQL query and return its 'data' object."""
        return self._execute(document, variables)

    def mutate(self, document: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        """Run a GraphQL mutation and return its 'data' object."""
        return self._execute(document, variables)

    def _execute(
        self,
        document: str,
        variables: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Execute a GraphQL document with throttling and backoff handling.

        Raises:
            ShopifyThrottledError: If max retries exceeded due to throttling.
            ShopifyAPIError: If the API returns errors.
            ShopifyDecodeError: If the response body is not a JSON object.
            ShopifyTransportError: For other request failures.
        """
        url = self.settings.shopify_graphql_url
        max_retries = self.settings.shopify_max_retries
        payload = {"query": document, "variables": variables or {}}

        retry_count = 0

        while True:
            self._apply_proactive_throttle()

            try:
                logger.debug(
                    "Executing GraphQL document",
                    extra={"url": url, "variables": variables, "retry_count": retry_count},
                )
                response = self._session.post(
                    url, json=payload, timeout=self.settings.shopify_request_timeout
                )
            except requests.exceptions.Timeout as e:
                retry_count += 1
                if retry_count > max_retries:
                    raise ShopifyTransportError(
                        f"Request timeout after {max_retries} retries"
                    ) from e
                self._backoff(retry_count, "Request timeout, retrying")
                continue
            except requests.exceptions.RequestException as e:
                raise ShopifyTransportError(f"Request failed: {e}") from e

            if response.status_code == 429:
                retry_count += 1
                if retry_count > max_retries:
                    raise ShopifyThrottledError(
                        f"Max retries ({max_retries}) exceeded due to rate limiting"
                    )
                self._backoff(retry_count, "Rate limited by Shopify API, backing off")
                continue

            try:
                response.raise_for_status()
            except requests.exceptions.HTTPError as e:
                raise ShopifyTransportError(f"HTTP error: {e}") from e

            return self._parse_response(response)

    def _parse_response(self, response: requests.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise ShopifyDecodeError(f"Response is not valid JSON: {e}") from e
        if not isinstance(body, dict):
            raise ShopifyDecodeError(
                f"Expected a JSON object, got {type(body).__name__}"
            )

        if "extensions" in body:
            self._last_throttle_status = ThrottleStatus.from_extensions(body["extensions"])
            logger.debug(
                "Throttle status updated",
                extra={
                    "available_points": self._last_throttle_status.currently_available,
                    "restore_rate": self._last_throttle_status.restore_rate,
                    "actual_cost": self._last_throttle_status.actual_cost,
                },
            )

        errors = body.get("errors")
        if errors:
            if not isinstance(errors, list):
                errors = [errors]
            raise ShopifyAPIError(
                f"GraphQL errors: {'; '.join(error_message(e) for e in errors)}",
                errors=errors,
            )

        return body.get("data") or {}

    def _calculate_backoff(self, retry_count: int) -> float:
        """Exponential backoff with jitter: min(MAX_BACKOFF, INITIAL * 2^retry_count + random(0, 1))."""
        exponential_wait = self.INITIAL_BACKOFF_SECONDS * 2**retry_count
        jitter = random.uniform(0, 1)
        return min(self.MAX_BACKOFF_SECONDS, exponential_wait + jitter)

    def _backoff(self, retry_count: int, message: str) -> None:
        backoff_time = self._calculate_backoff(retry_count)
        logger.warning(
            message,
            extra={"retry_count": retry_count, "backoff_seconds": backoff_time},
        )
        time.sleep(backoff_time)

    def _apply_proactive_throttle(self) -> None:
        """Wait if the last known bucket level is below the estimated query cost."""
        if self._last_throttle_status is None:
            return

        wait_time = self._last_throttle_status.wait_time_seconds(self.ESTIMATED_QUERY_COST)

        if wait_time > 0:
            logger.info(
                "Proactive throttling: waiting for rate limit points to restore",
                extra={
                    "wait_seconds": round(wait_time, 2),
                    "available_points": self._last_throttle_status.currently_available,
                    "needed_points": self.ESTIMATED_QUERY_COST,
                },
            )
            time.sleep(wait_time)

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self) -> "ShopifyClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
