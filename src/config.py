"""Configuration module for the Shopify order accessor.

Uses pydantic-settings for environment variable loading and validation.
"""

from enum import Enum
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(str, Enum):
    """Log output format."""

    CONSOLE = "console"
    JSON = "json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Environment variables can be set directly or via a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Shopify configuration
    shopify_shop_url: str = Field(
        ...,
        description="Shopify shop URL (e.g., myshop.myshopify.com)",
    )
    shopify_api_token: str = Field(
        ...,
        description="Shopify Admin API access token",
    )
    shopify_api_version: str = Field(
        default="2024-01",
        description="Shopify API version",
    )
    shopify_request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for a single GraphQL request",
    )
    shopify_max_retries: int = Field(
        default=5,
        ge=0,
        description="Retries on throttling (429) and timeouts before giving up",
    )
    shopify_strict_node_type: bool = Field(
        default=False,
        description="Raise instead of returning None when an order lookup hits a non-Order node",
    )

    # Logging configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: LogFormat = Field(
        default=LogFormat.CONSOLE,
        description="Log output format: console or json",
    )

    @field_validator("shopify_shop_url", mode="after")
    @classmethod
    def normalize_shop_url(cls, v: str) -> str:
        """Normalize shop URL by removing protocol prefix if present."""
        v = v.strip()
        for prefix in ("https://", "http://"):
            if v.startswith(prefix):
                v = v[len(prefix) :]
        return v.rstrip("/")

    @property
    def shopify_graphql_url(self) -> str:
        """Construct the full Shopify GraphQL API endpoint URL."""
        return f"https://{self.shopify_shop_url}/admin/api/{self.shopify_api_version}/graphql.json"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Call get_settings.cache_clear() to reload settings if needed.
    """
    return Settings()
