"""Runtime configuration model for shelter-sync.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_API_VERSION,
    DEFAULT_STORE_DOMAIN,
    DEFAULT_TIMEOUT_SECONDS,
    GRAPHQL_PATH_TEMPLATE,
)
from core.errors import SyncConfigError


@dataclass(frozen=True)
class SyncConfig:
    """Validated runtime configuration.

    Attributes:
        store_domain: Store host, e.g. ``example.myshopify.com``.
        admin_token: Admin API access token, required for store calls.
        api_version: Admin GraphQL API version segment.
        timeout_seconds: Upper bound for every store HTTP call.
        webhook_secret: Shared secret expected on record webhooks.
        setup_secret: Bearer secret expected on schema setup calls.
    """

    store_domain: str
    admin_token: str | None
    api_version: str
    timeout_seconds: float
    webhook_secret: str | None = None
    setup_secret: str | None = None

    @classmethod
    def from_env(cls) -> "SyncConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            SyncConfigError: If environment values are invalid.
        """
        store_domain = os.getenv("SHOPIFY_STORE_DOMAIN") or DEFAULT_STORE_DOMAIN
        timeout_value = os.getenv("SHOPIFY_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        return cls(
            store_domain=_parse_store_domain(store_domain),
            admin_token=os.getenv("SHOPIFY_ADMIN_TOKEN") or None,
            api_version=os.getenv("SHOPIFY_API_VERSION") or DEFAULT_API_VERSION,
            timeout_seconds=_parse_timeout(timeout_value),
            webhook_secret=os.getenv("WEBHOOK_SECRET") or None,
            setup_secret=os.getenv("SETUP_SECRET") or None,
        )

    @property
    def graphql_url(self) -> str:
        """Admin GraphQL endpoint for the configured store."""
        path = GRAPHQL_PATH_TEMPLATE.format(api_version=self.api_version)
        return f"https://{self.store_domain}{path}"

    def require_admin_token(self) -> str:
        """Return the admin token or fail with an actionable message.

        Raises:
            SyncConfigError: If no admin token is configured.
        """
        if not self.admin_token:
            raise SyncConfigError(
                "Missing SHOPIFY_ADMIN_TOKEN. "
                "Set it to an Admin API access token with metaobject and file scopes."
            )
        return self.admin_token


def _parse_store_domain(raw_value: str) -> str:
    """Strip scheme and trailing slashes from the store domain.

    Args:
        raw_value: Raw domain from environment.

    Returns:
        Bare host name.

    Raises:
        SyncConfigError: If the value is empty after cleanup.
    """
    domain = raw_value.strip().removeprefix("https://").removeprefix("http://").strip("/")
    if not domain:
        raise SyncConfigError(
            "Invalid SHOPIFY_STORE_DOMAIN value: expected a host such as "
            "'example.myshopify.com'."
        )
    return domain


def _parse_timeout(raw_value: str) -> float:
    """Parse the HTTP timeout environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Positive timeout in seconds.

    Raises:
        SyncConfigError: If value is not a positive number.
    """
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise SyncConfigError(
            "Invalid SHOPIFY_TIMEOUT_SECONDS value: "
            f"expected number, got '{raw_value}'. "
            "Set SHOPIFY_TIMEOUT_SECONDS to a numeric value."
        ) from error
    if timeout <= 0:
        raise SyncConfigError(
            f"Invalid SHOPIFY_TIMEOUT_SECONDS value: expected a positive number, got {timeout}."
        )
    return timeout
