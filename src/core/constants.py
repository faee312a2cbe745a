"""Core constants used across shelter-sync modules.

Store endpoints and normalizer limits live here so every layer
agrees on them.
"""

from __future__ import annotations

DEFAULT_STORE_DOMAIN = "mission-bay-puppy-rescue.myshopify.com"
DEFAULT_API_VERSION = "2024-07"
DEFAULT_TIMEOUT_SECONDS = 30.0
ADMIN_TOKEN_HEADER = "X-Shopify-Access-Token"
GRAPHQL_PATH_TEMPLATE = "/admin/api/{api_version}/graphql.json"
ANIMAL_TYPE_NAME = "animal"
ANIMAL_DISPLAY_NAME = "Animal"
DISPLAY_NAME_KEY = "name"
ASSET_ALT_TEXT = "animal"
ASSET_CONTENT_TYPE = "IMAGE"
MAX_GALLERY_ASSETS = 12
AVAILABLE_STATUS = "available"
HTTP_URL_PREFIXES = ("http://", "https://")
TRUE_TOKENS = ("true", "yes", "y", "1", "on", "checked")
UNIQUE_VALIDATION_NAME = "UNIQUE"
WEBHOOK_SECRET_HEADER = "x-webhook-secret"
