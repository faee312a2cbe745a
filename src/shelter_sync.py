"""Public SDK surface for shelter-sync.

This module provides a stable import path for library users.
It re-exports the primary client, catalog, and typed models.
"""

from __future__ import annotations

from core.config import SyncConfig
from core.errors import (
    MissingIdentityError,
    SchemaValidationError,
    StoreRejectedError,
    SyncError,
    TransportError,
)
from core.types import (
    AssetReference,
    FieldDefinition,
    IngestResult,
    NormalizedRecord,
    ReconcileResult,
    TargetEntity,
    TypeDefinition,
)
from ingest.payload_normalizer import normalize
from schema.field_catalog import ANIMAL_CATALOG, FieldCatalog
from store.graphql_client import GraphQLClient, GraphQLErr, GraphQLOk, StoreExecutor
from store.sync_sdk import SyncClient

__all__ = [
    "ANIMAL_CATALOG",
    "AssetReference",
    "FieldCatalog",
    "FieldDefinition",
    "GraphQLClient",
    "GraphQLErr",
    "GraphQLOk",
    "IngestResult",
    "MissingIdentityError",
    "NormalizedRecord",
    "ReconcileResult",
    "SchemaValidationError",
    "StoreExecutor",
    "StoreRejectedError",
    "SyncClient",
    "SyncConfig",
    "SyncError",
    "TargetEntity",
    "TransportError",
    "TypeDefinition",
    "normalize",
]
