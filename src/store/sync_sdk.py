"""Python SDK for store sync operations.

This module exposes high-level APIs for schema reconciliation and
record ingest backed by one store executor.
"""

from __future__ import annotations

import threading

from core.config import SyncConfig
from core.types import ExternalRecord, IngestResult, NormalizedRecord, ReconcileResult
from ingest.payload_normalizer import normalize
from ingest.pipeline import RecordIngestRunner
from schema.field_catalog import ANIMAL_CATALOG, FieldCatalog
from schema.reconciler import SchemaReconciler
from store.graphql_client import GraphQLClient, StoreExecutor


class SyncClient:
    """Primary SDK entry point for sync workflows."""

    def __init__(
        self,
        config: SyncConfig | None = None,
        executor: StoreExecutor | None = None,
        catalog: FieldCatalog = ANIMAL_CATALOG,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            executor: Optional store executor; an httpx client is built
                from config when omitted.
            catalog: Canonical field catalog.
        """
        self._config = config or SyncConfig.from_env()
        self._catalog = catalog
        self._executor = executor
        self._owned_client: GraphQLClient | None = None
        self._executor_lock = threading.Lock()

    @property
    def config(self) -> SyncConfig:
        """Runtime configuration used by this client."""
        return self._config

    def reconcile_schema(self, dry_run: bool = False) -> ReconcileResult:
        """Ensure the store type exists with every catalog field.

        Args:
            dry_run: Only report what would be created.

        Returns:
            Reconcile outcome.

        Raises:
            SchemaValidationError: If the store rejects the change.
            TransportError: If a store call fails.
        """
        return SchemaReconciler(self._get_executor()).reconcile(self._catalog, dry_run=dry_run)

    def ingest(self, raw: ExternalRecord) -> IngestResult:
        """Ingest one upstream record into the store.

        Args:
            raw: Untrusted upstream record.

        Returns:
            Ingest summary.

        Raises:
            MissingIdentityError: If the record has no usable external id.
            StoreRejectedError: If the store rejects the upsert.
            TransportError: If the upsert call fails.
        """
        return RecordIngestRunner(self._get_executor(), self._catalog).run(raw)

    def normalize(self, raw: ExternalRecord) -> NormalizedRecord:
        """Normalize one record without touching the store."""
        return normalize(raw, self._catalog)

    def close(self) -> None:
        """Release the HTTP client created by this SDK client, if any."""
        if self._owned_client is not None:
            self._owned_client.close()
            self._owned_client = None
            self._executor = None

    def _get_executor(self) -> StoreExecutor:
        """Return the injected executor or lazily build the httpx one."""
        with self._executor_lock:
            if self._executor is None:
                self._owned_client = GraphQLClient(self._config)
                self._executor = self._owned_client
            return self._executor
