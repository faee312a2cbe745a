"""Ingest orchestration for single inbound records.

This module runs one record through normalization, sequential asset
materialization, and the handle-keyed upsert. Runs share no mutable
state, so records can be processed concurrently.
"""

from __future__ import annotations

import structlog

from core.http_url import is_http_url
from core.logging_config import get_logger
from core.types import (
    AssetReference,
    ExternalRecord,
    IngestResult,
    MaterializedAssets,
    NormalizedRecord,
)
from ingest.payload_normalizer import normalize
from schema.field_catalog import ANIMAL_CATALOG, FieldCatalog
from store.asset_materializer import AssetMaterializer
from store.graphql_client import StoreExecutor
from store.upsert_engine import UpsertEngine

_LOGGER = get_logger(__name__)


class RecordIngestRunner:
    """Runner for one-record ingest execution."""

    def __init__(self, executor: StoreExecutor, catalog: FieldCatalog = ANIMAL_CATALOG) -> None:
        self._catalog = catalog
        self._materializer = AssetMaterializer(executor)
        self._upsert_engine = UpsertEngine(executor)

    def run(self, raw: ExternalRecord) -> IngestResult:
        """Normalize, materialize, and upsert one record.

        Args:
            raw: Untrusted upstream record.

        Returns:
            Ingest summary with the written entity.

        Raises:
            MissingIdentityError: If the record has no usable external id.
            StoreRejectedError: If the store rejects the upsert.
            TransportError: If the upsert call fails at the transport level.
        """
        record = normalize(raw, self._catalog)
        with structlog.contextvars.bound_contextvars(external_id=record.external_id):
            assets, attempted = self._materialize_assets(record)
            entity = self._upsert_engine.upsert(record, self._catalog, assets)
            materialized = (1 if assets.image else 0) + len(assets.gallery)
            _LOGGER.info(
                "record_ingested",
                handle=entity.handle,
                assets_attempted=attempted,
                assets_materialized=materialized,
            )
        return IngestResult(
            entity=entity,
            assets_attempted=attempted,
            assets_materialized=materialized,
        )

    def _materialize_assets(self, record: NormalizedRecord) -> tuple[MaterializedAssets, int]:
        """Upload the primary image and gallery in source order.

        Args:
            record: Normalized record with candidate URLs.

        Returns:
            Materialized assets and the number of upload attempts.
        """
        attempted = 0
        image: AssetReference | None = None
        if record.primary_image_url and is_http_url(record.primary_image_url):
            attempted += 1
            image = self._materializer.materialize(record.primary_image_url)
        elif record.primary_image_url:
            _LOGGER.warning("image_url_skipped", url=record.primary_image_url)
        gallery: list[AssetReference] = []
        for url in record.gallery_urls:
            attempted += 1
            asset = self._materializer.materialize(url)
            if asset is not None:
                gallery.append(asset)
        return MaterializedAssets(image=image, gallery=tuple(gallery)), attempted


def ingest_record(
    raw: ExternalRecord,
    executor: StoreExecutor,
    catalog: FieldCatalog = ANIMAL_CATALOG,
) -> IngestResult:
    """Run the single-record ingest pipeline.

    Args:
        raw: Untrusted upstream record.
        executor: Store query capability.
        catalog: Canonical field catalog.

    Returns:
        Ingest summary with the written entity.
    """
    return RecordIngestRunner(executor, catalog).run(raw)
