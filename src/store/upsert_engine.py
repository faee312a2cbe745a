"""Handle-keyed entity upsert.

The record's external id is used verbatim as the store handle, so
replaying a record overwrites the same entity instead of creating a
duplicate. Field values are serialized to the store's string format.
"""

from __future__ import annotations

import json

from core.constants import ANIMAL_TYPE_NAME
from core.errors import StoreRejectedError
from core.logging_config import get_logger
from core.types import FieldValue, MaterializedAssets, NormalizedRecord, TargetEntity
from schema.field_catalog import FieldCatalog
from store.graphql_client import StoreExecutor, parse_user_errors, require_data
from store.queries import UPSERT_METAOBJECT

_LOGGER = get_logger(__name__)


class UpsertEngine:
    """Write normalized records as store entities."""

    def __init__(self, executor: StoreExecutor, type_name: str = ANIMAL_TYPE_NAME) -> None:
        self._executor = executor
        self._type_name = type_name

    def upsert(
        self,
        record: NormalizedRecord,
        catalog: FieldCatalog,
        assets: MaterializedAssets | None = None,
    ) -> TargetEntity:
        """Create or overwrite the entity addressed by the record's external id.

        Args:
            record: Normalized record.
            catalog: Canonical field catalog defining which keys are sent.
            assets: Materialized asset references, if any succeeded.

        Returns:
            Target entity as written.

        Raises:
            StoreRejectedError: If the store reports user errors.
            TransportError: If the upsert call fails at the transport level.
        """
        field_values = build_field_values(record, catalog, assets or MaterializedAssets())
        variables = {
            "handle": {"type": self._type_name, "handle": record.external_id},
            "metaobject": {
                "fields": [{"key": key, "value": value} for key, value in field_values.items()],
                "capabilities": {"publishable": {"status": record.publication_state}},
            },
        }
        data = require_data(self._executor.execute(UPSERT_METAOBJECT, variables), step="upsert")
        payload = data.get("metaobjectUpsert") or {}
        user_errors = parse_user_errors(payload.get("userErrors"))
        if user_errors:
            first = user_errors[0]
            _LOGGER.error(
                "upsert_rejected",
                external_id=record.external_id,
                field=".".join(first.field),
                message=first.message,
            )
            raise StoreRejectedError(first.message, step="upsert", user_errors=user_errors)
        metaobject = payload.get("metaobject") or {}
        if not metaobject.get("id"):
            raise StoreRejectedError(
                "Store returned no entity for the upsert.",
                step="upsert",
            )
        entity = TargetEntity(
            id=str(metaobject["id"]),
            handle=str(metaobject.get("handle") or record.external_id),
            type_name=str(metaobject.get("type") or self._type_name),
            field_values=field_values,
            publication_state=record.publication_state,
        )
        _LOGGER.info(
            "entity_upserted",
            external_id=record.external_id,
            entity_id=entity.id,
            status=entity.publication_state,
        )
        return entity


def build_field_values(
    record: NormalizedRecord,
    catalog: FieldCatalog,
    assets: MaterializedAssets,
) -> dict[str, str]:
    """Serialize canonical values and asset references per catalog field.

    Args:
        record: Normalized record.
        catalog: Catalog whose keys are emitted, in declaration order.
        assets: Asset references; asset fields are omitted when absent.

    Returns:
        Ordered key to serialized value mapping.
    """
    field_values: dict[str, str] = {}
    for definition in catalog:
        if definition.primitive_type == "asset_reference":
            if assets.image is not None:
                field_values[definition.key] = assets.image.id
        elif definition.primitive_type == "asset_reference_list":
            if assets.gallery:
                field_values[definition.key] = json.dumps([asset.id for asset in assets.gallery])
        elif definition.key in record.values:
            field_values[definition.key] = serialize_value(record.values[definition.key])
    return field_values


def serialize_value(value: FieldValue) -> str:
    """Render one canonical value in the store's string format."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return value
