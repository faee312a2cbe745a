"""Additive schema reconciliation against the store.

This module makes sure the store type exists and carries every
catalog field. It only ever creates the type or appends missing
fields: existing fields are never edited, retyped, or deleted.
"""

from __future__ import annotations

import threading
from typing import Any, Mapping

from core.constants import (
    ANIMAL_DISPLAY_NAME,
    ANIMAL_TYPE_NAME,
    DISPLAY_NAME_KEY,
    UNIQUE_VALIDATION_NAME,
)
from core.errors import SchemaValidationError
from core.logging_config import get_logger
from core.types import FieldDefinition, ReconcileResult, TypeDefinition
from schema.field_catalog import FieldCatalog, store_type_name
from store.graphql_client import StoreExecutor, parse_user_errors, require_data
from store.queries import CREATE_DEFINITION, GET_DEFINITION, UPDATE_DEFINITION

_LOGGER = get_logger(__name__)
_RECONCILE_LOCK = threading.Lock()


class SchemaReconciler:
    """Create or extend one store type from a field catalog."""

    def __init__(
        self,
        executor: StoreExecutor,
        type_name: str = ANIMAL_TYPE_NAME,
        display_name: str = ANIMAL_DISPLAY_NAME,
    ) -> None:
        self._executor = executor
        self._type_name = type_name
        self._display_name = display_name

    def reconcile(self, catalog: FieldCatalog, dry_run: bool = False) -> ReconcileResult:
        """Ensure the store type carries at least the catalog fields.

        Args:
            catalog: Canonical field catalog.
            dry_run: Only compute the plan; issue no mutations.

        Returns:
            Reconcile outcome with created (or planned) field keys.

        Raises:
            SchemaValidationError: If the store rejects a create or update.
            TransportError: If a store call fails at the transport level.
        """
        with _RECONCILE_LOCK:
            existing = self.fetch_definition()
            if existing is None:
                if dry_run:
                    return ReconcileResult("planned", self._type_name, None, catalog.keys())
                return self._create(catalog)
            _warn_on_type_drift(existing, catalog)
            missing = catalog.missing_from(existing.field_keys())
            if not missing:
                _LOGGER.info("schema_up_to_date", type_name=self._type_name)
                return ReconcileResult("noop", self._type_name, existing)
            missing_keys = tuple(definition.key for definition in missing)
            if dry_run:
                return ReconcileResult("planned", self._type_name, existing, missing_keys)
            return self._extend(existing, missing)

    def fetch_definition(self) -> TypeDefinition | None:
        """Look up the store definition for the configured type name.

        Raises:
            TransportError: If the lookup fails.
        """
        data = require_data(
            self._executor.execute(GET_DEFINITION, {"type": self._type_name}),
            step="lookup",
        )
        raw_definition = data.get("metaobjectDefinitionByType")
        if not raw_definition:
            return None
        return _definition_from_payload(raw_definition, self._type_name)

    def _create(self, catalog: FieldCatalog) -> ReconcileResult:
        """Create the type with the full catalog, publishable."""
        variables = {
            "definition": {
                "name": self._display_name,
                "type": self._type_name,
                "displayNameKey": DISPLAY_NAME_KEY,
                "capabilities": {"publishable": {"enabled": True}},
                "fieldDefinitions": [field_definition_input(item) for item in catalog],
            }
        }
        data = require_data(self._executor.execute(CREATE_DEFINITION, variables), step="create")
        payload = data.get("metaobjectDefinitionCreate") or {}
        _raise_on_user_errors(payload, step="create")
        created = _definition_from_payload(
            payload.get("metaobjectDefinition") or {}, self._type_name
        )
        _LOGGER.info("schema_created", type_name=self._type_name, field_count=len(catalog))
        return ReconcileResult("created", self._type_name, created, catalog.keys())

    def _extend(
        self,
        existing: TypeDefinition,
        missing: tuple[FieldDefinition, ...],
    ) -> ReconcileResult:
        """Append only the missing field definitions."""
        variables = {
            "id": existing.id,
            "definition": {
                "fieldDefinitions": [
                    {"create": field_definition_input(definition)} for definition in missing
                ]
            },
        }
        data = require_data(self._executor.execute(UPDATE_DEFINITION, variables), step="update")
        payload = data.get("metaobjectDefinitionUpdate") or {}
        _raise_on_user_errors(payload, step="update")
        created_keys = tuple(definition.key for definition in missing)
        raw_updated = payload.get("metaobjectDefinition")
        updated = (
            _definition_from_payload(raw_updated, self._type_name) if raw_updated else existing
        )
        _LOGGER.info("schema_extended", type_name=self._type_name, created_keys=created_keys)
        return ReconcileResult("extended", self._type_name, updated, created_keys)


def field_definition_input(definition: FieldDefinition) -> dict[str, object]:
    """Build the store's field definition create input."""
    field_input: dict[str, object] = {
        "name": definition.display_name,
        "key": definition.key,
        "type": store_type_name(definition),
        "required": definition.required,
    }
    if definition.unique:
        field_input["validations"] = [{"name": UNIQUE_VALIDATION_NAME, "value": "true"}]
    return field_input


def _definition_from_payload(payload: Mapping[str, Any], type_name: str) -> TypeDefinition:
    """Parse a definition payload into a TypeDefinition."""
    fields: dict[str, str] = {}
    for raw_field in payload.get("fieldDefinitions") or []:
        raw_type = raw_field.get("type")
        type_label = raw_type.get("name") if isinstance(raw_type, dict) else raw_type
        fields[str(raw_field["key"])] = str(type_label or "")
    return TypeDefinition(
        id=str(payload.get("id", "")),
        type_name=str(payload.get("type") or type_name),
        display_name=str(payload.get("name", "")),
        fields=fields,
    )


def _raise_on_user_errors(payload: Mapping[str, Any], step: str) -> None:
    """Raise SchemaValidationError when the store reported user errors."""
    user_errors = parse_user_errors(payload.get("userErrors"))
    if not user_errors:
        return
    _LOGGER.error(
        "schema_rejected",
        step=step,
        errors=[error.to_payload() for error in user_errors],
    )
    raise SchemaValidationError(
        f"Store rejected schema {step}: "
        + "; ".join(error.message for error in user_errors),
        step=step,
        user_errors=user_errors,
    )


def _warn_on_type_drift(existing: TypeDefinition, catalog: FieldCatalog) -> None:
    """Log catalog fields whose existing store type differs."""
    for definition in catalog:
        existing_type = existing.fields.get(definition.key)
        expected_type = store_type_name(definition)
        if existing_type and existing_type != expected_type:
            _LOGGER.warning(
                "field_type_drift",
                key=definition.key,
                existing_type=existing_type,
                catalog_type=expected_type,
            )
