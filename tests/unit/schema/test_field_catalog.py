"""Unit tests for the canonical field catalog."""

from __future__ import annotations

import pytest

from core.types import FieldDefinition
from schema.field_catalog import ANIMAL_CATALOG, FieldCatalog


def test_animal_catalog_requires_name_and_unique_external_id() -> None:
    """Name is required and the external id is unique."""
    name = ANIMAL_CATALOG.get("name")
    external_id = ANIMAL_CATALOG.get("external_id")

    assert name is not None and name.required
    assert external_id is not None and external_id.unique


def test_value_fields_exclude_asset_references() -> None:
    """Asset fields are filled by materialization, not normalization."""
    value_keys = {definition.key for definition in ANIMAL_CATALOG.value_fields()}

    assert "image" not in value_keys and "gallery" not in value_keys
    assert len(value_keys) == len(ANIMAL_CATALOG) - 2


def test_missing_from_preserves_declaration_order() -> None:
    """Missing definitions come back in catalog order."""
    missing = ANIMAL_CATALOG.missing_from(frozenset({"name", "breed"}))

    assert [definition.key for definition in missing][:3] == ["status", "species", "age"]


def test_catalog_rejects_duplicate_keys() -> None:
    """Keys must be unique within a catalog."""
    with pytest.raises(ValueError):
        FieldCatalog(
            (
                FieldDefinition("name", "Name", "text"),
                FieldDefinition("name", "Other Name", "text"),
            )
        )
