"""Canonical field catalog for the animal type.

The catalog is pure data: one definition per field the store type
must carry, plus the mapping from primitive types to store type names.
"""

from __future__ import annotations

from typing import Iterator, Sequence

from core.types import FieldDefinition, PrimitiveType

STORE_FIELD_TYPES: dict[PrimitiveType, str] = {
    "text": "single_line_text_field",
    "rich_text": "rich_text_field",
    "boolean": "boolean",
    "asset_reference": "file_reference",
    "asset_reference_list": "list.file_reference",
}
ASSET_PRIMITIVE_TYPES: tuple[PrimitiveType, ...] = ("asset_reference", "asset_reference_list")


class FieldCatalog:
    """Ordered, key-unique collection of field definitions."""

    def __init__(self, definitions: Sequence[FieldDefinition]) -> None:
        keys = [definition.key for definition in definitions]
        duplicates = sorted({key for key in keys if keys.count(key) > 1})
        if duplicates:
            raise ValueError(f"Duplicate catalog field keys: {', '.join(duplicates)}")
        self._definitions = tuple(definitions)

    def __iter__(self) -> Iterator[FieldDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    def keys(self) -> tuple[str, ...]:
        """Return field keys in declaration order."""
        return tuple(definition.key for definition in self._definitions)

    def get(self, key: str) -> FieldDefinition | None:
        """Return the definition for a key, if declared."""
        for definition in self._definitions:
            if definition.key == key:
                return definition
        return None

    def value_fields(self) -> tuple[FieldDefinition, ...]:
        """Return definitions whose values come from the normalizer."""
        return tuple(
            definition
            for definition in self._definitions
            if definition.primitive_type not in ASSET_PRIMITIVE_TYPES
        )

    def missing_from(self, existing_keys: frozenset[str]) -> tuple[FieldDefinition, ...]:
        """Return definitions whose key is not in ``existing_keys``."""
        return tuple(
            definition for definition in self._definitions if definition.key not in existing_keys
        )


def store_type_name(definition: FieldDefinition) -> str:
    """Return the store type name for a field definition."""
    return STORE_FIELD_TYPES[definition.primitive_type]


ANIMAL_CATALOG = FieldCatalog(
    (
        FieldDefinition("name", "Name", "text", required=True),
        FieldDefinition("status", "Status", "text"),
        FieldDefinition("species", "Species", "text"),
        FieldDefinition("breed", "Breed", "text"),
        FieldDefinition("age", "Age", "text"),
        FieldDefinition("gender", "Gender", "text"),
        FieldDefinition("size", "Size", "text"),
        FieldDefinition("location", "Location", "text"),
        FieldDefinition("adoption_fee", "Adoption Fee", "text"),
        FieldDefinition("good_with_kids", "Good With Kids", "boolean"),
        FieldDefinition("good_with_dogs", "Good With Dogs", "boolean"),
        FieldDefinition("good_with_cats", "Good With Cats", "boolean"),
        FieldDefinition("house_trained", "House Trained", "boolean"),
        FieldDefinition("spayed_neutered", "Spayed/Neutered", "boolean"),
        FieldDefinition("vaccinated", "Vaccinated", "boolean"),
        FieldDefinition("description", "Description", "rich_text"),
        FieldDefinition("image", "Image", "asset_reference"),
        FieldDefinition("gallery", "Gallery", "asset_reference_list"),
        FieldDefinition("external_id", "External ID", "text", unique=True),
    )
)
