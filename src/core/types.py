"""Shared typed models.

This module defines immutable data models used by the normalizer,
schema reconciler, and store layers to keep interfaces explicit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

PrimitiveType = Literal[
    "text",
    "rich_text",
    "boolean",
    "asset_reference",
    "asset_reference_list",
]
PublicationState = Literal["ACTIVE", "DRAFT"]
ReconcileOutcome = Literal["created", "extended", "noop", "planned"]
FieldValue = str | bool

ExternalRecord = Mapping[str, object]


@dataclass(frozen=True)
class FieldDefinition:
    """Canonical field definition.

    Attributes:
        key: Stable identifier; never changes once created in the store.
        display_name: Human-readable field name.
        primitive_type: Value type; immutable after creation.
        required: Whether the store must reject entities without it.
        unique: Whether the store enforces value uniqueness.
    """

    key: str
    display_name: str
    primitive_type: PrimitiveType
    required: bool = False
    unique: bool = False


@dataclass(frozen=True)
class TypeDefinition:
    """Store-side type definition as reported by the store.

    Attributes:
        id: Opaque handle assigned by the store.
        type_name: Type identifier, e.g. ``animal``.
        display_name: Human-readable type name.
        fields: Field key to store type name.
    """

    id: str
    type_name: str
    display_name: str
    fields: Mapping[str, str] = field(default_factory=dict)

    def field_keys(self) -> frozenset[str]:
        """Return the set of existing field keys."""
        return frozenset(self.fields)


@dataclass(frozen=True)
class NormalizedRecord:
    """Record mapped onto canonical fields.

    Attributes:
        external_id: Trimmed, non-empty identity key used verbatim as handle.
        values: Canonical values keyed by field key.
        primary_image_url: Optional primary image URL.
        gallery_urls: Ordered gallery URLs, at most the gallery cap.
        publication_state: ACTIVE when status is available, else DRAFT.
    """

    external_id: str
    values: Mapping[str, FieldValue]
    primary_image_url: str | None = None
    gallery_urls: tuple[str, ...] = ()
    publication_state: PublicationState = "DRAFT"


@dataclass(frozen=True)
class AssetReference:
    """Store-owned asset created from a remote URL."""

    id: str
    source_url: str


@dataclass(frozen=True)
class MaterializedAssets:
    """Asset references available for one record's upsert."""

    image: AssetReference | None = None
    gallery: tuple[AssetReference, ...] = ()


@dataclass(frozen=True)
class TargetEntity:
    """Store entity written by the upsert engine.

    Attributes:
        id: Opaque handle assigned by the store.
        handle: Lookup handle, equal to the record external id.
        type_name: Store type name.
        field_values: Serialized values sent for each field key.
        publication_state: Publication status sent with the upsert.
    """

    id: str
    handle: str
    type_name: str
    field_values: Mapping[str, str]
    publication_state: PublicationState


@dataclass(frozen=True)
class StoreUserError:
    """One validation error reported by the store, kept verbatim."""

    field: tuple[str, ...]
    message: str
    code: str | None = None

    def to_payload(self) -> dict[str, object]:
        """Render as a JSON-safe mapping."""
        return {"field": list(self.field), "message": self.message, "code": self.code}


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one schema reconciliation call.

    Attributes:
        outcome: created, extended, noop, or planned for dry runs.
        type_name: Reconciled store type name.
        definition: Store definition after the call, when known.
        created_keys: Field keys created (or planned) by this call.
    """

    outcome: ReconcileOutcome
    type_name: str
    definition: TypeDefinition | None = None
    created_keys: tuple[str, ...] = ()


@dataclass(frozen=True)
class IngestResult:
    """Summary of one record ingest.

    Attributes:
        entity: Upserted store entity.
        assets_attempted: Number of upload attempts made.
        assets_materialized: Number of uploads that returned an asset.
    """

    entity: TargetEntity
    assets_attempted: int
    assets_materialized: int
