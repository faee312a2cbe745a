"""Payload normalization for inbound form records.

This module maps loosely keyed upstream records onto canonical fields
using an ordered alias table. The first alias carrying a non-blank
value wins; fields without a match take their declared fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
import re

from core.constants import AVAILABLE_STATUS, MAX_GALLERY_ASSETS, TRUE_TOKENS
from core.errors import MissingIdentityError
from core.http_url import is_http_url
from core.logging_config import get_logger
from core.types import (
    ExternalRecord,
    FieldDefinition,
    FieldValue,
    NormalizedRecord,
    PublicationState,
)
from schema.field_catalog import ANIMAL_CATALOG, FieldCatalog

_LOGGER = get_logger(__name__)
_PARAGRAPH_BREAK = re.compile(r"(?:\r?\n)+")


@dataclass(frozen=True)
class FieldAlias:
    """Candidate upstream keys for one canonical field.

    Attributes:
        candidates: External key names in priority order.
        fallback: Value used when no candidate carries a value.
    """

    candidates: tuple[str, ...]
    fallback: FieldValue | None = None


IDENTITY_ALIASES = ("Entry ID", "entryId", "Number", "id")
IMAGE_ALIASES = ("Image Url", "ImageUrl", "image_url", "PhotoUrl")
GALLERY_ALIASES = ("Gallery Urls", "Gallery", "image_urls")
FIELD_ALIASES: dict[str, FieldAlias] = {
    "name": FieldAlias(("Name", "Dog Name", "name", "dog_name"), fallback="Unnamed"),
    "status": FieldAlias(("Status", "status")),
    "species": FieldAlias(("Species", "species"), fallback="Dog"),
    "breed": FieldAlias(("Breed", "breed")),
    "age": FieldAlias(("Age", "age")),
    "gender": FieldAlias(("Gender", "gender")),
    "size": FieldAlias(("Size", "size")),
    "location": FieldAlias(("Location", "location", "City")),
    "adoption_fee": FieldAlias(("Adoption Fee", "adoption_fee", "AdoptionFee")),
    "description": FieldAlias(("Description", "description")),
    "good_with_kids": FieldAlias(("Good With Kids", "good_with_kids")),
    "good_with_dogs": FieldAlias(("Good With Dogs", "good_with_dogs")),
    "good_with_cats": FieldAlias(("Good With Cats", "good_with_cats")),
    "house_trained": FieldAlias(("House Trained", "house_trained")),
    "spayed_neutered": FieldAlias(("Spayed/Neutered", "spayed_neutered")),
    "vaccinated": FieldAlias(("Vaccinated", "vaccinated")),
}


def normalize(raw: ExternalRecord, catalog: FieldCatalog = ANIMAL_CATALOG) -> NormalizedRecord:
    """Map an external record onto canonical field values.

    Args:
        raw: Untrusted string-keyed record from the upstream source.
        catalog: Canonical field catalog to fill.

    Returns:
        Normalized record keyed by catalog field keys.

    Raises:
        MissingIdentityError: If no identity alias carries a value.
    """
    external_id = _pick_identity(raw)
    if external_id is None:
        raise MissingIdentityError(IDENTITY_ALIASES)
    values: dict[str, FieldValue] = {}
    for definition in catalog.value_fields():
        if definition.key == "external_id":
            values["external_id"] = external_id
            continue
        values[definition.key] = _normalize_field(raw, definition)
    image_value = pick_first(raw, IMAGE_ALIASES)
    return NormalizedRecord(
        external_id=external_id,
        values=values,
        primary_image_url=str(image_value).strip() if image_value is not None else None,
        gallery_urls=_gallery_urls(pick_first(raw, GALLERY_ALIASES), external_id),
        publication_state=publication_state_for(str(values.get("status", ""))),
    )


def pick_first(raw: ExternalRecord, candidates: tuple[str, ...]) -> object | None:
    """Return the first candidate value that is present and non-blank.

    Args:
        raw: External record.
        candidates: Keys in priority order.

    Returns:
        The winning raw value, or None when every candidate is blank.
    """
    return next((raw[key] for key in candidates if key in raw and _has_value(raw[key])), None)


def publication_state_for(status: str) -> PublicationState:
    """Return ACTIVE for the available status, DRAFT for anything else."""
    return "ACTIVE" if status.strip().lower() == AVAILABLE_STATUS else "DRAFT"


def build_rich_text(text: str) -> str:
    """Wrap plain text paragraphs into the store's rich-text document.

    Args:
        text: Plain text with line breaks between paragraphs.

    Returns:
        JSON document string with one paragraph node per non-blank line run.
    """
    paragraphs = [part.strip() for part in _PARAGRAPH_BREAK.split(text) if part.strip()]
    document = {
        "type": "root",
        "children": [
            {"type": "paragraph", "children": [{"type": "text", "value": paragraph}]}
            for paragraph in paragraphs
        ],
    }
    return json.dumps(document, ensure_ascii=False)


def coerce_bool(value: object) -> bool:
    """Interpret form checkbox values as booleans."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in TRUE_TOKENS
    return False


def _normalize_field(raw: ExternalRecord, definition: FieldDefinition) -> FieldValue:
    """Resolve and coerce one canonical field value."""
    alias = FIELD_ALIASES.get(definition.key, FieldAlias((definition.key,)))
    raw_value = pick_first(raw, alias.candidates)
    if definition.primitive_type == "boolean":
        if raw_value is None:
            return bool(alias.fallback)
        return coerce_bool(raw_value)
    if raw_value is None:
        text = str(alias.fallback) if alias.fallback is not None else ""
    else:
        text = str(raw_value).strip()
    if definition.key == "status":
        text = text.lower()
    if definition.primitive_type == "rich_text":
        return build_rich_text(text)
    return text


def _gallery_urls(raw_value: object | None, external_id: str) -> tuple[str, ...]:
    """Parse gallery input into at most the capped number of http(s) URLs.

    Args:
        raw_value: Array of URL strings or one comma-separated string.
        external_id: Record identity for log context.

    Returns:
        Valid URLs in source order, truncated to the gallery cap.
    """
    entries: list[object]
    if isinstance(raw_value, (list, tuple)):
        entries = [entry.strip() if isinstance(entry, str) else entry for entry in raw_value]
    elif isinstance(raw_value, str):
        entries = [entry.strip() for entry in raw_value.split(",")]
    else:
        entries = []
    entries = [entry for entry in entries if entry != ""]
    valid_urls = [entry for entry in entries if isinstance(entry, str) and is_http_url(entry)]
    kept_urls = tuple(valid_urls[:MAX_GALLERY_ASSETS])
    dropped_invalid = len(entries) - len(valid_urls)
    dropped_over_cap = len(valid_urls) - len(kept_urls)
    if dropped_invalid or dropped_over_cap:
        _LOGGER.warning(
            "gallery_urls_dropped",
            external_id=external_id,
            invalid=dropped_invalid,
            over_cap=dropped_over_cap,
        )
    return kept_urls


def _has_value(value: object) -> bool:
    """Return whether a raw value counts as populated."""
    if value is None:
        return False
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return str(value).strip() != ""


def _pick_identity(raw: ExternalRecord) -> str | None:
    """Return the first scalar, non-blank identity alias value, trimmed."""
    for key in IDENTITY_ALIASES:
        value = raw.get(key)
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            continue
        text = str(value).strip()
        if text:
            return text
    return None
