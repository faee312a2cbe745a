"""Unit tests for additive schema reconciliation."""

from __future__ import annotations

import pytest

from core.errors import SchemaValidationError, TransportError
from core.types import FieldDefinition
from schema.field_catalog import ANIMAL_CATALOG, FieldCatalog, store_type_name
from schema.reconciler import SchemaReconciler, field_definition_input
from store.graphql_client import GraphQLErr


def test_reconcile_creates_missing_definition_with_full_catalog(fake_store) -> None:
    """An absent type is created publishable with every catalog field."""
    result = SchemaReconciler(fake_store).reconcile(ANIMAL_CATALOG)

    (create_call,) = fake_store.operations("CreateDefinition")
    definition = create_call["definition"]
    assert result.outcome == "created"
    assert result.created_keys == ANIMAL_CATALOG.keys()
    assert definition["capabilities"] == {"publishable": {"enabled": True}}
    assert definition["displayNameKey"] == "name"
    assert [item["key"] for item in definition["fieldDefinitions"]] == list(ANIMAL_CATALOG.keys())


def test_reconcile_submits_only_missing_fields(fake_store) -> None:
    """Existing keys are never resubmitted."""
    fake_store.seed_definition(
        "animal",
        {"name": "single_line_text_field", "status": "single_line_text_field"},
    )

    result = SchemaReconciler(fake_store).reconcile(ANIMAL_CATALOG)

    (update_call,) = fake_store.operations("UpdateDefinition")
    submitted = [item["create"]["key"] for item in update_call["definition"]["fieldDefinitions"]]
    assert result.outcome == "extended"
    assert "name" not in submitted and "status" not in submitted
    assert set(submitted) == set(ANIMAL_CATALOG.keys()) - {"name", "status"}
    assert result.created_keys == tuple(submitted)


def test_reconcile_twice_is_noop_without_extra_mutations(fake_store) -> None:
    """A second call after a successful first one changes nothing."""
    reconciler = SchemaReconciler(fake_store)
    reconciler.reconcile(ANIMAL_CATALOG)
    mutations_before = len(fake_store.calls) - len(fake_store.operations("GetDefinition"))

    second = reconciler.reconcile(ANIMAL_CATALOG)

    mutations_after = len(fake_store.calls) - len(fake_store.operations("GetDefinition"))
    assert second.outcome == "noop"
    assert mutations_after == mutations_before


def test_reconcile_never_edits_drifted_field_types(fake_store) -> None:
    """A key present with another type counts as existing and is left alone."""
    fields = {definition.key: store_type_name(definition) for definition in ANIMAL_CATALOG}
    fields["vaccinated"] = "single_line_text_field"
    fake_store.seed_definition("animal", fields)

    result = SchemaReconciler(fake_store).reconcile(ANIMAL_CATALOG)

    assert result.outcome == "noop"
    assert fake_store.operations("UpdateDefinition") == []


def test_reconcile_dry_run_reports_plan_without_mutating(fake_store) -> None:
    """Dry runs only look up the definition."""
    fake_store.seed_definition("animal", {"name": "single_line_text_field"})

    result = SchemaReconciler(fake_store).reconcile(ANIMAL_CATALOG, dry_run=True)

    assert result.outcome == "planned"
    assert "name" not in result.created_keys
    assert [operation for operation, _ in fake_store.calls] == ["GetDefinition"]


def test_reconcile_surfaces_store_validation_errors(fake_store) -> None:
    """Store user errors abort reconciliation with verbatim detail."""
    fake_store.user_errors["CreateDefinition"] = [
        {"field": ["definition", "type"], "message": "Type is reserved", "code": "INVALID"}
    ]

    with pytest.raises(SchemaValidationError) as error_info:
        SchemaReconciler(fake_store).reconcile(ANIMAL_CATALOG)

    error = error_info.value
    assert error.step == "create"
    assert error.user_errors[0].field == ("definition", "type")
    assert error.user_errors[0].message == "Type is reserved"


def test_reconcile_raises_transport_error_on_failed_lookup(fake_store) -> None:
    """A failed lookup must not be mistaken for a missing type."""
    fake_store.failures["GetDefinition"] = GraphQLErr(errors=("Throttled",), status_code=429)

    with pytest.raises(TransportError) as error_info:
        SchemaReconciler(fake_store).reconcile(ANIMAL_CATALOG)

    assert error_info.value.step == "lookup"
    assert fake_store.operations("CreateDefinition") == []


def test_field_definition_input_adds_unique_validation() -> None:
    """Field definition input carries the unique validation when declared."""
    definition = FieldDefinition("external_id", "External ID", "text", unique=True)

    field_input = field_definition_input(definition)

    assert field_input["type"] == "single_line_text_field"
    assert field_input["validations"] == [{"name": "UNIQUE", "value": "true"}]


def test_reconcile_extends_with_custom_catalog(fake_store) -> None:
    """Catalogs other than the default are reconciled the same way."""
    fake_store.seed_definition("animal", {"name": "single_line_text_field"})
    catalog = FieldCatalog(
        (
            FieldDefinition("name", "Name", "text", required=True),
            FieldDefinition("microchip", "Microchip", "text"),
        )
    )

    result = SchemaReconciler(fake_store).reconcile(catalog)

    assert result.created_keys == ("microchip",)
    assert "microchip" in result.definition.fields
