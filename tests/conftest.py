"""Pytest configuration for repository test runs."""

from __future__ import annotations

import copy
import re
import sys
from pathlib import Path
from typing import Any, Mapping

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


_OPERATION_PATTERN = re.compile(r"\b(?:query|mutation)\s+(\w+)")


class FakeStore:
    """In-memory stand-in for the store's Admin GraphQL API.

    Definitions are keyed by type, entities by (type, handle), matching
    the store's handle-keyed upsert semantics.
    """

    def __init__(self) -> None:
        self.definitions: dict[str, dict[str, Any]] = {}
        self.entities: dict[tuple[str, str], dict[str, Any]] = {}
        self.files: list[dict[str, Any]] = []
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failing_urls: set[str] = set()
        self.failures: dict[str, Any] = {}
        self.user_errors: dict[str, list[dict[str, Any]]] = {}
        self._next_id = 0

    def execute(self, query: str, variables: Mapping[str, object]) -> Any:
        from store.graphql_client import GraphQLOk

        match = _OPERATION_PATTERN.search(query)
        operation = match.group(1) if match else "unknown"
        self.calls.append((operation, copy.deepcopy(dict(variables))))
        if operation in self.failures:
            return self.failures[operation]
        handler = {
            "GetDefinition": self._get_definition,
            "CreateDefinition": self._create_definition,
            "UpdateDefinition": self._update_definition,
            "CreateFile": self._create_file,
            "UpsertMetaobject": self._upsert_metaobject,
        }[operation]
        return GraphQLOk(data=handler(variables))

    def operations(self, name: str) -> list[dict[str, Any]]:
        """Return variables of every call to one operation."""
        return [variables for operation, variables in self.calls if operation == name]

    def seed_definition(self, type_name: str, fields: dict[str, str]) -> None:
        """Install an existing definition with key -> store type fields."""
        self.definitions[type_name] = {
            "id": self._new_id("MetaobjectDefinition"),
            "name": type_name.title(),
            "type": type_name,
            "displayNameKey": "name",
            "fieldDefinitions": [
                {"name": key, "key": key, "type": {"name": store_type}, "required": False}
                for key, store_type in fields.items()
            ],
        }

    def _new_id(self, kind: str) -> str:
        self._next_id += 1
        return f"gid://shopify/{kind}/{self._next_id}"

    def _get_definition(self, variables: Mapping[str, Any]) -> dict[str, Any]:
        definition = self.definitions.get(variables["type"])
        return {"metaobjectDefinitionByType": copy.deepcopy(definition)}

    def _create_definition(self, variables: Mapping[str, Any]) -> dict[str, Any]:
        errors = self.user_errors.get("CreateDefinition")
        if errors:
            return {
                "metaobjectDefinitionCreate": {"metaobjectDefinition": None, "userErrors": errors}
            }
        requested = variables["definition"]
        definition = {
            "id": self._new_id("MetaobjectDefinition"),
            "name": requested["name"],
            "type": requested["type"],
            "displayNameKey": requested.get("displayNameKey"),
            "fieldDefinitions": [
                {
                    "name": item["name"],
                    "key": item["key"],
                    "type": {"name": item["type"]},
                    "required": item.get("required", False),
                }
                for item in requested["fieldDefinitions"]
            ],
        }
        self.definitions[requested["type"]] = definition
        return {
            "metaobjectDefinitionCreate": {
                "metaobjectDefinition": copy.deepcopy(definition),
                "userErrors": [],
            }
        }

    def _update_definition(self, variables: Mapping[str, Any]) -> dict[str, Any]:
        errors = self.user_errors.get("UpdateDefinition")
        if errors:
            return {
                "metaobjectDefinitionUpdate": {"metaobjectDefinition": None, "userErrors": errors}
            }
        definition = next(
            item for item in self.definitions.values() if item["id"] == variables["id"]
        )
        existing_keys = {item["key"] for item in definition["fieldDefinitions"]}
        for operation in variables["definition"]["fieldDefinitions"]:
            created = operation["create"]
            if created["key"] in existing_keys:
                return {
                    "metaobjectDefinitionUpdate": {
                        "metaobjectDefinition": None,
                        "userErrors": [
                            {
                                "field": ["definition", "fieldDefinitions", created["key"]],
                                "message": "Key is in use",
                                "code": "TAKEN",
                            }
                        ],
                    }
                }
            definition["fieldDefinitions"].append(
                {
                    "name": created["name"],
                    "key": created["key"],
                    "type": {"name": created["type"]},
                    "required": created.get("required", False),
                }
            )
        return {
            "metaobjectDefinitionUpdate": {
                "metaobjectDefinition": copy.deepcopy(definition),
                "userErrors": [],
            }
        }

    def _create_file(self, variables: Mapping[str, Any]) -> dict[str, Any]:
        source = variables["files"][0]["originalSource"]
        if source in self.failing_urls:
            return {
                "fileCreate": {
                    "files": [],
                    "userErrors": [
                        {"field": ["files", "0", "originalSource"], "message": "Invalid URL"}
                    ],
                }
            }
        file_record = {"id": self._new_id("MediaImage"), "alt": "animal", "fileStatus": "UPLOADED"}
        self.files.append({**file_record, "originalSource": source})
        return {"fileCreate": {"files": [file_record], "userErrors": []}}

    def _upsert_metaobject(self, variables: Mapping[str, Any]) -> dict[str, Any]:
        errors = self.user_errors.get("UpsertMetaobject")
        if errors:
            return {"metaobjectUpsert": {"metaobject": None, "userErrors": errors}}
        handle = variables["handle"]
        entity_key = (handle["type"], handle["handle"])
        existing = self.entities.get(entity_key)
        entity_id = existing["id"] if existing else self._new_id("Metaobject")
        metaobject = variables["metaobject"]
        self.entities[entity_key] = {
            "id": entity_id,
            "handle": handle["handle"],
            "type": handle["type"],
            "fields": {item["key"]: item["value"] for item in metaobject["fields"]},
            "status": metaobject["capabilities"]["publishable"]["status"],
        }
        return {
            "metaobjectUpsert": {
                "metaobject": {"id": entity_id, "handle": handle["handle"], "type": handle["type"]},
                "userErrors": [],
            }
        }


@pytest.fixture
def fake_store() -> FakeStore:
    """Fresh in-memory store per test."""
    return FakeStore()
