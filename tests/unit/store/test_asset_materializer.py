"""Unit tests for remote asset materialization."""

from __future__ import annotations

from store.asset_materializer import AssetMaterializer
from store.graphql_client import GraphQLErr, GraphQLOk


def test_materialize_returns_reference_for_uploaded_url(fake_store) -> None:
    """Accepted uploads return the store file id."""
    reference = AssetMaterializer(fake_store).materialize(" https://img.example/rex.jpg ")

    (call,) = fake_store.operations("CreateFile")
    assert reference is not None
    assert reference.id == fake_store.files[0]["id"]
    assert reference.source_url == "https://img.example/rex.jpg"
    assert call["files"][0]["contentType"] == "IMAGE"


def test_materialize_returns_none_for_rejected_url(fake_store) -> None:
    """Store user errors are absorbed into an absent reference."""
    fake_store.failing_urls.add("https://img.example/broken.jpg")

    assert AssetMaterializer(fake_store).materialize("https://img.example/broken.jpg") is None


def test_materialize_returns_none_on_transport_failure(fake_store) -> None:
    """Transport failures never escape asset materialization."""
    fake_store.failures["CreateFile"] = GraphQLErr(errors=("Timed out",))

    assert AssetMaterializer(fake_store).materialize("https://img.example/rex.jpg") is None


def test_materialize_returns_none_for_unexpected_payload_shape() -> None:
    """Malformed fileCreate payloads are absorbed like any other failure."""

    class OddStore:
        def execute(self, query, variables):
            return GraphQLOk(data={"fileCreate": "unexpected"})

    assert AssetMaterializer(OddStore()).materialize("https://img.example/rex.jpg") is None


def test_materialize_returns_none_when_files_is_not_a_list() -> None:
    """A files value of the wrong type yields no reference."""

    class OddStore:
        def execute(self, query, variables):
            return GraphQLOk(data={"fileCreate": {"files": {"id": "x"}, "userErrors": []}})

    assert AssetMaterializer(OddStore()).materialize("https://img.example/rex.jpg") is None


def test_materialize_refuses_non_http_values(fake_store) -> None:
    """Only http(s) URLs reach the store."""
    materializer = AssetMaterializer(fake_store)

    assert materializer.materialize("data:image/png;base64,AAAA") is None
    assert materializer.materialize("https://") is None
    assert fake_store.calls == []
