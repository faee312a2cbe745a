"""GraphQL executor for the store's Admin API.

This module wraps httpx behind a single ``execute`` capability and
turns every response into a discriminated result so callers cannot
read ``data`` from a failed call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Protocol

import httpx

from core.config import SyncConfig
from core.constants import ADMIN_TOKEN_HEADER
from core.errors import TransportError
from core.logging_config import get_logger
from core.types import StoreUserError

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class GraphQLOk:
    """Successful call: 2xx response with data and no errors."""

    data: Mapping[str, Any]


@dataclass(frozen=True)
class GraphQLErr:
    """Failed call: transport failure, non-2xx, or top-level errors."""

    errors: tuple[str, ...]
    status_code: int | None = None


GraphQLResult = GraphQLOk | GraphQLErr


class StoreExecutor(Protocol):
    """Query capability required by the reconciler and upsert engine."""

    def execute(self, query: str, variables: Mapping[str, object]) -> GraphQLResult: ...


def require_data(result: GraphQLResult, step: str) -> Mapping[str, Any]:
    """Return result data or raise a transport error for the step.

    Args:
        result: Executor result.
        step: Pipeline step name for error context.

    Returns:
        Response ``data`` mapping.

    Raises:
        TransportError: If the result is a failure.
    """
    if isinstance(result, GraphQLErr):
        status = f"HTTP {result.status_code}: " if result.status_code else ""
        raise TransportError(
            f"Store call failed during {step}: {status}{'; '.join(result.errors)}",
            step=step,
        )
    return result.data


class GraphQLClient:
    """httpx-backed implementation of :class:`StoreExecutor`."""

    def __init__(self, config: SyncConfig, http_client: httpx.Client | None = None) -> None:
        """Create an executor bound to one store.

        Args:
            config: Runtime configuration with store domain and token.
            http_client: Optional preconfigured client, mainly for tests.

        Raises:
            SyncConfigError: If no admin token is configured.
        """
        self._url = config.graphql_url
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(
            timeout=httpx.Timeout(config.timeout_seconds),
            headers={
                ADMIN_TOKEN_HEADER: config.require_admin_token(),
                "Content-Type": "application/json",
            },
        )

    def execute(self, query: str, variables: Mapping[str, object]) -> GraphQLResult:
        """POST one GraphQL document and classify the response."""
        try:
            response = self._http.post(
                self._url,
                json={"query": query, "variables": dict(variables)},
            )
        except httpx.HTTPError as error:
            _LOGGER.warning("graphql_transport_failed", url=self._url, error=str(error))
            return GraphQLErr(errors=(f"{type(error).__name__}: {error}",))
        return _classify_response(response)

    def close(self) -> None:
        """Close the underlying client when this executor created it."""
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "GraphQLClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _classify_response(response: httpx.Response) -> GraphQLResult:
    """Map an HTTP response onto the result union.

    Args:
        response: Raw httpx response.

    Returns:
        ``GraphQLOk`` only for 2xx bodies with data and no errors.
    """
    try:
        payload = response.json()
    except ValueError:
        payload = None
    errors = _extract_errors(payload)
    if not response.is_success:
        _LOGGER.warning("graphql_http_error", status_code=response.status_code, errors=errors)
        return GraphQLErr(
            errors=errors or (f"HTTP {response.status_code}",),
            status_code=response.status_code,
        )
    if errors:
        _LOGGER.warning("graphql_errors", status_code=response.status_code, errors=errors)
        return GraphQLErr(errors=errors, status_code=response.status_code)
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
        return GraphQLErr(
            errors=("Response carried no data object",),
            status_code=response.status_code,
        )
    return GraphQLOk(data=payload["data"])


def _extract_errors(payload: object) -> tuple[str, ...]:
    """Collect top-level GraphQL error messages from a response body."""
    if not isinstance(payload, dict):
        return ()
    raw_errors = payload.get("errors")
    if not raw_errors:
        return ()
    if isinstance(raw_errors, dict):
        raw_errors = [raw_errors]
    if not isinstance(raw_errors, list):
        return (str(raw_errors),)
    messages: list[str] = []
    for item in raw_errors:
        if isinstance(item, dict) and "message" in item:
            messages.append(str(item["message"]))
        else:
            messages.append(str(item))
    return tuple(messages)


def parse_user_errors(raw_errors: object) -> tuple[StoreUserError, ...]:
    """Parse a mutation's ``userErrors`` list into typed errors.

    Args:
        raw_errors: ``userErrors`` value from a mutation payload.

    Returns:
        Typed errors in store order; empty when none were reported.
    """
    if not isinstance(raw_errors, list):
        return ()
    parsed: list[StoreUserError] = []
    for item in raw_errors:
        if not isinstance(item, dict):
            continue
        raw_field = item.get("field") or ()
        field_path = tuple(str(part) for part in raw_field) if isinstance(raw_field, list) else ()
        code = item.get("code")
        parsed.append(
            StoreUserError(
                field=field_path,
                message=str(item.get("message", "")),
                code=str(code) if code is not None else None,
            )
        )
    return tuple(parsed)
