"""FastAPI app exposing record webhooks and schema setup.

Handlers stay thin: they check the shared secret, hand the payload to
the SDK client, and translate domain errors into status codes.
"""

from __future__ import annotations

import hmac
from typing import Any

from fastapi import Body, FastAPI, Header, Request
from starlette.responses import JSONResponse

from core.constants import WEBHOOK_SECRET_HEADER
from core.errors import (
    MissingIdentityError,
    SchemaValidationError,
    StoreRejectedError,
    SyncConfigError,
    SyncError,
    TransportError,
)
from core.logging_config import get_logger
from store.sync_sdk import SyncClient

_LOGGER = get_logger(__name__)

_ERROR_STATUS: tuple[tuple[type[SyncError], int], ...] = (
    (MissingIdentityError, 400),
    (StoreRejectedError, 400),
    (SchemaValidationError, 400),
    (TransportError, 502),
    (SyncConfigError, 500),
)


def create_app(client: SyncClient | None = None) -> FastAPI:
    """Build the HTTP app around one SDK client.

    Args:
        client: Optional SDK client; built from the environment when omitted.

    Returns:
        Configured FastAPI application.
    """
    sync_client = client or SyncClient()
    config = sync_client.config
    app = FastAPI(title="shelter-sync")

    @app.exception_handler(SyncError)
    async def _handle_sync_error(request: Request, error: SyncError) -> JSONResponse:
        status_code = _status_for(error)
        _LOGGER.warning(
            "request_failed",
            path=request.url.path,
            step=error.step,
            status_code=status_code,
            error=error.message,
        )
        return JSONResponse(status_code=status_code, content=error.to_payload())

    @app.post("/api/cognito-shopify")
    def ingest_record(
        payload: dict[str, Any] | None = Body(default=None),
        x_webhook_secret: str | None = Header(default=None, alias=WEBHOOK_SECRET_HEADER),
    ) -> JSONResponse:
        if not config.webhook_secret:
            raise SyncConfigError("Missing WEBHOOK_SECRET. Set it before accepting webhooks.")
        if not _secret_matches(config.webhook_secret, x_webhook_secret):
            return JSONResponse(status_code=401, content={"error": "Unauthorized"})
        result = sync_client.ingest(payload or {})
        return JSONResponse(
            content={
                "ok": True,
                "id": result.entity.id,
                "handle": result.entity.handle,
                "status": result.entity.publication_state,
            }
        )

    @app.post("/api/shopify/setup-animal")
    def setup_schema(authorization: str | None = Header(default=None)) -> JSONResponse:
        if not config.setup_secret:
            raise SyncConfigError("Missing SETUP_SECRET. Set it before running schema setup.")
        if not _secret_matches(f"Bearer {config.setup_secret}", authorization):
            return JSONResponse(status_code=401, content={"error": "Unauthorized"})
        result = sync_client.reconcile_schema()
        content: dict[str, object] = {"ok": True, "outcome": result.outcome}
        if result.outcome == "created" and result.definition is not None:
            content["created"] = {
                "id": result.definition.id,
                "type": result.definition.type_name,
                "name": result.definition.display_name,
            }
        elif result.outcome == "extended":
            content["createdFields"] = list(result.created_keys)
        else:
            content["message"] = f"{result.type_name} definition already up-to-date"
        return JSONResponse(content=content)

    return app


def _secret_matches(expected: str, provided: str | None) -> bool:
    """Compare secrets in constant time."""
    if not provided:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), provided.encode("utf-8"))


def _status_for(error: SyncError) -> int:
    """Map a domain error onto an HTTP status code."""
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    return 500
