"""Shelter-sync exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each stage raises a specific error type carrying the step that failed
so callers can report structured detail back through their boundary.
"""

from __future__ import annotations

from typing import Sequence

from core.types import StoreUserError


class SyncError(Exception):
    """Base exception for all shelter-sync failures."""

    def __init__(
        self,
        message: str,
        step: str,
        user_errors: Sequence[StoreUserError] = (),
    ) -> None:
        super().__init__(message)
        self.message = message
        self.step = step
        self.user_errors = tuple(user_errors)

    def to_payload(self) -> dict[str, object]:
        """Render error detail as a JSON-safe mapping."""
        return {
            "step": self.step,
            "message": self.message,
            "errors": [error.to_payload() for error in self.user_errors],
        }


class SyncConfigError(SyncError):
    """Raised for invalid runtime configuration."""

    def __init__(self, message: str) -> None:
        super().__init__(message, step="config")


class MissingIdentityError(SyncError):
    """Raised when no identity alias yields a usable external id."""

    def __init__(self, aliases: Sequence[str]) -> None:
        super().__init__(
            "Missing external id: none of "
            f"{', '.join(repr(alias) for alias in aliases)} has a value. "
            "Send the form entry id with the record.",
            step="normalize",
        )
        self.field = "external_id"

    def to_payload(self) -> dict[str, object]:
        return {"step": self.step, "field": self.field, "message": self.message}


class AssetUploadError(SyncError):
    """Raised inside the asset materializer; never escapes it."""

    def __init__(self, message: str) -> None:
        super().__init__(message, step="asset")


class SchemaValidationError(SyncError):
    """Raised when the store rejects a definition create or update."""


class StoreRejectedError(SyncError):
    """Raised when the store rejects a record upsert."""

    @property
    def field(self) -> str | None:
        """Dotted path of the first offending field, when reported."""
        if not self.user_errors or not self.user_errors[0].field:
            return None
        return ".".join(self.user_errors[0].field)

    def to_payload(self) -> dict[str, object]:
        return {"step": self.step, "field": self.field, "message": self.message}


class TransportError(SyncError):
    """Raised for HTTP-level and top-level GraphQL failures."""
