"""Remote media materialization into the store's file system.

Uploads never fail a record: every rejection or transport problem is
logged and reported as ``None`` so the upsert can proceed without
the affected asset field.
"""

from __future__ import annotations

from core.constants import ASSET_ALT_TEXT, ASSET_CONTENT_TYPE
from core.errors import AssetUploadError
from core.http_url import is_http_url
from core.logging_config import get_logger
from core.types import AssetReference
from store.graphql_client import GraphQLErr, StoreExecutor, parse_user_errors
from store.queries import CREATE_FILE

_LOGGER = get_logger(__name__)


class AssetMaterializer:
    """Submit remote URLs to the store's asset-ingestion mutation."""

    def __init__(self, executor: StoreExecutor, alt_text: str = ASSET_ALT_TEXT) -> None:
        self._executor = executor
        self._alt_text = alt_text

    def materialize(self, url: str) -> AssetReference | None:
        """Create a store file from a remote URL.

        Args:
            url: Remote media URL.

        Returns:
            Asset reference, or None when the URL is invalid or upload fails.
        """
        try:
            return self._upload(url)
        except AssetUploadError as error:
            _LOGGER.warning("asset_upload_failed", url=url, error=error.message)
            return None

    def _upload(self, url: str) -> AssetReference:
        """Run the upload and raise on any failure.

        Raises:
            AssetUploadError: If the URL is invalid or the store rejects it.
        """
        if not is_http_url(url):
            raise AssetUploadError(f"Refusing to upload '{url}': expected an http(s) URL.")
        source_url = url.strip()
        result = self._executor.execute(
            CREATE_FILE,
            {
                "files": [
                    {
                        "alt": self._alt_text,
                        "contentType": ASSET_CONTENT_TYPE,
                        "originalSource": source_url,
                    }
                ]
            },
        )
        if isinstance(result, GraphQLErr):
            raise AssetUploadError(f"Store call failed: {'; '.join(result.errors)}")
        payload = result.data.get("fileCreate")
        if not isinstance(payload, dict):
            raise AssetUploadError("Store returned an unexpected fileCreate payload.")
        user_errors = parse_user_errors(payload.get("userErrors"))
        if user_errors:
            raise AssetUploadError("; ".join(error.message for error in user_errors))
        files = payload.get("files")
        first_file = files[0] if isinstance(files, list) and files else None
        file_id = first_file.get("id") if isinstance(first_file, dict) else None
        if not file_id:
            raise AssetUploadError("Store returned no file id.")
        _LOGGER.info("asset_materialized", url=source_url, asset_id=file_id)
        return AssetReference(id=str(file_id), source_url=source_url)
