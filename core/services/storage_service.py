# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Uploads supplier files (logos, product images, catalogs) to public
# Supabase Storage buckets and resolves their public URLs.
# =============================================================================

import logging
from typing import Any, Protocol

from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    """Object storage that hands back a public URL for each upload."""

    def upload(self, bucket: str, key: str, data: bytes, content_type: str) -> str:
        ...

    def get_public_url(self, bucket: str, key: str) -> str:
        ...


class StorageService:
    """
    Service for Supabase Storage operations.

    Keys are never overwritten (upsert is off), so a key collision fails the
    upload instead of replacing another supplier's file.
    """

    def __init__(self, client: Any | None = None):
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = SupabaseClient.get_client()
        return self._client

    def upload(self, bucket: str, key: str, data: bytes, content_type: str) -> str:
        """
        Upload bytes to a bucket.

        Args:
            bucket: Storage bucket name
            key: Object key inside the bucket
            data: File content
            content_type: MIME type stored with the object

        Returns:
            Public URL of the uploaded object

        Raises:
            SupabaseClientError: If upload fails
        """
        try:
            self.client.storage.from_(bucket).upload(
                path=key,
                file=data,
                file_options={"content-type": content_type, "upsert": "false"}
            )
        except Exception as e:
            logger.error(f"Storage upload failed for {bucket}/{key}: {e}")
            raise SupabaseClientError(
                message=f"Upload to {bucket} failed: {e}",
                code="UPLOAD_FAILED",
                details={"bucket": bucket, "key": key}
            )

        logger.info(f"Uploaded file to storage: {bucket}/{key} ({len(data)} bytes)")
        return self.get_public_url(bucket, key)

    def get_public_url(self, bucket: str, key: str) -> str:
        """
        Get a public URL for a storage object.

        Raises:
            SupabaseClientError: If the URL cannot be resolved
        """
        try:
            return self.client.storage.from_(bucket).get_public_url(key)
        except Exception as e:
            logger.error(f"Failed to get public URL for {bucket}/{key}: {e}")
            raise SupabaseClientError(
                message=f"Failed to resolve public URL: {e}",
                code="PUBLIC_URL_FAILED",
                details={"bucket": bucket, "key": key}
            )
