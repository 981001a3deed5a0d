"""Object storage adapter for asset documents.

Documents live in a single bucket of a Supabase Storage project. Keys are
scoped by owner, asset kind and asset id:

    documents/
    └── user_2abc/
        └── real_estate/
            └── 6f1c.../
                └── 1718000000000-deed_of_sale.pdf
"""

import logging
import re
import time
import unicodedata
from abc import ABC, abstractmethod
from urllib.parse import quote, unquote, urlsplit

from expensify.config import settings
from expensify.exceptions import StorageError
from expensify.services.shared.http_client import HTTPClient, HTTPClientError

logger = logging.getLogger(__name__)

MAX_FILENAME_LENGTH = 100
_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str) -> str:
    """Make a filename safe for use inside a storage key.

    Diacritics are stripped ("é" -> "e") and anything outside
    ``[A-Za-z0-9._-]`` becomes ``_``. Long names keep their extension.
    """
    decomposed = unicodedata.normalize("NFD", filename)
    without_accents = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    result = _UNSAFE_FILENAME_CHARS.sub("_", without_accents) or "file"

    if len(result) > MAX_FILENAME_LENGTH:
        stem, dot, extension = result.rpartition(".")
        if dot and len(extension) < 10:
            result = stem[: MAX_FILENAME_LENGTH - len(extension) - 1] + "." + extension
        else:
            result = result[:MAX_FILENAME_LENGTH]
    return result


def build_document_key(
    owner_id: str,
    object_type: str,
    object_id: str,
    filename: str,
    timestamp_ms: int | None = None,
) -> str:
    """Build ``{owner}/{type}/{asset}/{epochMillis}-{filename}``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{owner_id}/{object_type}/{object_id}/{timestamp_ms}-{sanitize_filename(filename)}"


class ObjectStorage(ABC):
    """Durable key -> bytes store that issues public URLs."""

    @abstractmethod
    def upload(self, key: str, content: bytes, content_type: str, upsert: bool = False) -> str:
        """Store ``content`` under ``key`` and return the stored key.

        Raises:
            StorageError: If the object could not be stored
        """

    @abstractmethod
    def public_url(self, key: str) -> str:
        """Public URL for a stored key."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete the object stored under ``key``.

        Raises:
            StorageError: If the storage service reports a failure
        """

    @abstractmethod
    def key_from_url(self, url: str) -> str | None:
        """Recover the storage key from a public URL, or None if foreign."""


class SupabaseStorage(HTTPClient, ObjectStorage):
    """Supabase Storage REST client bound to a single bucket."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        bucket: str = "documents",
        timeout: float = 30.0,
    ):
        self.project_url = base_url.rstrip("/")
        self.bucket = bucket
        super().__init__(
            base_url=f"{self.project_url}/storage/v1",
            timeout=timeout,
            headers={
                "Authorization": f"Bearer {service_key}",
                "apikey": service_key,
            },
        )

    @property
    def _public_prefix(self) -> str:
        return f"/storage/v1/object/public/{self.bucket}/"

    def upload(self, key: str, content: bytes, content_type: str, upsert: bool = False) -> str:
        try:
            self.post(
                f"/object/{self.bucket}/{quote(key, safe='/')}",
                content=content,
                headers={
                    "Content-Type": content_type or "application/octet-stream",
                    "x-upsert": "true" if upsert else "false",
                },
            )
        except HTTPClientError as e:
            logger.error("Upload of %s to bucket %s failed: %s", key, self.bucket, e)
            raise StorageError("Failed to upload document") from e

        logger.info("Uploaded %s (%d bytes) to bucket %s", key, len(content), self.bucket)
        return key

    def public_url(self, key: str) -> str:
        return f"{self.project_url}{self._public_prefix}{quote(key, safe='/')}"

    def remove(self, key: str) -> None:
        try:
            self.delete(f"/object/{self.bucket}", json={"prefixes": [key]})
        except HTTPClientError as e:
            raise StorageError(f"Failed to delete {key}") from e
        logger.info("Removed %s from bucket %s", key, self.bucket)

    def key_from_url(self, url: str) -> str | None:
        path = urlsplit(url).path
        marker = path.find(self._public_prefix)
        if marker == -1:
            return None
        key = unquote(path[marker + len(self._public_prefix) :])
        return key or None


# Process-wide instance, closed at application shutdown
_default_storage: SupabaseStorage | None = None


def get_object_storage() -> ObjectStorage:
    """Get the default object storage instance."""
    global _default_storage
    if _default_storage is None:
        _default_storage = SupabaseStorage(
            base_url=settings.supabase_url,
            service_key=settings.supabase_service_key,
            bucket=settings.storage_bucket,
            timeout=settings.storage_timeout_seconds,
        )
    return _default_storage


def close_object_storage() -> None:
    """Release the HTTP connection pool of the default instance."""
    global _default_storage
    if _default_storage is not None:
        _default_storage.close()
        _default_storage = None
