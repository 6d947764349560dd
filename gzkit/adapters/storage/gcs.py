"""
GCSStorage — Google Cloud Storage adapter using google-cloud-storage.

Install extras: pip install "gzkit[gcs]"

Operations
----------
  get_file()   → blob.download_as_bytes()     "<prefix>/<path>"
  download()   → blob.exists() metadata probe, then a v4 signed GET URL
                 for "<prefix>.zip"
  upload_dir() → blob.upload_from_file() per file under "<prefix>/"
  upload_zip() → blob.upload_from_file()      "<prefix>.zip"

Signed URLs need credentials able to sign (a service account key, or the
IAM signBlob permission when running on GCP).

Note: google-cloud-storage is synchronous. All operations are wrapped in
asyncio.to_thread to avoid blocking the event loop.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Callable
from datetime import timedelta
from typing import TYPE_CHECKING, Any, BinaryIO, TypeVar

from gzkit.core import operations
from gzkit.core.walk import WalkDirFunc
from gzkit.domain.errors import ResourceError, ResourceNotFoundError, StorageError
from gzkit.domain.models import Resource, validate_resource

if TYPE_CHECKING:
    from google.cloud.storage import Client as GCSClient

logger = logging.getLogger(__name__)

LINK_TTL: timedelta = timedelta(minutes=60)

T = TypeVar("T")


def _gapi_exceptions() -> Any:
    try:
        from google.api_core import exceptions as gapi_exc  # type: ignore[import-untyped]
    except ImportError as exc:
        raise ImportError(
            "GCSStorage requires google-cloud-storage. "
            "Install with: pip install 'gzkit[gcs]'"
        ) from exc
    return gapi_exc


@dataclasses.dataclass
class GCSStorage:
    """
    Google Cloud Storage adapter.

    Parameters
    ----------
    bucket_name : GCS bucket name
    client      : google.cloud.storage.Client — created lazily if omitted
    link_ttl    : lifetime of the signed URLs returned by download()
    """

    bucket_name: str
    client: GCSClient | None = None
    link_ttl: timedelta = LINK_TTL

    def _get_client(self) -> GCSClient:
        if self.client is not None:
            return self.client
        try:
            from google.cloud import storage  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ImportError(
                "GCSStorage requires google-cloud-storage. "
                "Install with: pip install 'gzkit[gcs]'"
            ) from exc
        self.client = storage.Client()
        return self.client  # type: ignore[return-value]

    def _blob(self, key: str) -> Any:
        return self._get_client().bucket(self.bucket_name).blob(key)  # type: ignore[attr-defined]

    async def _run(self, action: str, fn: Callable[..., T], *args: Any) -> T:
        """Run a blocking SDK call in a worker thread, wrapping foreign errors."""
        try:
            return await asyncio.to_thread(fn, *args)
        except ResourceError:
            raise
        except Exception as exc:
            raise StorageError(f"GCS {action} failed", exc) from exc

    # ------------------------------------------------------------------ #
    # ResourceStoragePort                                                  #
    # ------------------------------------------------------------------ #

    async def get_file(self, resource: Resource, path: str) -> bytes:
        """Fetch `path` inside the resource. Raises ResourceNotFoundError if absent."""
        return await operations.read_file(resource, path, self._read)

    async def download(self, resource: Resource) -> str:
        """Return a signed URL for the resource's zip bundle."""
        validate_resource(resource)
        return await self._run("download", self._sync_download, resource.zip_key)

    async def upload_dir(self, resource: Resource, src: str) -> None:
        """Upload every file under `src` below the resource prefix."""
        await operations.upload_dir(resource, src, self.uploader(resource))

    async def upload_zip(self, resource: Resource, file: BinaryIO | None) -> None:
        """Upload `file` as "<prefix>.zip"."""
        await operations.upload_zip(resource, file, self.uploader())

    # ------------------------------------------------------------------ #
    # Walk callables                                                       #
    # ------------------------------------------------------------------ #

    def uploader(self, resource: Resource | None = None) -> WalkDirFunc:
        """
        WalkDirFunc issuing one object upload per file.

        With a resource, keys are relative to the resource prefix; without
        one they are used as-is.
        """

        async def _upload(key: str, body: BinaryIO) -> None:
            if resource is not None:
                key = resource.key(key)
            await self._run("upload", self._sync_upload, key, body)

        return _upload

    def deleter(self, resource: Resource | None = None) -> WalkDirFunc:
        """WalkDirFunc deleting each mapped object. Raises ResourceNotFoundError if absent."""

        async def _delete(key: str, body: BinaryIO) -> None:
            if resource is not None:
                key = resource.key(key)
            await self._run("delete", self._sync_delete, key)

        return _delete

    # ------------------------------------------------------------------ #
    # Synchronous implementations (executed in a thread-pool worker)      #
    # ------------------------------------------------------------------ #

    async def _read(self, resource: Resource, path: str) -> bytes:
        return await self._run("get_file", self._sync_read, resource.key(path))

    def _sync_read(self, key: str) -> bytes:
        gapi_exc = _gapi_exceptions()
        try:
            content: bytes = self._blob(key).download_as_bytes()
        except gapi_exc.NotFound as exc:
            raise ResourceNotFoundError(key) from exc
        return content

    def _sync_download(self, key: str) -> str:
        blob = self._blob(key)
        if not blob.exists():
            raise ResourceNotFoundError(key)
        url: str = blob.generate_signed_url(
            version="v4",
            expiration=self.link_ttl,
            method="GET",
        )
        logger.debug("signed gs://%s/%s for %s", self.bucket_name, key, self.link_ttl)
        return url

    def _sync_upload(self, key: str, body: BinaryIO) -> None:
        self._blob(key).upload_from_file(body)
        logger.debug("uploaded gs://%s/%s", self.bucket_name, key)

    def _sync_delete(self, key: str) -> None:
        gapi_exc = _gapi_exceptions()
        try:
            self._blob(key).delete()
        except gapi_exc.NotFound as exc:
            raise ResourceNotFoundError(key) from exc
        logger.debug("deleted gs://%s/%s", self.bucket_name, key)
