"""
S3Storage — AWS S3 adapter using aioboto3.

Install extras: pip install "gzkit[s3]"

Operations
----------
  get_file()   → GetObject  "<prefix>/<path>"
  download()   → HeadObject "<prefix>.zip", then a pre-signed GET URL
  upload_dir() → PutObject per file under "<prefix>/"
  upload_zip() → PutObject "<prefix>.zip"

Bundles are never built in the bucket: produce the zip locally (e.g. with
LocalFileSystemStorage.download) and upload it with upload_zip().

Errors
------
NoSuchKey / 404 responses become ResourceNotFoundError. Any other failure
is wrapped in StorageError with the botocore exception as its cause.

Compatible with S3-compatible storage (MinIO, Cloudflare R2, ...) through
endpoint_url.
"""
from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import TYPE_CHECKING, Any, BinaryIO

from gzkit.core import operations
from gzkit.core.walk import WalkDirFunc
from gzkit.domain.errors import ResourceError, ResourceNotFoundError, StorageError
from gzkit.domain.models import Resource, validate_resource

if TYPE_CHECKING:
    from aioboto3 import Session as AioBoto3Session

logger = logging.getLogger(__name__)

LINK_TTL: timedelta = timedelta(minutes=60)

_NOT_FOUND_CODES: frozenset[str] = frozenset({"NoSuchKey", "NotFound", "404"})


@dataclasses.dataclass
class S3Storage:
    """
    AWS S3 storage adapter.

    Parameters
    ----------
    bucket       : S3 bucket name
    session      : aioboto3.Session — created lazily from env vars if omitted
    region_name  : AWS region passed to the S3 client
    endpoint_url : custom endpoint for S3-compatible backends (e.g. MinIO)
    link_ttl     : lifetime of the pre-signed URLs returned by download()
    """

    bucket: str
    session: AioBoto3Session | None = None
    region_name: str | None = None
    endpoint_url: str | None = None
    link_ttl: timedelta = LINK_TTL

    def _get_session(self) -> AioBoto3Session:
        if self.session is not None:
            return self.session
        try:
            import aioboto3  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ImportError(
                "S3Storage requires aioboto3. Install with: pip install 'gzkit[s3]'"
            ) from exc
        self.session = aioboto3.Session()
        return self.session  # type: ignore[return-value]

    def _client_kwargs(self) -> dict[str, str]:
        """Build kwargs forwarded to the S3 client constructor."""
        kwargs: dict[str, str] = {}
        if self.region_name:
            kwargs["region_name"] = self.region_name
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url
        return kwargs

    @asynccontextmanager
    async def _client(self, action: str) -> AsyncIterator[Any]:
        """
        Open an S3 client for one operation.

        gzkit errors raised inside the block pass through; anything else is
        wrapped in StorageError("S3 <action> failed", exc).
        """
        session = self._get_session()
        try:
            async with session.client("s3", **self._client_kwargs()) as s3:  # type: ignore[attr-defined]
                yield s3
        except ResourceError:
            raise
        except Exception as exc:
            raise StorageError(f"S3 {action} failed", exc) from exc

    # ------------------------------------------------------------------ #
    # ResourceStoragePort                                                  #
    # ------------------------------------------------------------------ #

    async def get_file(self, resource: Resource, path: str) -> bytes:
        """Fetch `path` inside the resource. Raises ResourceNotFoundError if absent."""
        return await operations.read_file(resource, path, self._read)

    async def download(self, resource: Resource) -> str:
        """Return a pre-signed URL for the resource's zip bundle."""
        validate_resource(resource)
        key = resource.zip_key
        async with self._client("download") as s3:
            try:
                await s3.head_object(Bucket=self.bucket, Key=key)
            except Exception as exc:
                if _s3_error_code(exc) in _NOT_FOUND_CODES:
                    raise ResourceNotFoundError(key) from exc
                raise
            url: str = await s3.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=int(self.link_ttl.total_seconds()),
            )
        logger.debug("presigned s3://%s/%s for %s", self.bucket, key, self.link_ttl)
        return url

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
        WalkDirFunc issuing one PutObject per file.

        With a resource, keys are relative to the resource prefix; without
        one they are used as-is.
        """

        async def _upload(key: str, body: BinaryIO) -> None:
            if resource is not None:
                key = resource.key(key)
            content = await asyncio.to_thread(body.read)
            async with self._client("upload") as s3:
                await s3.put_object(Bucket=self.bucket, Key=key, Body=content)
            logger.debug("uploaded s3://%s/%s", self.bucket, key)

        return _upload

    def deleter(self, resource: Resource | None = None) -> WalkDirFunc:
        """WalkDirFunc issuing one DeleteObject per file."""

        async def _delete(key: str, body: BinaryIO) -> None:
            if resource is not None:
                key = resource.key(key)
            async with self._client("delete") as s3:
                await s3.delete_object(Bucket=self.bucket, Key=key)
            logger.debug("deleted s3://%s/%s", self.bucket, key)

        return _delete

    # ------------------------------------------------------------------ #
    # Internal                                                             #
    # ------------------------------------------------------------------ #

    async def _read(self, resource: Resource, path: str) -> bytes:
        key = resource.key(path)
        async with self._client("get_file") as s3:
            try:
                response = await s3.get_object(Bucket=self.bucket, Key=key)
            except Exception as exc:
                if _s3_error_code(exc) in _NOT_FOUND_CODES:
                    raise ResourceNotFoundError(key) from exc
                raise
            content: bytes = await response["Body"].read()
        return content


def _s3_error_code(exc: Exception) -> str:
    """Extract the error code from a botocore ClientError, or return ''."""
    response = getattr(exc, "response", None)
    if isinstance(response, dict):
        error = response.get("Error", {})
        if isinstance(error, dict):
            code = error.get("Code", "")
            return str(code) if code else ""
    return ""
