"""
LocalFileSystemStorage — resources stored as plain directories on the host.

Suitable for local development, single-machine deployments and shared
volumes mounted on every instance (e.g. AWS EFS). Layout under base_path:

  <base>/<owner>/<kind>/<uuid>/<version>/<relative/path>
  <base>/<owner>/<kind>/<uuid>/<version>.zip

Bundles
-------
download() returns the path of "<prefix>.zip". When the bundle is missing it
is built on the spot from the resource directory (deflate, mode bits kept)
and left in place, so later calls return the cached file.

Permissions
-----------
Directories are created with mode 0o755 and files with the process default;
both are subject to the process umask.

Disk I/O is blocking, so every operation runs in a worker thread via
asyncio.to_thread to avoid blocking the event loop.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import shutil
from pathlib import Path
from typing import BinaryIO

from gzkit.core import operations
from gzkit.core.archive import zip_dir
from gzkit.core.walk import WalkDirFunc, has_files
from gzkit.domain.errors import EmptyResourceError, ResourceNotFoundError
from gzkit.domain.models import Resource, validate_resource

logger = logging.getLogger(__name__)

_DIR_MODE: int = 0o755


@dataclasses.dataclass
class LocalFileSystemStorage:
    """
    Stores resources below a local directory.

    Parameters
    ----------
    base_path : directory holding the resource layout (created on first write)
    """

    base_path: Path

    def __init__(self, base_path: str | Path) -> None:
        self.base_path = Path(base_path)

    async def get_file(self, resource: Resource, path: str) -> bytes:
        """Read `path` inside the resource. Raises ResourceNotFoundError if absent."""
        return await operations.read_file(resource, path, self._read)

    async def download(self, resource: Resource) -> str:
        """Return the path of the resource's zip bundle, building it if needed."""
        validate_resource(resource)
        return await asyncio.to_thread(self._sync_download, resource)

    async def upload_dir(self, resource: Resource, src: str | Path) -> None:
        """Copy every file under `src` into the resource directory."""
        await operations.upload_dir(resource, src, self.uploader(resource))

    async def upload_zip(self, resource: Resource, file: BinaryIO | None) -> None:
        """Store `file` as the resource's zip bundle."""
        await operations.upload_zip(resource, file, self.uploader())

    # ------------------------------------------------------------------ #
    # Walk callables                                                       #
    # ------------------------------------------------------------------ #

    def uploader(self, resource: Resource | None = None) -> WalkDirFunc:
        """
        WalkDirFunc writing each file below base_path.

        With a resource, keys are relative to the resource prefix; without
        one they are used as-is.
        """

        async def _upload(key: str, body: BinaryIO) -> None:
            dest = self._path(resource, key)
            await asyncio.to_thread(self._sync_write, dest, body)

        return _upload

    def deleter(self, resource: Resource | None = None) -> WalkDirFunc:
        """WalkDirFunc removing each mapped file. Raises ResourceNotFoundError if absent."""

        async def _delete(key: str, body: BinaryIO) -> None:
            dest = self._path(resource, key)
            await asyncio.to_thread(self._sync_delete, dest)

        return _delete

    # ------------------------------------------------------------------ #
    # Synchronous implementations (executed in a thread-pool worker)      #
    # ------------------------------------------------------------------ #

    def _path(self, resource: Resource | None, key: str) -> Path:
        return self.base_path / (resource.key(key) if resource is not None else key)

    async def _read(self, resource: Resource, path: str) -> bytes:
        return await asyncio.to_thread(self._sync_read, self._path(resource, path))

    def _sync_read(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise ResourceNotFoundError(str(path)) from exc

    def _sync_download(self, resource: Resource) -> str:
        target = self.base_path / resource.zip_key
        if target.is_file():
            return str(target)

        source = self.base_path / resource.prefix
        if not source.is_dir():
            raise ResourceNotFoundError(str(source))
        if not has_files(source):
            raise EmptyResourceError(str(source))

        return str(zip_dir(source, target))

    @staticmethod
    def _sync_write(dest: Path, body: BinaryIO) -> None:
        dest.parent.mkdir(mode=_DIR_MODE, parents=True, exist_ok=True)
        with open(dest, "wb") as fh:
            shutil.copyfileobj(body, fh)
        logger.debug("wrote %s", dest)

    @staticmethod
    def _sync_delete(dest: Path) -> None:
        try:
            dest.unlink()
        except FileNotFoundError as exc:
            raise ResourceNotFoundError(str(dest)) from exc
        logger.debug("removed %s", dest)
