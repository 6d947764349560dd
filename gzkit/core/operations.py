"""
Backend-independent skeletons of the storage operations.

Every adapter composes these with its own per-object callables, so
validation, source-folder checks and walking behave identically on the
filesystem, S3 and GCS:

  upload_dir(resource, src, upload)   validate → check src → walk_dir(src, upload)
  upload_zip(resource, file, upload)  validate → reject None → upload(zip_key, file)
  read_file(resource, path, read)     validate → read(resource, path)

Nothing here retries or rolls back: when upload_dir stops on a failing file,
the files uploaded before it stay in place.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import BinaryIO

from gzkit.core.walk import WalkDirFunc, has_files, walk_dir
from gzkit.domain.errors import (
    FileNilError,
    SourceFileError,
    SourceFolderEmptyError,
    SourceFolderNotFoundError,
)
from gzkit.domain.models import Resource, validate_resource

logger = logging.getLogger(__name__)

ReadFunc = Callable[[Resource, str], Awaitable[bytes]]


def check_source_dir(src: str | Path) -> None:
    """Raise unless `src` is an existing directory holding at least one file."""
    path = Path(src)
    if not path.exists():
        raise SourceFolderNotFoundError(str(src))
    if not path.is_dir():
        raise SourceFileError(str(src))
    if not has_files(path):
        raise SourceFolderEmptyError(str(src))


async def upload_dir(resource: Resource, src: str | Path, upload: WalkDirFunc) -> None:
    """
    Walk `src` and hand every file to `upload`.

    `upload` receives paths relative to `src`; mapping them to object keys
    inside the resource is the uploader's job.
    """
    validate_resource(resource)
    await asyncio.to_thread(check_source_dir, src)
    logger.debug("uploading %s to %s", src, resource.prefix)
    try:
        await walk_dir(src, upload)
    except Exception:
        logger.warning("upload of %s to %s stopped on a failed file", src, resource.prefix)
        raise


async def upload_zip(
    resource: Resource, file: BinaryIO | None, upload: WalkDirFunc
) -> None:
    """Hand the zip bundle `file` to `upload` under the resource's zip key."""
    validate_resource(resource)
    if file is None:
        raise FileNilError()
    if file.seekable():
        file.seek(0)
    logger.debug("uploading bundle %s", resource.zip_key)
    await upload(resource.zip_key, file)


async def read_file(resource: Resource, path: str, read: ReadFunc) -> bytes:
    validate_resource(resource)
    return await read(resource, path)
