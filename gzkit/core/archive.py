"""
Zip bundles for the local filesystem backend.

Cloud backends never zip: bundles are built locally and uploaded with
upload_zip(). zip_dir() is the local half of that flow.
"""
from __future__ import annotations

import logging
import os
import uuid
import zipfile
from pathlib import Path

from gzkit.core.walk import list_files

logger = logging.getLogger(__name__)

_CHUNK_SIZE: int = 1 << 20


def zip_dir(source: str | Path, target: str | Path) -> Path:
    """
    Write every regular file under `source` into a zip at `target`.

    Entries are named relative to `source` with "/" separators, deflate
    compressed, and keep the file's mode bits. Modification times before 1980
    are clamped to 1980-01-01, the earliest a zip entry can record. The
    archive is built in a temporary sibling and renamed into place, so
    readers never observe a partially written bundle.
    """
    source = Path(source)
    target = Path(target)
    target.parent.mkdir(mode=0o755, parents=True, exist_ok=True)
    tmp = target.with_name(f".{target.name}.{uuid.uuid4().hex}.tmp")

    try:
        with zipfile.ZipFile(tmp, "x", compression=zipfile.ZIP_DEFLATED) as zf:
            for path in list_files(source):
                info = zipfile.ZipInfo.from_file(
                    path, path.relative_to(source).as_posix(), strict_timestamps=False
                )
                info.compress_type = zipfile.ZIP_DEFLATED
                with path.open("rb") as src, zf.open(info, "w") as dst:
                    while chunk := src.read(_CHUNK_SIZE):
                        dst.write(chunk)
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise

    logger.debug("built bundle %s from %s", target, source)
    return target
