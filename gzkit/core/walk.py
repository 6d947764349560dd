"""
Directory walk shared by every storage backend.

walk_dir(src, fn) hands each regular file under `src` to `fn` as
(relative_path, open_binary_reader). Backends only provide `fn` — a
WalkDirFunc that uploads (or deletes) one object — and get recursive
directory upload for free.

Relative paths always use "/" separators so they can be appended to object
keys as-is. Files are visited in sorted order; walking stops at the first
exception raised by `fn`.
"""
from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import BinaryIO

WalkDirFunc = Callable[[str, BinaryIO], Awaitable[None]]


def list_files(src: str | Path) -> list[Path]:
    """
    Every regular file under `src`, sorted.

    Symlinks are kept only when they resolve to a regular file; directories,
    broken links and special files are skipped. Symlinked directories are
    not descended into.
    """
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(src):
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(dirpath, name)
            if path.is_file():
                found.append(path)
    return found


def has_files(src: str | Path) -> bool:
    """True if at least one regular file exists under `src`, at any depth."""
    for dirpath, _, filenames in os.walk(src):
        if any(Path(dirpath, name).is_file() for name in filenames):
            return True
    return False


async def walk_dir(src: str | Path, fn: WalkDirFunc) -> None:
    """Call `fn(relative_path, reader)` for every regular file under `src`."""
    root = Path(src)
    for path in await asyncio.to_thread(list_files, root):
        key = path.relative_to(root).as_posix()
        with path.open("rb") as body:
            await fn(key, body)
