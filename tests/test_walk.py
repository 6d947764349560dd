import os
from pathlib import Path
from typing import BinaryIO

import pytest

from gzkit.core.walk import has_files, list_files, walk_dir


async def test_walk_dir_visits_every_file(example_dir: Path) -> None:
    seen: dict[str, bytes] = {}

    async def fn(path: str, body: BinaryIO) -> None:
        seen[path] = body.read()

    await walk_dir(example_dir, fn)

    assert sorted(seen) == [
        "meshes/turtle.dae",
        "model.config",
        "model.sdf",
        "thumbnails/1.png",
    ]
    assert seen["model.sdf"] == (example_dir / "model.sdf").read_bytes()


async def test_walk_dir_accepts_str_path(example_dir: Path) -> None:
    count = 0

    async def fn(path: str, body: BinaryIO) -> None:
        nonlocal count
        count += 1

    await walk_dir(str(example_dir), fn)
    assert count == 4


async def test_walk_dir_includes_zero_byte_files(tmp_path: Path) -> None:
    (tmp_path / "empty.txt").write_bytes(b"")
    seen: dict[str, bytes] = {}

    async def fn(path: str, body: BinaryIO) -> None:
        seen[path] = body.read()

    await walk_dir(tmp_path, fn)
    assert seen == {"empty.txt": b""}


async def test_walk_dir_stops_on_first_error(example_dir: Path) -> None:
    calls: list[str] = []

    async def fn(path: str, body: BinaryIO) -> None:
        calls.append(path)
        raise RuntimeError("upload failed")

    with pytest.raises(RuntimeError, match="upload failed"):
        await walk_dir(example_dir, fn)
    assert len(calls) == 1


async def test_walk_dir_closes_files(example_dir: Path) -> None:
    handles: list[BinaryIO] = []

    async def fn(path: str, body: BinaryIO) -> None:
        handles.append(body)

    await walk_dir(example_dir, fn)
    assert handles
    assert all(h.closed for h in handles)


def test_list_files_is_sorted(example_dir: Path) -> None:
    rel = [p.relative_to(example_dir).as_posix() for p in list_files(example_dir)]
    assert rel == sorted(rel)


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
def test_list_files_follows_file_links_only(tmp_path: Path) -> None:
    (tmp_path / "real.txt").write_bytes(b"x")
    (tmp_path / "link.txt").symlink_to(tmp_path / "real.txt")
    (tmp_path / "broken.txt").symlink_to(tmp_path / "missing.txt")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "inner.txt").write_bytes(b"y")
    (tmp_path / "dirlink").symlink_to(tmp_path / "sub", target_is_directory=True)

    rel = [p.relative_to(tmp_path).as_posix() for p in list_files(tmp_path)]
    assert rel == ["link.txt", "real.txt", "sub/inner.txt"]


def test_has_files(tmp_path: Path) -> None:
    assert not has_files(tmp_path)
    (tmp_path / "a" / "b").mkdir(parents=True)
    assert not has_files(tmp_path)
    (tmp_path / "a" / "b" / "deep.txt").write_bytes(b"")
    assert has_files(tmp_path)
