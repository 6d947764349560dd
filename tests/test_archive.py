import os
import stat
import zipfile
from pathlib import Path

from gzkit.core.archive import zip_dir


def test_zip_dir_contains_every_file(example_dir: Path, tmp_path: Path) -> None:
    target = zip_dir(example_dir, tmp_path / "out" / "1.zip")

    with zipfile.ZipFile(target) as zf:
        assert sorted(zf.namelist()) == [
            "meshes/turtle.dae",
            "model.config",
            "model.sdf",
            "thumbnails/1.png",
        ]
        assert zf.read("meshes/turtle.dae") == (example_dir / "meshes/turtle.dae").read_bytes()


def test_zip_dir_uses_deflate(example_dir: Path, tmp_path: Path) -> None:
    target = zip_dir(example_dir, tmp_path / "1.zip")
    with zipfile.ZipFile(target) as zf:
        assert all(i.compress_type == zipfile.ZIP_DEFLATED for i in zf.infolist())


def test_zip_dir_preserves_mode_bits(example_dir: Path, tmp_path: Path) -> None:
    script = example_dir / "run.sh"
    script.write_bytes(b"#!/bin/sh\n")
    script.chmod(0o750)

    target = zip_dir(example_dir, tmp_path / "1.zip")
    with zipfile.ZipFile(target) as zf:
        mode = zf.getinfo("run.sh").external_attr >> 16
    assert stat.S_IMODE(mode) == 0o750


def test_zip_dir_clamps_timestamps_before_1980(example_dir: Path, tmp_path: Path) -> None:
    os.utime(example_dir / "model.sdf", (0, 0))

    target = zip_dir(example_dir, tmp_path / "1.zip")

    with zipfile.ZipFile(target) as zf:
        assert zf.getinfo("model.sdf").date_time == (1980, 1, 1, 0, 0, 0)
        assert zf.read("model.sdf") == (example_dir / "model.sdf").read_bytes()


def test_zip_dir_leaves_no_temporary_files(example_dir: Path, tmp_path: Path) -> None:
    out = tmp_path / "out"
    zip_dir(example_dir, out / "1.zip")
    assert [p.name for p in out.iterdir()] == ["1.zip"]


def test_zip_dir_returns_target(example_dir: Path, tmp_path: Path) -> None:
    target = tmp_path / "bundle.zip"
    assert zip_dir(example_dir, str(target)) == target
    assert target.is_file()
