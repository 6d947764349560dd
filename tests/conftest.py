from pathlib import Path

import pytest

from gzkit.domain.models import Kind, Resource

VALID_UUID = "e6af5323-db4d-4db3-a402-a8992d6c8d99"

EXAMPLE_FILES: dict[str, bytes] = {
    "model.config": b"<?xml version='1.0'?><model><name>turtle</name></model>",
    "model.sdf": b"<sdf version='1.6'><model name='turtle'/></sdf>",
    "meshes/turtle.dae": b"<COLLADA>" + bytes(range(256)) * 8 + b"</COLLADA>",
    "thumbnails/1.png": b"\x89PNG\r\n\x1a\n" + b"\x00" * 64,
}


@pytest.fixture
def resource() -> Resource:
    return Resource(owner="OpenRobotics", kind=Kind.MODELS, uuid=VALID_UUID, version=1)


@pytest.fixture
def example_dir(tmp_path: Path) -> Path:
    """A model folder: model.config, model.sdf, meshes/turtle.dae, thumbnails/1.png."""
    root = tmp_path / "example"
    for rel, content in EXAMPLE_FILES.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
    return root
