import uuid

import pytest

from gzkit.domain.errors import ResourceInvalidFormatError
from gzkit.domain.models import Kind, Resource, validate_resource

VALID_UUID = "e6af5323-db4d-4db3-a402-a8992d6c8d99"

# ---------------------------------------------------------------------------
# Kind
# ---------------------------------------------------------------------------


def test_kind_values():
    assert Kind.MODELS == "models"
    assert Kind.WORLDS == "worlds"
    assert Kind.COLLECTIONS == "collections"


def test_resource_coerces_kind_to_plain_string():
    r = Resource(owner="o", kind=Kind.WORLDS, uuid=VALID_UUID, version=2)
    assert r.kind == "worlds"
    assert type(r.kind) is str


def test_resource_is_frozen(resource: Resource):
    with pytest.raises(Exception):
        resource.owner = "other"


def test_resource_allows_invalid_values_at_construction():
    r = Resource(owner="", kind="", uuid="nope", version=0)
    assert r.owner == ""


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------


def test_prefix(resource: Resource):
    assert resource.prefix == f"OpenRobotics/models/{VALID_UUID}/1"


def test_root(resource: Resource):
    assert resource.root == f"OpenRobotics/models/{VALID_UUID}"


def test_zip_key_is_next_to_prefix(resource: Resource):
    assert resource.zip_key == f"OpenRobotics/models/{VALID_UUID}/1.zip"


def test_key_appends_relative_path(resource: Resource):
    assert resource.key("meshes/turtle.dae") == f"{resource.prefix}/meshes/turtle.dae"


def test_key_strips_leading_slash(resource: Resource):
    assert resource.key("/model.sdf") == f"{resource.prefix}/model.sdf"


def test_key_normalises_path(resource: Resource):
    assert resource.key("meshes//./turtle.dae") == f"{resource.prefix}/meshes/turtle.dae"


def test_key_empty_path_is_prefix(resource: Resource):
    assert resource.key() == resource.prefix
    assert resource.key("") == resource.prefix


def test_key_uses_forward_slashes(resource: Resource):
    assert resource.key("meshes\\turtle.dae") == f"{resource.prefix}/meshes/turtle.dae"


def test_key_allows_dotdot_that_stays_inside(resource: Resource):
    assert resource.key("meshes/../model.sdf") == f"{resource.prefix}/model.sdf"


@pytest.mark.parametrize(
    "path",
    ["../2/model.sdf", "../../../../../secret.txt", "meshes/../../1.zip", "..", "..\\2\\model.sdf"],
)
def test_key_rejects_paths_leaving_the_prefix(resource: Resource, path: str):
    with pytest.raises(ResourceInvalidFormatError):
        resource.key(path)


# ---------------------------------------------------------------------------
# validate_resource
# ---------------------------------------------------------------------------


def test_validate_accepts_valid_resource(resource: Resource):
    validate_resource(resource)


def test_validate_accepts_custom_kind():
    validate_resource(Resource(owner="o", kind="plugins", uuid=VALID_UUID, version=1))


@pytest.mark.parametrize(
    ("fields", "reason"),
    [
        ({"owner": ""}, "missing owner"),
        ({"kind": ""}, "missing kind"),
        ({"uuid": ""}, "invalid uuid"),
        ({"uuid": "not-a-uuid"}, "invalid uuid"),
        ({"uuid": str(uuid.uuid1())}, "invalid uuid"),
        ({"uuid": str(uuid.uuid5(uuid.NAMESPACE_DNS, "gazebosim.org"))}, "invalid uuid"),
        ({"version": 0}, "invalid version"),
        ({"version": -1}, "invalid version"),
    ],
)
def test_validate_rejects(fields, reason):
    base = {"owner": "OpenRobotics", "kind": "models", "uuid": VALID_UUID, "version": 1}
    r = Resource(**{**base, **fields})
    with pytest.raises(ResourceInvalidFormatError) as exc_info:
        validate_resource(r)
    assert exc_info.value.reason.startswith(reason)


def test_validate_reports_first_failing_rule():
    r = Resource(owner="", kind="", uuid="x", version=0)
    with pytest.raises(ResourceInvalidFormatError) as exc_info:
        validate_resource(r)
    assert exc_info.value.reason == "missing owner"


def test_validate_accepts_random_uuid4():
    r = Resource(owner="o", kind="k", uuid=str(uuid.uuid4()), version=3)
    validate_resource(r)
