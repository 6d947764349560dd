"""
Domain models for gzkit resource storage — backed by Pydantic v2.

A Resource is the four-tuple (owner, kind, uuid, version) identifying a
versioned tree of files. Every storage backend derives the same object keys
from it:

  prefix   — "<owner>/<kind>/<uuid>/<version>"
  file     — "<prefix>/<relative/path>"
  bundle   — "<prefix>.zip"

Construction does not enforce business rules; validate_resource() does, so
that storage operations can report ResourceInvalidFormatError themselves.
"""

import posixpath
import uuid
from enum import Enum, StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

from gzkit.domain.errors import ResourceInvalidFormatError


class Kind(StrEnum):
    """Built-in resource kinds. Any non-empty string is a valid kind."""

    MODELS = "models"
    WORLDS = "worlds"
    COLLECTIONS = "collections"


class Resource(BaseModel):
    """
    A versioned resource living in a storage backend.

    owner   — who owns the resource (user or organization name)
    kind    — subfolder grouping resources of the same type (see Kind)
    uuid    — RFC-4122 v4 identifier, stringified
    version — numeric version, incremented on every update (starts at 1)
    """

    model_config = ConfigDict(frozen=True)

    owner: str
    kind: str
    uuid: str
    version: int

    @field_validator("kind", mode="before")
    @classmethod
    def _coerce_kind(cls, v: object) -> object:
        """Store Kind members as their plain string value."""
        match v:
            case Enum():
                return v.value
            case _:
                return v

    @property
    def root(self) -> str:
        """Location shared by every version of this resource."""
        return f"{self.owner}/{self.kind}/{self.uuid}"

    @property
    def prefix(self) -> str:
        return f"{self.root}/{self.version}"

    @property
    def zip_key(self) -> str:
        return f"{self.prefix}.zip"

    def key(self, path: str = "") -> str:
        """
        Object key of `path` inside this resource. Empty path → prefix.

        Raises ResourceInvalidFormatError if `path` climbs out of the prefix.
        """
        path = path.replace("\\", "/").lstrip("/")
        if not path:
            return self.prefix
        key = posixpath.normpath(posixpath.join(self.prefix, path))
        if key != self.prefix and not key.startswith(self.prefix + "/"):
            raise ResourceInvalidFormatError(f"path {path!r} escapes the resource")
        return key


def validate_resource(resource: Resource) -> None:
    """
    Sanity-check a resource before any I/O is performed.

    Rules are applied in order; the first failure raises
    ResourceInvalidFormatError with the matching reason.
    """
    if not resource.owner:
        raise ResourceInvalidFormatError("missing owner")
    if not resource.kind:
        raise ResourceInvalidFormatError("missing kind")
    if not _is_uuid4(resource.uuid):
        raise ResourceInvalidFormatError("invalid uuid")
    if resource.version <= 0:
        raise ResourceInvalidFormatError(
            "invalid version, should be greater than 0"
        )


def _is_uuid4(value: str) -> bool:
    try:
        parsed = uuid.UUID(value)
    except (TypeError, ValueError, AttributeError):
        return False
    return parsed.variant == uuid.RFC_4122 and parsed.version == 4
