"""
ResourceStoragePort — the single storage port in gzkit.

Any object satisfying this structural Protocol can act as a resource storage
backend. No base class or registration is required — Python's structural
subtyping (duck typing + Protocol) is sufficient.

Contract shared by every backend
--------------------------------
- Validation is the first step of every method: an invalid Resource raises
  ResourceInvalidFormatError before any I/O happens.
- Object keys are derived from the resource (see gzkit.domain.models):
    "<owner>/<kind>/<uuid>/<version>/<path>"  and  "<owner>/<kind>/<uuid>/<version>.zip"
- Methods are coroutines. Cancelling the calling task cancels the backend I/O.
"""

from __future__ import annotations

from typing import BinaryIO, Protocol, runtime_checkable

from gzkit.domain.models import Resource


@runtime_checkable
class ResourceStoragePort(Protocol):
    """
    Capability set {get_file, download, upload_dir, upload_zip}.

    Implementing adapters (built-in):
      - LocalFileSystemStorage — host filesystem, bundles zipped on demand
      - S3Storage              — AWS S3 (aioboto3), pre-signed bundle URLs
      - GCSStorage             — Google Cloud Storage, signed bundle URLs
    """

    async def get_file(self, resource: Resource, path: str) -> bytes:
        """
        Return the full content of `path` inside the resource.

        Raises
        ------
        ResourceInvalidFormatError  if the resource fails validation
        ResourceNotFoundError       if the file does not exist
        """
        ...

    async def download(self, resource: Resource) -> str:
        """
        Return where the resource's zip bundle can be fetched from.

        Cloud backends return a pre-signed URL valid for the backend's link
        TTL; the local backend returns the path of the (possibly freshly
        built) zip file.

        Raises
        ------
        ResourceInvalidFormatError  if the resource fails validation
        ResourceNotFoundError       if the bundle (or resource) is absent
        """
        ...

    async def upload_dir(self, resource: Resource, src: str) -> None:
        """
        Upload every regular file under `src` into the resource.

        Stops on the first failing file; earlier uploads are kept.

        Raises
        ------
        ResourceInvalidFormatError  if the resource fails validation
        SourceFolderNotFoundError   if `src` does not exist
        SourceFileError             if `src` is a file
        SourceFolderEmptyError      if `src` holds no regular files
        """
        ...

    async def upload_zip(self, resource: Resource, file: BinaryIO | None) -> None:
        """
        Upload an already-built zip bundle for the resource.

        Raises
        ------
        ResourceInvalidFormatError  if the resource fails validation
        FileNilError                if `file` is None
        """
        ...
