"""
gzkit — core primitives shared by the Gazebo Web backend services.

Two independent components:

Queue
-----
An in-process, thread-safe FIFO that keeps its elements addressable: index
access, search, swap, move-to-front/back, plus a blocking
dequeue_or_wait_for_next_element() that receives the next enqueued value
directly through a bounded set of listeners.

    from gzkit import Queue

    q = Queue()
    q.enqueue("sim-1")
    q.enqueue("sim-2")
    q.move_to_front("sim-2")
    assert q.dequeue() == "sim-2"

Resource storage
----------------
Version-addressed resources (owner + kind + uuid + version) stored as file
trees and zip bundles behind one async interface:

    import asyncio
    from gzkit import Kind, LocalFileSystemStorage, Resource

    async def main():
        storage = LocalFileSystemStorage("/srv/resources")
        r = Resource(
            owner="OpenRobotics",
            kind=Kind.MODELS,
            uuid="e6af5323-db4d-4db3-a402-a8992d6c8d99",
            version=1,
        )
        await storage.upload_dir(r, "./example")
        sdf = await storage.get_file(r, "model.sdf")
        bundle = await storage.download(r)   # path to "<prefix>.zip"

    asyncio.run(main())

Storage adapters
----------------
Built-in adapters (no extra deps):
  - LocalFileSystemStorage  — host filesystem, bundles zipped on demand

Optional adapters (install extras):
  - S3Storage        (pip install "gzkit[s3]")
  - GCSStorage       (pip install "gzkit[gcs]")

Custom adapters only need to implement the four-method ResourceStoragePort:
  async def get_file(resource, path) -> bytes
  async def download(resource) -> str
  async def upload_dir(resource, src) -> None
  async def upload_zip(resource, file) -> None

Architecture
------------
Follows the Ports & Adapters pattern:
  domain/   — pure value types (Resource, Kind) and the error hierarchy
  ports/    — Protocol interfaces (ResourceStoragePort)
  core/     — Queue, ReadWriteLock, directory walk, shared operations, zipping
  adapters/ — concrete storage implementations
"""
from __future__ import annotations

from gzkit.adapters.storage.filesystem import LocalFileSystemStorage
from gzkit.core.queue import MAX_LISTENERS, Queue
from gzkit.core.rwlock import ReadWriteLock
from gzkit.core.walk import WalkDirFunc, walk_dir
from gzkit.domain.errors import (
    EmptyResourceError,
    ErrorCode,
    FileNilError,
    GzError,
    IDNotFoundError,
    IndexOutOfBoundsError,
    MoveIndexBackPositionError,
    MoveIndexFrontPositionError,
    QueueEmptyError,
    QueueError,
    ResourceError,
    ResourceInvalidFormatError,
    ResourceNotFoundError,
    SourceFileError,
    SourceFolderEmptyError,
    SourceFolderNotFoundError,
    StorageError,
    SwapIndexesMatchError,
    TooManyListenersError,
)
from gzkit.domain.models import Kind, Resource, validate_resource
from gzkit.ports.storage import ResourceStoragePort

__all__ = [
    # Domain models
    "Kind",
    "Resource",
    "validate_resource",
    # Errors
    "ErrorCode",
    "GzError",
    "QueueError",
    "QueueEmptyError",
    "IndexOutOfBoundsError",
    "IDNotFoundError",
    "SwapIndexesMatchError",
    "MoveIndexFrontPositionError",
    "MoveIndexBackPositionError",
    "TooManyListenersError",
    "ResourceError",
    "ResourceInvalidFormatError",
    "ResourceNotFoundError",
    "EmptyResourceError",
    "SourceFolderNotFoundError",
    "SourceFolderEmptyError",
    "SourceFileError",
    "FileNilError",
    "StorageError",
    # Queue
    "MAX_LISTENERS",
    "Queue",
    "ReadWriteLock",
    # Port (for typing custom adapters)
    "ResourceStoragePort",
    # Directory walk
    "WalkDirFunc",
    "walk_dir",
    # Built-in storage adapters
    "LocalFileSystemStorage",
]
