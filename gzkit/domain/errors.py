"""
Exception hierarchy for gzkit.

GzError
├── QueueError                     — carries an ErrorCode
│   ├── QueueEmptyError
│   ├── IndexOutOfBoundsError
│   ├── IDNotFoundError
│   ├── SwapIndexesMatchError
│   ├── MoveIndexFrontPositionError
│   ├── MoveIndexBackPositionError
│   └── TooManyListenersError
└── ResourceError
    ├── ResourceInvalidFormatError — resource failed validation (carries reason)
    ├── ResourceNotFoundError      — object or bundle is absent (carries key)
    ├── EmptyResourceError         — resource directory holds no files
    ├── SourceFolderNotFoundError  — upload_dir source does not exist
    ├── SourceFolderEmptyError     — upload_dir source has no files
    ├── SourceFileError            — upload_dir source is a file
    ├── FileNilError               — upload_zip got no file handle
    └── StorageError               — underlying I/O failure (wraps original exception)
"""

from __future__ import annotations

from enum import IntEnum
from typing import ClassVar


class ErrorCode(IntEnum):
    """Numeric codes shared with the other Gazebo Web services."""

    ID_NOT_FOUND = 1003
    QUEUE_EMPTY = 6000
    QUEUE_INDEX_OUT_OF_BOUNDS = 6001
    QUEUE_SWAP_INDEXES_MATCH = 6003
    QUEUE_MOVE_INDEX_FRONT_POSITION = 6004
    QUEUE_MOVE_INDEX_BACK_POSITION = 6005
    QUEUE_TOO_MANY_LISTENERS = 6006


class GzError(Exception):
    """Base class for all gzkit exceptions."""


# ---------------------------------------------------------------------- #
# Queue                                                                    #
# ---------------------------------------------------------------------- #


class QueueError(GzError):
    """
    Base class for queue failures.

    Every subclass is tagged with an ErrorCode so callers can branch on
    ``err.code`` as well as on the exception type.
    """

    code: ClassVar[ErrorCode]
    message: ClassVar[str] = "Queue error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class QueueEmptyError(QueueError):
    code = ErrorCode.QUEUE_EMPTY
    message = "Queue is empty"


class IndexOutOfBoundsError(QueueError):
    code = ErrorCode.QUEUE_INDEX_OUT_OF_BOUNDS
    message = "Queue index is out of bounds"


class IDNotFoundError(QueueError):
    code = ErrorCode.ID_NOT_FOUND
    message = "Element not found in queue"


class SwapIndexesMatchError(QueueError):
    code = ErrorCode.QUEUE_SWAP_INDEXES_MATCH
    message = "Cannot swap the same element in the queue"


class MoveIndexFrontPositionError(QueueError):
    code = ErrorCode.QUEUE_MOVE_INDEX_FRONT_POSITION
    message = "Cannot move the first element to the front"


class MoveIndexBackPositionError(QueueError):
    code = ErrorCode.QUEUE_MOVE_INDEX_BACK_POSITION
    message = "Cannot move the last element to the back"


class TooManyListenersError(QueueError):
    code = ErrorCode.QUEUE_TOO_MANY_LISTENERS
    message = "Too many dequeue listeners"


# ---------------------------------------------------------------------- #
# Resource storage                                                         #
# ---------------------------------------------------------------------- #


class ResourceError(GzError):
    """Base class for resource storage failures."""


class ResourceInvalidFormatError(ResourceError):
    """Raised when a resource fails validation. ``reason`` says which rule."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"invalid resource format: {reason}")


class ResourceNotFoundError(ResourceError):
    """Raised when the object (or the zip bundle) for a resource is absent."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"resource not found: {key!r}")


class EmptyResourceError(ResourceError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"resource has no content: {key!r}")


class SourceFolderNotFoundError(ResourceError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"source folder not found: {path!r}")


class SourceFolderEmptyError(ResourceError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"source folder is empty: {path!r}")


class SourceFileError(ResourceError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"source is a file, should be a folder: {path!r}")


class FileNilError(ResourceError):
    def __init__(self) -> None:
        super().__init__("no file provided")


class StorageError(ResourceError):
    """
    Wraps an underlying I/O failure from a storage adapter.

    Attributes
    ----------
    cause : Exception
        The original exception from the storage backend.
    """

    def __init__(self, message: str, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"{message}: {cause}")
