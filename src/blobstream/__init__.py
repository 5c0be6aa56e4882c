"""
blobstream: resumable, checksummed object transfer over gRPC.

Usage:
    >>> from blobstream import GrpcStorageClient, InsertObjectRequest
    >>>
    >>> with GrpcStorageClient() as client:
    ...     client.insert_object_media(
    ...         InsertObjectRequest(bucket_name="b", object_name="o", contents=b"data")
    ...     )
"""

from blobstream._version import __version__
from blobstream.client import GrpcStorageClient
from blobstream.config import (
    StorageSettings,
    configure_settings,
    get_settings,
    reset_settings,
)
from blobstream.exceptions import (
    DataLossError,
    DeadlineExceededError,
    InvalidArgumentError,
    OutOfRangeError,
    StorageError,
    UnimplementedError,
)
from blobstream.models import (
    EncryptionKey,
    InsertObjectRequest,
    ObjectMetadata,
    ReadObjectRequest,
    ReadRange,
    ResumableUploadRequest,
)
from blobstream.services import (
    ObjectReadSource,
    ResumableUploadSession,
    ResumableUploadStatus,
    UploadState,
)

__all__ = [
    "__version__",
    "GrpcStorageClient",
    "StorageSettings",
    "configure_settings",
    "get_settings",
    "reset_settings",
    "DataLossError",
    "DeadlineExceededError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "StorageError",
    "UnimplementedError",
    "EncryptionKey",
    "InsertObjectRequest",
    "ObjectMetadata",
    "ReadObjectRequest",
    "ReadRange",
    "ResumableUploadRequest",
    "ObjectReadSource",
    "ResumableUploadSession",
    "ResumableUploadStatus",
    "UploadState",
]
