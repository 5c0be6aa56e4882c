"""
gRPC storage client.

Single entry point for object transfers: single-shot uploads, resumable
sessions and streaming reads, all sharing one round-robin stub pool.
"""

from __future__ import annotations

from typing import Any, NoReturn

from blobstream.config import StorageSettings, get_settings
from blobstream.exceptions import UnimplementedError
from blobstream.models.objects import ObjectMetadata
from blobstream.models.requests import (
    InsertObjectRequest,
    ReadObjectRequest,
    ResumableUploadRequest,
)
from blobstream.services.download import DownloadService, ObjectReadSource
from blobstream.services.resumable import (
    SESSION_URL_SCHEME,
    ResumableUploadService,
    ResumableUploadSession,
    ResumableUploadStatus,
    decode_session_url,
)
from blobstream.services.upload import UploadChunker
from blobstream.transport.base import BaseStub
from blobstream.transport.pool import create_storage_stub


def _unimplemented(operation: str) -> NoReturn:
    raise UnimplementedError(operation=operation)


class GrpcStorageClient:
    """
    Storage client over gRPC.

    Example:
        >>> with GrpcStorageClient() as client:
        ...     meta = client.insert_object_media(
        ...         InsertObjectRequest(bucket_name="b", object_name="o", contents=b"hi")
        ...     )
        ...     with client.read_object(
        ...         ReadObjectRequest(bucket_name="b", object_name="o")
        ...     ) as source:
        ...         data = source.read_all()

        >>> # Tests inject a stub
        >>> client = GrpcStorageClient.create_mock(stub)
    """

    def __init__(
        self,
        settings: StorageSettings | None = None,
        stub: BaseStub | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            settings: Settings (default: process-wide settings)
            stub: Pre-built stub; a channel pool is created when omitted
        """
        self._settings = settings or get_settings()
        self._stub = stub if stub is not None else create_storage_stub(self._settings)

        # Lazy-initialized services
        self._uploads: UploadChunker | None = None
        self._downloads: DownloadService | None = None
        self._resumable: ResumableUploadService | None = None

    @classmethod
    def create_mock(
        cls,
        stub: BaseStub,
        settings: StorageSettings | None = None,
    ) -> GrpcStorageClient:
        """Create a client around an existing stub."""
        return cls(settings=settings, stub=stub)

    @property
    def settings(self) -> StorageSettings:
        return self._settings

    @property
    def stub(self) -> BaseStub:
        return self._stub

    @property
    def uploads(self) -> UploadChunker:
        """Single-shot upload service."""
        if self._uploads is None:
            self._uploads = UploadChunker(self._stub, self._settings)
        return self._uploads

    @property
    def downloads(self) -> DownloadService:
        """Streaming read service."""
        if self._downloads is None:
            self._downloads = DownloadService(self._stub, self._settings)
        return self._downloads

    @property
    def resumable(self) -> ResumableUploadService:
        """Resumable session service."""
        if self._resumable is None:
            self._resumable = ResumableUploadService(self._stub, self._settings)
        return self._resumable

    # =========================================================================
    # Transfers
    # =========================================================================

    def insert_object_media(self, request: InsertObjectRequest) -> ObjectMetadata:
        """Upload an in-memory payload in one streaming call."""
        return self.uploads.upload(request)

    def read_object(self, request: ReadObjectRequest) -> ObjectReadSource:
        """Open a streaming read."""
        return self.downloads.read_object(request)

    def create_resumable_session(self, request: ResumableUploadRequest) -> ResumableUploadSession:
        """Start a resumable upload (or restore one named in the request)."""
        return self.resumable.start_session(request)

    def restore_resumable_session(self, session_id: str) -> ResumableUploadSession:
        """Restore a resumable upload from its persisted token."""
        return self.resumable.restore_session(session_id)

    def query_resumable_upload(self, upload: str) -> ResumableUploadStatus:
        """
        Query committed size and completion of an upload.

        Args:
            upload: Persisted session token (session.session_id) or raw upload id
        """
        if upload.startswith(f"{SESSION_URL_SCHEME}://"):
            upload = decode_session_url(upload).upload_id
        return self.resumable.query_write_status(upload)

    # =========================================================================
    # Not supported by this transport
    # =========================================================================

    def delete_resumable_upload(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("delete_resumable_upload")

    def list_buckets(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("list_buckets")

    def create_bucket(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("create_bucket")

    def get_bucket_metadata(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("get_bucket_metadata")

    def delete_bucket(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("delete_bucket")

    def list_objects(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("list_objects")

    def get_object_metadata(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("get_object_metadata")

    def copy_object(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("copy_object")

    def delete_object(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("delete_object")

    def compose_object(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("compose_object")

    def rewrite_object(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("rewrite_object")

    def list_notifications(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("list_notifications")

    def list_hmac_keys(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("list_hmac_keys")

    def get_service_account(self, *args: Any, **kwargs: Any) -> NoReturn:
        _unimplemented("get_service_account")

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def close(self) -> None:
        """Close every channel."""
        self._stub.close()

    def __enter__(self) -> GrpcStorageClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<GrpcStorageClient endpoint={self._settings.endpoint!r}>"


__all__ = ["GrpcStorageClient"]
