"""
Resumable upload sessions.

A session is identified by an opaque upload id issued by the service. The
session URL returned by ResumableUploadSession.session_id can be persisted
and handed back to restore_session() in another process.

Committed size always comes from a QueryWriteStatus response: bytes sent on
the network are never assumed durable until the service says so.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import parse_qs, quote, unquote, urlsplit

from pydantic import BaseModel

from blobstream.checksums import decode_crc32c, md5_base64_to_hex
from blobstream.config import MAX_WRITE_CHUNK_BYTES
from blobstream.exceptions import FailedPreconditionError, InvalidArgumentError
from blobstream.logging import get_logger
from blobstream.models.objects import ObjectMetadata
from blobstream.models.requests import ResumableUploadRequest
from blobstream.proto import storage_pb2
from blobstream.services._conversions import (
    object_from_proto,
    query_request_to_proto,
    resumable_request_to_proto,
)
from blobstream.services.base import BaseService
from blobstream.services.upload import iter_write_requests

logger = get_logger(__name__)

SESSION_URL_SCHEME = "grpc"

# Non-final chunks must be a multiple of this size
UPLOAD_CHUNK_QUANTUM = 256 * 1024  # 256KB


class UploadState(str, Enum):
    """Completion state of a resumable upload."""

    IN_PROGRESS = "in_progress"
    DONE = "done"


class ResumableUploadStatus(BaseModel):
    """Result of a write-status query."""

    committed_size: int = 0
    complete: bool = False


@dataclass(frozen=True)
class ResumableSessionParams:
    """Identity of a resumable upload."""

    bucket_name: str
    object_name: str
    upload_id: str


def encode_session_url(params: ResumableSessionParams) -> str:
    """Encode session parameters as grpc://<bucket>/<object>?upload_id=<id>."""
    return (
        f"{SESSION_URL_SCHEME}://{quote(params.bucket_name, safe='')}"
        f"/{quote(params.object_name, safe='')}"
        f"?upload_id={quote(params.upload_id, safe='')}"
    )


def decode_session_url(url: str) -> ResumableSessionParams:
    """
    Decode a session URL produced by encode_session_url().

    Raises:
        InvalidArgumentError: url is not a valid session URL.
    """
    parts = urlsplit(url)
    if parts.scheme != SESSION_URL_SCHEME or not parts.netloc:
        raise InvalidArgumentError(f"Invalid resumable session URL: {url!r}")
    object_name = parts.path[1:] if parts.path.startswith("/") else ""
    upload_ids = parse_qs(parts.query).get("upload_id", [])
    if not object_name or len(upload_ids) != 1 or not upload_ids[0]:
        raise InvalidArgumentError(f"Invalid resumable session URL: {url!r}")
    return ResumableSessionParams(
        bucket_name=unquote(parts.netloc),
        object_name=unquote(object_name),
        upload_id=upload_ids[0],
    )


class ResumableUploadSession:
    """
    One resumable upload.

    Holds a reference to the service that created it so it can issue new
    calls after being restored. Not safe for concurrent writers.
    """

    def __init__(self, service: ResumableUploadService, params: ResumableSessionParams) -> None:
        self._service = service
        self._params = params
        self._committed_size = 0
        self._state = UploadState.IN_PROGRESS
        self._metadata: ObjectMetadata | None = None

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def session_id(self) -> str:
        """Persistable token accepted by restore_session()."""
        return encode_session_url(self._params)

    @property
    def upload_id(self) -> str:
        return self._params.upload_id

    @property
    def bucket_name(self) -> str:
        return self._params.bucket_name

    @property
    def object_name(self) -> str:
        return self._params.object_name

    @property
    def committed_size(self) -> int:
        """Bytes the service has durably accepted."""
        return self._committed_size

    @property
    def state(self) -> UploadState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state == UploadState.DONE

    @property
    def metadata(self) -> ObjectMetadata | None:
        """Object metadata, once the upload is finalized."""
        return self._metadata

    # =========================================================================
    # Operations
    # =========================================================================

    def query_status(self) -> ResumableUploadStatus:
        """Ask the service for the committed size and completion flag."""
        status = self._service.query_write_status(self._params.upload_id)
        self._committed_size = status.committed_size
        if status.complete:
            self._state = UploadState.DONE
        return status

    def reset_session(self) -> ResumableUploadStatus:
        """Resynchronize committed size with the service. Sends no data."""
        status = self.query_status()
        logger.debug(
            f"Session {self._params.upload_id} reset: committed_size={status.committed_size}"
        )
        return status

    def upload_chunk(self, data: bytes) -> ResumableUploadStatus:
        """
        Send a non-final chunk starting at the committed size.

        Args:
            data: Chunk bytes, a multiple of UPLOAD_CHUNK_QUANTUM

        Returns:
            Status reported by the service after the write
        """
        self._check_in_progress()
        if not data or len(data) % UPLOAD_CHUNK_QUANTUM != 0:
            raise InvalidArgumentError(
                f"Non-final chunks must be a non-empty multiple of {UPLOAD_CHUNK_QUANTUM} "
                f"bytes, got {len(data)}"
            )
        template = storage_pb2.InsertObjectRequest(upload_id=self._params.upload_id)
        self._service.write(template, data, self._committed_size, finish=False)
        return self.query_status()

    def upload_final_chunk(
        self,
        data: bytes,
        upload_size: int,
        crc32c_value: str | None = None,
        md5_hash_value: str | None = None,
    ) -> ObjectMetadata:
        """
        Send the last chunk and finalize the object.

        Args:
            data: Remaining bytes, starting at the committed size
            upload_size: Total object size
            crc32c_value: Optional whole-object crc32c (base64)
            md5_hash_value: Optional whole-object MD5 (base64)

        Returns:
            Metadata of the finalized object
        """
        self._check_in_progress()
        if self._committed_size + len(data) != upload_size:
            raise InvalidArgumentError(
                f"Final chunk of {len(data)} bytes at offset {self._committed_size} "
                f"does not end at upload size {upload_size}"
            )
        template = storage_pb2.InsertObjectRequest(upload_id=self._params.upload_id)
        if crc32c_value is not None:
            template.object_checksums.crc32c.value = decode_crc32c(crc32c_value)
        if md5_hash_value is not None:
            template.object_checksums.md5_hash = md5_base64_to_hex(md5_hash_value)

        response = self._service.write(template, data, self._committed_size, finish=True)
        self._metadata = object_from_proto(response)
        self._committed_size = self._metadata.size
        self._state = UploadState.DONE
        if self._metadata.size != upload_size:
            logger.warning(
                f"Upload {self._params.upload_id} finalized with {self._metadata.size} bytes, "
                f"expected {upload_size}"
            )
        logger.info(
            f"Upload {self._params.bucket_name}/{self._params.object_name} finalized "
            f"({self._metadata.size} bytes)"
        )
        return self._metadata

    def _check_in_progress(self) -> None:
        if self._state == UploadState.DONE:
            raise FailedPreconditionError(
                f"Upload session {self._params.upload_id} is already complete"
            )

    def __repr__(self) -> str:
        return (
            f"ResumableUploadSession({self._params.bucket_name}/{self._params.object_name}, "
            f"committed={self._committed_size}, state={self._state.value})"
        )


class ResumableUploadService(BaseService):
    """
    Creates, restores and queries resumable upload sessions.

    Example:
        >>> service = ResumableUploadService(stub)
        >>> session = service.start_session(
        ...     ResumableUploadRequest(bucket_name="b", object_name="o")
        ... )
        >>> token = session.session_id  # persist this
        >>> session = service.restore_session(token)
        >>> session.upload_final_chunk(rest, upload_size=total)
    """

    def start_session(self, request: ResumableUploadRequest) -> ResumableUploadSession:
        """
        Start a session, or restore one if request.upload_session_id is set.

        Returns:
            Session with committed size 0 (or the restored size)
        """
        if request.upload_session_id:
            return self.restore_session(request.upload_session_id)

        response = self._call_sync("StartResumableWrite", resumable_request_to_proto(request))
        params = ResumableSessionParams(
            bucket_name=request.bucket_name,
            object_name=request.object_name,
            upload_id=response.upload_id,
        )
        logger.info(
            f"Started resumable upload {response.upload_id} for "
            f"{request.bucket_name}/{request.object_name}"
        )
        return ResumableUploadSession(self, params)

    def restore_session(self, session_id: str) -> ResumableUploadSession:
        """
        Restore a session from its persisted token.

        The session is reset against the service before it is returned. If
        the reset fails its error propagates and no session is returned; the
        token stays valid for another attempt.
        """
        params = decode_session_url(session_id)
        session = ResumableUploadSession(self, params)
        session.reset_session()
        return session

    def query_write_status(self, upload_id: str) -> ResumableUploadStatus:
        """Issue QueryWriteStatus for an upload id."""
        response = self._call_sync("QueryWriteStatus", query_request_to_proto(upload_id))
        return ResumableUploadStatus(
            committed_size=response.committed_size,
            complete=response.complete,
        )

    def write(self, template: Any, data: bytes, offset: int, finish: bool) -> Any:
        """Stream data into an upload starting at offset; returns the wire Object."""
        return self._call_sync(
            "InsertObject",
            iter_write_requests(
                template,
                data,
                min(self._settings.upload_chunk_size, MAX_WRITE_CHUNK_BYTES),
                start_offset=offset,
                finish=finish,
            ),
            timeout=0,
        )
