"""
Single-shot uploads over the client-streaming InsertObject call.

The payload is split into segments of at most MAX_WRITE_CHUNK_BYTES. The
first message carries the object specification and whole-object checksums;
every message carries its write offset and its own crc32c; the last one sets
finish_write. gRPC half-closes the request stream when the generator
returns, which marks the final message on the transport.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from blobstream.checksums import compute_crc32c
from blobstream.config import MAX_WRITE_CHUNK_BYTES, StorageSettings
from blobstream.logging import get_logger
from blobstream.models.objects import ObjectMetadata
from blobstream.models.requests import InsertObjectRequest
from blobstream.services._conversions import insert_request_to_proto, object_from_proto
from blobstream.services.base import BaseService
from blobstream.transport.base import BaseStub

logger = get_logger(__name__)

# Fields that only belong on the first message of a write stream
FIRST_MESSAGE_FIELDS = ("insert_object_spec", "upload_id", "object_checksums")


def iter_write_requests(
    template: Any,
    contents: bytes,
    chunk_size: int,
    start_offset: int = 0,
    finish: bool = True,
) -> Iterator[Any]:
    """
    Split contents into InsertObject messages.

    Runs at least once so an empty payload still produces one message.

    Args:
        template: First message; one-time fields are cleared after it is sent
        contents: Bytes to send
        chunk_size: Maximum bytes per message
        start_offset: Object offset of contents[0]
        finish: Set finish_write on the last message

    Yields:
        Independent copies of the message for each segment.
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")

    view = memoryview(contents)
    size = len(view)
    position = 0
    while True:
        n = min(size - position, chunk_size)
        segment = bytes(view[position : position + n])
        template.write_offset = start_offset + position
        template.checksummed_data.content = segment
        template.checksummed_data.crc32c.value = compute_crc32c(segment)

        message = type(template)()
        message.CopyFrom(template)
        if position + n >= size:
            if finish:
                message.finish_write = True
            yield message
            return
        yield message

        for field in FIRST_MESSAGE_FIELDS:
            template.ClearField(field)
        position += n


class UploadChunker(BaseService):
    """
    Uploads an in-memory payload in one streaming call.

    A failed stream is reported as-is and never retried here; use a
    resumable session when the upload must survive interruptions.

    Example:
        >>> chunker = UploadChunker(stub)
        >>> metadata = chunker.upload(
        ...     InsertObjectRequest(bucket_name="b", object_name="o", contents=data)
        ... )
    """

    def __init__(
        self,
        stub: BaseStub,
        settings: StorageSettings | None = None,
        chunk_size: int | None = None,
    ) -> None:
        super().__init__(stub, settings)
        # Larger segments are rejected by the service
        self._chunk_size = min(chunk_size or self._settings.upload_chunk_size, MAX_WRITE_CHUNK_BYTES)

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def upload(self, request: InsertObjectRequest) -> ObjectMetadata:
        """
        Upload request.contents as a new object.

        Args:
            request: Object identity, payload and options

        Returns:
            Metadata of the committed object

        Raises:
            InvalidArgumentError: Malformed caller-supplied checksum (before any call)
            StorageError: Status reported when the stream closed
        """
        template = insert_request_to_proto(request)
        size = len(request.contents)
        segments = max(1, -(-size // self._chunk_size))
        logger.debug(
            f"Uploading {request.bucket_name}/{request.object_name}: "
            f"{size} bytes in {segments} messages"
        )
        response = self._call_sync(
            "InsertObject",
            iter_write_requests(template, request.contents, self._chunk_size),
            timeout=0,
        )
        return object_from_proto(response)
