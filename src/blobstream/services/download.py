"""
Streaming downloads over the server-streaming GetObjectMedia call.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import grpc

from blobstream.checksums import ObjectHasher, compute_crc32c, encode_crc32c
from blobstream.exceptions import DataLossError, DeadlineExceededError, from_rpc_error
from blobstream.logging import get_logger
from blobstream.models.objects import ObjectMetadata
from blobstream.models.requests import ReadObjectRequest
from blobstream.services._conversions import object_from_proto, read_request_to_proto
from blobstream.services._ranges import ReadSelector, resolve_read_range
from blobstream.services.base import BaseService

logger = get_logger(__name__)


class ObjectReadSource:
    """
    Reads blocks from an open GetObjectMedia stream.

    Every block carrying a crc32c is verified on arrival. When the whole
    object is read, the running crc32c and MD5 are compared with the
    checksums the service reported for the object.

    Not safe for concurrent use.
    """

    def __init__(
        self,
        call: Any,
        verify_object: bool = True,
        stall_timeout: float | None = None,
    ) -> None:
        self._call = call
        self._verify_object = verify_object
        self._stall_timeout = stall_timeout
        self._hasher = ObjectHasher()
        self._expected: Any = None
        self._metadata: ObjectMetadata | None = None
        self._closed = False

    @property
    def metadata(self) -> ObjectMetadata | None:
        """Object metadata, if the service sent it."""
        return self._metadata

    @property
    def bytes_received(self) -> int:
        return self._hasher.size

    @property
    def is_open(self) -> bool:
        return not self._closed

    def read(self) -> bytes:
        """
        Return the next block of object data, or b"" at end of stream.

        Raises:
            DataLossError: A block or the whole object failed verification
            DeadlineExceededError: The stall timeout expired
            StorageError: The stream failed
        """
        while not self._closed:
            try:
                response = next(self._call)
            except StopIteration:
                self._closed = True
                self._verify_full_object()
                return b""
            except grpc.RpcError as e:
                self._closed = True
                error = from_rpc_error(e)
                if isinstance(error, DeadlineExceededError):
                    error.timeout_seconds = self._stall_timeout
                logger.warning(f"Read stream failed after {self.bytes_received} bytes: {error}")
                raise error from e

            self._record_response(response)
            if not response.HasField("checksummed_data"):
                continue
            data = response.checksummed_data
            content = data.content
            if data.HasField("crc32c"):
                actual = compute_crc32c(content)
                if actual != data.crc32c.value:
                    self.close()
                    raise DataLossError(
                        f"Block checksum mismatch at byte {self.bytes_received}: "
                        f"expected {encode_crc32c(data.crc32c.value)}, got {encode_crc32c(actual)}"
                    )
            self._hasher.update(content)
            if content:
                return content
        return b""

    def read_all(self) -> bytes:
        """Read the remainder of the stream."""
        return b"".join(self)

    def close(self) -> None:
        """Cancel the stream. The read source cannot be used afterwards."""
        if self._closed:
            return
        self._closed = True
        cancel = getattr(self._call, "cancel", None)
        if cancel is not None:
            cancel()

    def _record_response(self, response: Any) -> None:
        if self._expected is None and response.HasField("object_checksums"):
            self._expected = response.object_checksums
        if self._metadata is None and response.HasField("metadata"):
            self._metadata = object_from_proto(response.metadata)

    def _verify_full_object(self) -> None:
        if not self._verify_object or self._expected is None:
            return
        if self._expected.HasField("crc32c") and self._expected.crc32c.value != self._hasher.crc32c:
            raise DataLossError(
                f"Object crc32c mismatch: expected {encode_crc32c(self._expected.crc32c.value)}, "
                f"got {encode_crc32c(self._hasher.crc32c)}"
            )
        if self._expected.md5_hash and self._expected.md5_hash != self._hasher.md5_hex:
            raise DataLossError(
                f"Object MD5 mismatch: expected {self._expected.md5_hash}, "
                f"got {self._hasher.md5_hex}"
            )

    def __iter__(self) -> Iterator[bytes]:
        while True:
            block = self.read()
            if not block:
                return
            yield block

    def __enter__(self) -> ObjectReadSource:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class DownloadService(BaseService):
    """
    Opens streaming reads.

    Example:
        >>> downloads = DownloadService(stub)
        >>> with downloads.read_object(
        ...     ReadObjectRequest(bucket_name="b", object_name="o", read_last=1024)
        ... ) as source:
        ...     tail = source.read_all()
    """

    def read_object(self, request: ReadObjectRequest) -> ObjectReadSource:
        """
        Resolve the read range and open the stream.

        Raises:
            OutOfRangeError: read_last is 0 (no call is made)
            InvalidArgumentError: malformed read range (no call is made)
        """
        selector = resolve_read_range(
            request.read_range,
            request.read_last,
            request.read_from_offset,
        )
        proto = read_request_to_proto(request, selector)
        stall_timeout = self._settings.download_stall_timeout or None
        call = self._call_sync("GetObjectMedia", proto, timeout=stall_timeout or 0)
        logger.debug(
            f"Reading {request.bucket_name}/{request.object_name} "
            f"offset={selector.offset} limit={selector.limit}"
        )
        return ObjectReadSource(
            call,
            verify_object=selector == ReadSelector(),
            stall_timeout=stall_timeout,
        )
