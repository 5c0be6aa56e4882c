"""
Tests for streaming downloads.
"""

import hashlib

import grpc
import pytest

from blobstream.checksums import compute_crc32c
from blobstream.config import StorageSettings
from blobstream.exceptions import DataLossError, DeadlineExceededError, OutOfRangeError
from blobstream.models import ReadObjectRequest, ReadRange
from blobstream.proto import storage_pb2
from blobstream.services.download import DownloadService, ObjectReadSource
from conftest import MockRpcError, RecordingStub


class FakeCall:
    """Server-streaming call replaying responses, optionally failing at the end."""

    def __init__(self, responses, error=None):
        self._responses = iter(responses)
        self._error = error
        self.cancelled = False

    def __iter__(self):
        return self

    def __next__(self):
        try:
            return next(self._responses)
        except StopIteration:
            if self._error is not None:
                raise self._error
            raise

    def cancel(self):
        self.cancelled = True


def _block(content, crc=True):
    response = storage_pb2.GetObjectMediaResponse()
    response.checksummed_data.content = content
    if crc:
        response.checksummed_data.crc32c.value = compute_crc32c(content)
    return response


def _with_object_checksums(response, payload):
    response.object_checksums.crc32c.value = compute_crc32c(payload)
    response.object_checksums.md5_hash = hashlib.md5(payload).hexdigest()
    return response


class TestObjectReadSource:
    """Tests for ObjectReadSource."""

    def test_read_blocks(self):
        """Test blocks are returned in order then EOF."""
        source = ObjectReadSource(FakeCall([_block(b"hello "), _block(b"world")]))

        assert source.read() == b"hello "
        assert source.read() == b"world"
        assert source.read() == b""
        assert not source.is_open
        assert source.bytes_received == 11

    def test_full_object_verified(self):
        """Test matching whole-object checksums pass."""
        payload = b"hello world"
        first = _with_object_checksums(_block(b"hello "), payload)
        source = ObjectReadSource(FakeCall([first, _block(b"world")]))

        assert source.read_all() == payload

    def test_full_object_crc_mismatch(self):
        """Test a whole-object crc32c mismatch raises at EOF."""
        first = _with_object_checksums(_block(b"hello "), b"something else")
        source = ObjectReadSource(FakeCall([first, _block(b"world")]))

        with pytest.raises(DataLossError):
            source.read_all()

    def test_full_object_md5_mismatch(self):
        """Test a whole-object MD5 mismatch raises at EOF."""
        first = _block(b"data")
        first.object_checksums.md5_hash = hashlib.md5(b"other").hexdigest()
        source = ObjectReadSource(FakeCall([first]))

        with pytest.raises(DataLossError) as exc:
            source.read_all()
        assert "MD5" in str(exc.value)

    def test_partial_read_skips_object_verification(self):
        """Test range reads only verify blocks."""
        first = _with_object_checksums(_block(b"part"), b"the whole object")
        source = ObjectReadSource(FakeCall([first]), verify_object=False)

        assert source.read_all() == b"part"

    def test_block_crc_mismatch(self):
        """Test a corrupted block raises and cancels the stream."""
        bad = _block(b"data")
        bad.checksummed_data.crc32c.value ^= 1
        call = FakeCall([bad])
        source = ObjectReadSource(call)

        with pytest.raises(DataLossError):
            source.read()
        assert call.cancelled
        assert not source.is_open

    def test_block_without_crc(self):
        """Test blocks without crc32c are accepted."""
        source = ObjectReadSource(FakeCall([_block(b"data", crc=False)]))
        assert source.read() == b"data"

    def test_empty_blocks_skipped(self):
        """Test responses without content do not end the stream."""
        metadata_only = storage_pb2.GetObjectMediaResponse()
        metadata_only.metadata.name = "o"
        source = ObjectReadSource(FakeCall([metadata_only, _block(b""), _block(b"x")]))

        assert source.read() == b"x"
        assert source.metadata.name == "o"

    def test_stream_error(self):
        """Test stream failures are translated."""
        call = FakeCall([_block(b"a")], error=MockRpcError(grpc.StatusCode.DEADLINE_EXCEEDED, ""))
        source = ObjectReadSource(call, stall_timeout=5.0)

        assert source.read() == b"a"
        with pytest.raises(DeadlineExceededError) as exc:
            source.read()
        assert exc.value.timeout_seconds == 5.0
        assert not source.is_open

    def test_close_cancels(self):
        """Test close cancels the call once."""
        call = FakeCall([_block(b"a")])
        with ObjectReadSource(call) as source:
            assert source.is_open
        assert call.cancelled
        assert source.read() == b""


class TestDownloadService:
    """Tests for DownloadService."""

    def test_read_object(self, settings):
        """Test request carries the resolved range."""
        stub = RecordingStub({"GetObjectMedia": lambda request: FakeCall([_block(b"abc")])})
        service = DownloadService(stub, settings)

        source = service.read_object(
            ReadObjectRequest(
                bucket_name="b",
                object_name="o",
                read_range=ReadRange(begin=10, end=50),
                read_from_offset=20,
            )
        )

        ((request, kwargs),) = stub.calls_to("GetObjectMedia")
        assert request.read_offset == 20
        assert request.read_limit == 30
        assert kwargs["timeout"] is None
        assert source.read_all() == b"abc"

    def test_read_last_zero_no_call(self, settings):
        """Test read_last=0 is rejected without a call."""
        stub = RecordingStub()
        service = DownloadService(stub, settings)

        with pytest.raises(OutOfRangeError):
            service.read_object(ReadObjectRequest(bucket_name="b", object_name="o", read_last=0))
        assert stub.calls == []

    def test_stall_timeout(self):
        """Test the stall timeout is used as the call deadline."""
        settings = StorageSettings(auth_strategy="insecure", download_stall_timeout=7.5)
        stub = RecordingStub({"GetObjectMedia": lambda request: FakeCall([])})

        DownloadService(stub, settings).read_object(
            ReadObjectRequest(bucket_name="b", object_name="o")
        )

        ((_, kwargs),) = stub.calls_to("GetObjectMedia")
        assert kwargs["timeout"] == 7.5

    def test_full_read_verifies_object(self, settings):
        """Test whole-object reads check object checksums."""
        first = _with_object_checksums(_block(b"abc"), b"xyz")
        stub = RecordingStub({"GetObjectMedia": lambda request: FakeCall([first])})

        source = DownloadService(stub, settings).read_object(
            ReadObjectRequest(bucket_name="b", object_name="o")
        )

        with pytest.raises(DataLossError):
            source.read_all()
