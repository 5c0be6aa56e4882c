"""
Tests for resumable upload sessions.
"""

import grpc
import pytest

from blobstream.config import MAX_WRITE_CHUNK_BYTES
from blobstream.exceptions import (
    AbortedError,
    FailedPreconditionError,
    InvalidArgumentError,
    UnavailableError,
)
from blobstream.models import ResumableUploadRequest
from blobstream.proto import storage_pb2
from blobstream.services.resumable import (
    UPLOAD_CHUNK_QUANTUM,
    ResumableSessionParams,
    ResumableUploadService,
    UploadState,
    decode_session_url,
    encode_session_url,
)
from conftest import MockRpcError, RecordingStub


def _status(committed_size, complete=False):
    return storage_pb2.QueryWriteStatusResponse(committed_size=committed_size, complete=complete)


@pytest.fixture
def resumable_stub():
    """Stub that starts upload "u1" and reports nothing committed."""
    return RecordingStub(
        {
            "StartResumableWrite": storage_pb2.StartResumableWriteResponse(upload_id="u1"),
            "QueryWriteStatus": _status(0),
            "InsertObject": storage_pb2.Object(bucket="b", name="o", size=10),
        }
    )


@pytest.fixture
def service(resumable_stub, settings):
    return ResumableUploadService(resumable_stub, settings)


class TestSessionUrl:
    """Tests for session URL encoding."""

    def test_round_trip(self):
        """Test encode then decode preserves names with special characters."""
        params = ResumableSessionParams("my-bucket", "dir/a b?.txt", "id/with=chars")
        url = encode_session_url(params)
        assert url.startswith("grpc://my-bucket/")
        assert decode_session_url(url) == params

    def test_object_slash_quoted(self):
        """Test slashes in object names are quoted."""
        url = encode_session_url(ResumableSessionParams("b", "a/b", "u"))
        assert url == "grpc://b/a%2Fb?upload_id=u"

    @pytest.mark.parametrize(
        "url",
        [
            "https://b/o?upload_id=u",
            "grpc:///o?upload_id=u",
            "grpc://b/?upload_id=u",
            "grpc://b/o",
            "grpc://b/o?upload_id=",
            "not a url",
        ],
    )
    def test_invalid(self, url):
        """Test malformed URLs are rejected."""
        with pytest.raises(InvalidArgumentError):
            decode_session_url(url)


class TestStartSession:
    """Tests for starting and restoring sessions."""

    def test_start(self, service, resumable_stub):
        """Test a new session starts at zero."""
        session = service.start_session(ResumableUploadRequest(bucket_name="b", object_name="o"))

        assert session.upload_id == "u1"
        assert session.committed_size == 0
        assert session.state == UploadState.IN_PROGRESS
        assert session.session_id == "grpc://b/o?upload_id=u1"
        ((request, _),) = resumable_stub.calls_to("StartResumableWrite")
        assert request.insert_object_spec.resource.name == "o"

    def test_start_with_session_id_restores(self, service, resumable_stub):
        """Test upload_session_id restores instead of starting."""
        resumable_stub.responses["QueryWriteStatus"] = _status(UPLOAD_CHUNK_QUANTUM)

        session = service.start_session(
            ResumableUploadRequest(
                bucket_name="ignored",
                object_name="ignored",
                upload_session_id="grpc://b/o?upload_id=u9",
            )
        )

        assert session.upload_id == "u9"
        assert session.committed_size == UPLOAD_CHUNK_QUANTUM
        assert resumable_stub.calls_to("StartResumableWrite") == []

    def test_restore_complete_upload(self, service, resumable_stub):
        """Test restoring a finished upload reports done."""
        resumable_stub.responses["QueryWriteStatus"] = _status(10, complete=True)

        session = service.restore_session("grpc://b/o?upload_id=u1")

        assert session.done
        assert session.committed_size == 10

    def test_restore_failure_propagates(self, service, resumable_stub):
        """Test a failed reset surfaces and the token can be retried."""
        resumable_stub.responses["QueryWriteStatus"] = [
            MockRpcError(grpc.StatusCode.UNAVAILABLE, "try again"),
            _status(5),
        ]
        token = "grpc://b/o?upload_id=u1"

        with pytest.raises(UnavailableError):
            service.restore_session(token)

        session = service.restore_session(token)
        assert session.committed_size == 5

    def test_restore_invalid_token(self, service, resumable_stub):
        """Test invalid token fails before any call."""
        with pytest.raises(InvalidArgumentError):
            service.restore_session("garbage")
        assert resumable_stub.calls == []


class TestUploadChunk:
    """Tests for non-final chunks."""

    def test_chunk_from_committed_size(self, service, resumable_stub):
        """Test chunk is written at the committed size and status re-queried."""
        session = service.start_session(ResumableUploadRequest(bucket_name="b", object_name="o"))
        resumable_stub.responses["QueryWriteStatus"] = _status(UPLOAD_CHUNK_QUANTUM)

        status = session.upload_chunk(b"a" * UPLOAD_CHUNK_QUANTUM)

        ((messages, _),) = resumable_stub.calls_to("InsertObject")
        assert messages[0].upload_id == "u1"
        assert messages[0].write_offset == 0
        assert not any(m.finish_write for m in messages)
        assert status.committed_size == UPLOAD_CHUNK_QUANTUM
        assert session.committed_size == UPLOAD_CHUNK_QUANTUM

    def test_partial_commit(self, service, resumable_stub):
        """Test committed size follows the service, not bytes sent."""
        session = service.start_session(ResumableUploadRequest(bucket_name="b", object_name="o"))
        resumable_stub.responses["QueryWriteStatus"] = _status(UPLOAD_CHUNK_QUANTUM)

        session.upload_chunk(b"a" * (2 * UPLOAD_CHUNK_QUANTUM))

        assert session.committed_size == UPLOAD_CHUNK_QUANTUM

    @pytest.mark.parametrize("size", [0, 1, UPLOAD_CHUNK_QUANTUM + 1])
    def test_chunk_size_quantum(self, service, resumable_stub, size):
        """Test non-final chunks must be whole quanta."""
        session = service.start_session(ResumableUploadRequest(bucket_name="b", object_name="o"))
        with pytest.raises(InvalidArgumentError):
            session.upload_chunk(b"a" * size)
        assert resumable_stub.calls_to("InsertObject") == []

    def test_write_failure_keeps_committed_size(self, service, resumable_stub):
        """Test a failed write surfaces without changing committed size."""
        session = service.start_session(ResumableUploadRequest(bucket_name="b", object_name="o"))
        resumable_stub.responses["InsertObject"] = MockRpcError(grpc.StatusCode.ABORTED, "x")

        with pytest.raises(AbortedError):
            session.upload_chunk(b"a" * UPLOAD_CHUNK_QUANTUM)

        assert session.committed_size == 0


class TestUploadFinalChunk:
    """Tests for finalizing uploads."""

    def test_final_chunk(self, service, resumable_stub):
        """Test final chunk finishes the write and returns metadata."""
        session = service.start_session(ResumableUploadRequest(bucket_name="b", object_name="o"))

        meta = session.upload_final_chunk(b"0123456789", upload_size=10, crc32c_value="4waSgw==")

        ((messages, _),) = resumable_stub.calls_to("InsertObject")
        assert messages[-1].finish_write
        assert messages[0].object_checksums.crc32c.value == 0xE3069283
        assert meta.size == 10
        assert session.done
        assert session.committed_size == 10
        assert session.metadata is meta

    def test_final_chunk_size_mismatch(self, service, resumable_stub):
        """Test final chunk must end at the upload size."""
        session = service.start_session(ResumableUploadRequest(bucket_name="b", object_name="o"))
        with pytest.raises(InvalidArgumentError):
            session.upload_final_chunk(b"0123", upload_size=10)
        assert resumable_stub.calls_to("InsertObject") == []

    def test_write_after_done(self, service, resumable_stub):
        """Test a completed session rejects further writes."""
        session = service.start_session(ResumableUploadRequest(bucket_name="b", object_name="o"))
        session.upload_final_chunk(b"0123456789", upload_size=10)

        with pytest.raises(FailedPreconditionError):
            session.upload_chunk(b"a" * UPLOAD_CHUNK_QUANTUM)
        with pytest.raises(FailedPreconditionError):
            session.upload_final_chunk(b"", upload_size=10)


class TestQueryWriteStatus:
    """Tests for query_write_status."""

    def test_query(self, service, resumable_stub):
        """Test status fields are copied from the response."""
        resumable_stub.responses["QueryWriteStatus"] = _status(42, complete=True)

        status = service.query_write_status("u1")

        assert status.committed_size == 42
        assert status.complete
        ((request, _),) = resumable_stub.calls_to("QueryWriteStatus")
        assert request.upload_id == "u1"


class TestFinalizedSize:
    """Tests for the committed size of finalized uploads."""

    def test_committed_size_from_service(self, service, resumable_stub):
        """Test the finalized object size reported by the service is used."""
        resumable_stub.responses["InsertObject"] = storage_pb2.Object(bucket="b", name="o", size=8)
        session = service.start_session(ResumableUploadRequest(bucket_name="b", object_name="o"))

        session.upload_final_chunk(b"0123456789", upload_size=10)

        assert session.committed_size == 8
        assert session.metadata.size == 8


class TestWriteChunkLimit:
    """Tests for the per-message limit on resumable writes."""

    def test_unvalidated_setting_clamped(self, resumable_stub, settings):
        """Test resumable writes never exceed MAX_WRITE_CHUNK_BYTES per message."""
        oversized = settings.model_copy(update={"upload_chunk_size": 4 * MAX_WRITE_CHUNK_BYTES})
        service = ResumableUploadService(resumable_stub, oversized)
        size = 3 * MAX_WRITE_CHUNK_BYTES
        resumable_stub.responses["InsertObject"] = storage_pb2.Object(name="o", size=size)
        session = service.start_session(ResumableUploadRequest(bucket_name="b", object_name="o"))

        session.upload_final_chunk(b"x" * size, upload_size=size)

        ((messages, _),) = resumable_stub.calls_to("InsertObject")
        assert len(messages) == 3
        assert all(len(m.checksummed_data.content) <= MAX_WRITE_CHUNK_BYTES for m in messages)
