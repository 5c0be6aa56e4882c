"""
Tests for the storage wire schema.
"""

from blobstream.proto import storage_pb2, storage_pb2_grpc


class TestStorageSchema:
    """Tests for the registered descriptors."""

    def test_service_methods(self):
        """Test the service declares the streaming shapes."""
        service = storage_pb2.DESCRIPTOR.services_by_name["Storage"]
        methods = {m.name: m for m in service.methods}

        assert set(methods) == {
            "InsertObject",
            "GetObjectMedia",
            "StartResumableWrite",
            "QueryWriteStatus",
        }
        assert methods["InsertObject"].client_streaming
        assert methods["GetObjectMedia"].server_streaming
        assert not methods["QueryWriteStatus"].client_streaming

    def test_first_message_oneof(self):
        """Test upload id and object spec are alternatives."""
        request = storage_pb2.InsertObjectRequest(upload_id="u1")
        request.insert_object_spec.resource.name = "o"
        assert request.WhichOneof("first_message") == "insert_object_spec"
        assert request.upload_id == ""

    def test_serialization(self):
        """Test messages survive the wire."""
        response = storage_pb2.GetObjectMediaResponse()
        response.checksummed_data.content = b"abc"
        response.checksummed_data.crc32c.value = 7
        response.metadata.metadata["k"] = "v"

        parsed = storage_pb2.GetObjectMediaResponse.FromString(response.SerializeToString())

        assert parsed.checksummed_data.content == b"abc"
        assert parsed.checksummed_data.crc32c.value == 7
        assert parsed.metadata.metadata["k"] == "v"

    def test_stub_paths(self):
        """Test the stub uses fully qualified method paths."""

        class Channel:
            def __init__(self):
                self.paths = []

            def _record(self, path, **kwargs):
                self.paths.append(path)
                return path

            unary_unary = unary_stream = stream_unary = _record

        channel = Channel()
        stub = storage_pb2_grpc.StorageStub(channel)

        assert stub.InsertObject == "/blobstream.storage.v1.Storage/InsertObject"
        assert len(channel.paths) == 4
