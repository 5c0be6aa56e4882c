"""Client-side gRPC bindings for the blobstream.storage.v1.Storage service."""

from __future__ import annotations

import grpc

from blobstream.proto import storage_pb2 as storage__pb2


def _path(method: str) -> str:
    return f"/{storage__pb2.SERVICE_NAME}/{method}"


class StorageStub:
    """Raw stub for one channel."""

    def __init__(self, channel: grpc.Channel) -> None:
        self.InsertObject = channel.stream_unary(
            _path("InsertObject"),
            request_serializer=storage__pb2.InsertObjectRequest.SerializeToString,
            response_deserializer=storage__pb2.Object.FromString,
        )
        self.GetObjectMedia = channel.unary_stream(
            _path("GetObjectMedia"),
            request_serializer=storage__pb2.GetObjectMediaRequest.SerializeToString,
            response_deserializer=storage__pb2.GetObjectMediaResponse.FromString,
        )
        self.StartResumableWrite = channel.unary_unary(
            _path("StartResumableWrite"),
            request_serializer=storage__pb2.StartResumableWriteRequest.SerializeToString,
            response_deserializer=storage__pb2.StartResumableWriteResponse.FromString,
        )
        self.QueryWriteStatus = channel.unary_unary(
            _path("QueryWriteStatus"),
            request_serializer=storage__pb2.QueryWriteStatusRequest.SerializeToString,
            response_deserializer=storage__pb2.QueryWriteStatusResponse.FromString,
        )
