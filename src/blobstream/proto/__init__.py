"""Wire protocol for the storage service."""

from blobstream.proto import storage_pb2, storage_pb2_grpc

__all__ = ["storage_pb2", "storage_pb2_grpc"]
