"""
Stub interface for the storage service.

Every stub exposes a single invoke() capability. Decorators such as the
round-robin dispatcher and the authentication layer implement the same
interface and delegate to the stubs they wrap.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

import grpc

from blobstream.exceptions import UnimplementedError
from blobstream.proto import storage_pb2_grpc

STORAGE_METHODS = frozenset(
    {
        "InsertObject",
        "GetObjectMedia",
        "StartResumableWrite",
        "QueryWriteStatus",
    }
)


class BaseStub(ABC):
    """Abstract storage stub."""

    @abstractmethod
    def invoke(self, method: str, request: Any, **kwargs: Any) -> Any:
        """
        Invoke an RPC.

        Args:
            method: RPC method name, e.g. "QueryWriteStatus".
            request: Request message, or an iterator of messages for
                client-streaming methods.
            **kwargs: Forwarded to the gRPC multi-callable (metadata, timeout).

        Returns:
            Response message, or a response iterator for server-streaming
            methods.
        """

    def close(self) -> None:
        """Release channels held by this stub."""

    def __enter__(self) -> BaseStub:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


class DefaultStorageStub(BaseStub):
    """Stub bound to a single channel."""

    def __init__(self, channel: grpc.Channel, channel_id: int = 0) -> None:
        self._channel = channel
        self._channel_id = channel_id
        self._grpc_stub = storage_pb2_grpc.StorageStub(channel)

    @property
    def channel(self) -> grpc.Channel:
        return self._channel

    @property
    def channel_id(self) -> int:
        return self._channel_id

    def invoke(self, method: str, request: Any, **kwargs: Any) -> Any:
        if method not in STORAGE_METHODS:
            raise UnimplementedError(operation=method)
        return getattr(self._grpc_stub, method)(request, **kwargs)

    def close(self) -> None:
        self._channel.close()

    def __repr__(self) -> str:
        return f"DefaultStorageStub(channel_id={self._channel_id})"
