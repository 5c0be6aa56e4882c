"""
Base service class for blobstream.
"""

from __future__ import annotations

from typing import Any

import grpc

from blobstream._version import __version__
from blobstream.config import StorageSettings, get_settings
from blobstream.exceptions import from_rpc_error
from blobstream.transport.base import BaseStub

API_CLIENT_HEADER = "x-goog-api-client"


class BaseService:
    """
    Base class for transfer services.

    Holds the shared stub and settings, attaches client metadata to every
    call and translates gRPC errors into StorageError subclasses.
    """

    def __init__(self, stub: BaseStub, settings: StorageSettings | None = None) -> None:
        self._stub = stub
        self._settings = settings or get_settings()

    @property
    def stub(self) -> BaseStub:
        """Get the stub this service calls through."""
        return self._stub

    @property
    def settings(self) -> StorageSettings:
        return self._settings

    @property
    def _metadata(self) -> list[tuple[str, str]]:
        return [(API_CLIENT_HEADER, f"gl-python/blobstream-{__version__}")]

    @property
    def _timeout(self) -> float:
        return self._settings.request_timeout

    def _call_sync(
        self,
        method: str,
        request: Any,
        timeout: float | None = None,
    ) -> Any:
        """
        Make a unary (or client-streaming) call.

        Args:
            method: RPC method name
            request: Request message or request iterator
            timeout: Optional timeout override; 0 disables the deadline

        Returns:
            Response message
        """
        if timeout is None:
            timeout = self._timeout
        try:
            return self._stub.invoke(
                method,
                request,
                metadata=self._metadata,
                timeout=timeout or None,
            )
        except grpc.RpcError as e:
            raise self._handle_error(e) from e

    def _handle_error(self, error: Exception) -> Exception:
        """Convert gRPC errors to StorageError; leave others untouched."""
        if isinstance(error, grpc.RpcError):
            return from_rpc_error(error)
        return error
