"""
Pytest configuration and fixtures for blobstream tests.
"""

from __future__ import annotations

from typing import Any

import grpc
import pytest

from blobstream.config import EMULATOR_ENDPOINT_ENV, StorageSettings, reset_settings
from blobstream.transport.base import BaseStub


class MockRpcError(grpc.RpcError):
    """Mock RpcError that can be properly caught."""

    def __init__(self, code, details=""):
        self._code = code
        self._details = details

    def code(self):
        return self._code

    def details(self):
        return self._details


class RecordingStub(BaseStub):
    """
    Stub that records calls and replays canned responses.

    responses maps a method name to either a single response, a list of
    responses consumed in order, or a callable receiving the request.
    Exceptions in place of responses are raised. Request iterators for
    InsertObject are drained into lists before recording.
    """

    def __init__(self, responses: dict[str, Any] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, Any, dict[str, Any]]] = []
        self.closed = False

    def invoke(self, method: str, request: Any, **kwargs: Any) -> Any:
        if method == "InsertObject":
            request = list(request)
        self.calls.append((method, request, kwargs))
        handler = self.responses.get(method)
        if isinstance(handler, list):
            handler = handler.pop(0)
        if isinstance(handler, BaseException):
            raise handler
        if callable(handler) and not hasattr(handler, "SerializeToString"):
            return handler(request)
        return handler

    def calls_to(self, method: str) -> list[tuple[Any, dict[str, Any]]]:
        return [(request, kwargs) for name, request, kwargs in self.calls if name == method]

    def close(self) -> None:
        self.closed = True


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Reset settings and emulator override around every test."""
    monkeypatch.delenv(EMULATOR_ENDPOINT_ENV, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings() -> StorageSettings:
    """Provide settings pointing at a local insecure endpoint."""
    return StorageSettings(
        endpoint="localhost:8443",
        num_channels=2,
        auth_strategy="insecure",
    )


@pytest.fixture
def stub() -> RecordingStub:
    """Provide an empty recording stub."""
    return RecordingStub()
