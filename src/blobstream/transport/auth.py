"""
Authentication strategies and the per-call authentication decorator.

A strategy knows how to open a channel to the endpoint. Strategies that
need to attach credentials to every call (bearer tokens) report
requires_call_metadata, and the stub pool then wraps its dispatcher in an
AuthStub.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

import grpc

from blobstream.exceptions import InvalidArgumentError
from blobstream.transport.base import BaseStub

if TYPE_CHECKING:
    from blobstream.config import StorageSettings

Metadata = Sequence[tuple[str, str]]


class AuthenticationStrategy(ABC):
    """Opens channels and decorates per-call metadata."""

    requires_call_metadata: bool = False

    @abstractmethod
    def create_channel(self, endpoint: str, options: list[tuple[str, Any]]) -> grpc.Channel:
        """Open a channel to endpoint with the given channel arguments."""

    def configure_metadata(self, metadata: Metadata | None) -> list[tuple[str, str]]:
        """Return call metadata with credentials attached."""
        return list(metadata or [])


class InsecureStrategy(AuthenticationStrategy):
    """Plaintext channels, for emulators and local testing."""

    def create_channel(self, endpoint: str, options: list[tuple[str, Any]]) -> grpc.Channel:
        return grpc.insecure_channel(endpoint, options=options)


class SslStrategy(AuthenticationStrategy):
    """TLS channels without per-call credentials."""

    def __init__(self, root_certificates: bytes | None = None) -> None:
        self._root_certificates = root_certificates

    def create_channel(self, endpoint: str, options: list[tuple[str, Any]]) -> grpc.Channel:
        credentials = grpc.ssl_channel_credentials(root_certificates=self._root_certificates)
        return grpc.secure_channel(endpoint, credentials, options=options)


class AccessTokenStrategy(SslStrategy):
    """TLS channels plus a bearer token attached to every call."""

    requires_call_metadata = True

    def __init__(self, access_token: str, root_certificates: bytes | None = None) -> None:
        if not access_token:
            raise InvalidArgumentError("access token must not be empty")
        super().__init__(root_certificates)
        self._access_token = access_token

    def configure_metadata(self, metadata: Metadata | None) -> list[tuple[str, str]]:
        result = [(k, v) for k, v in (metadata or []) if k != "authorization"]
        result.append(("authorization", f"Bearer {self._access_token}"))
        return result


def create_auth_strategy(settings: StorageSettings) -> AuthenticationStrategy:
    """Select the authentication strategy named by settings.auth_strategy."""
    if settings.auth_strategy == "insecure":
        return InsecureStrategy()
    if settings.auth_strategy == "access_token":
        return AccessTokenStrategy(settings.access_token or "")
    return SslStrategy()


class AuthStub(BaseStub):
    """Attaches per-call credentials before delegating to the wrapped stub."""

    def __init__(self, strategy: AuthenticationStrategy, child: BaseStub) -> None:
        self._strategy = strategy
        self._child = child

    @property
    def child(self) -> BaseStub:
        return self._child

    def invoke(self, method: str, request: Any, **kwargs: Any) -> Any:
        kwargs["metadata"] = self._strategy.configure_metadata(kwargs.get("metadata"))
        return self._child.invoke(method, request, **kwargs)

    def close(self) -> None:
        self._child.close()
