"""
Transport layer: channels, authentication and stub composition.
"""

from blobstream.transport.auth import (
    AccessTokenStrategy,
    AuthenticationStrategy,
    AuthStub,
    InsecureStrategy,
    SslStrategy,
    create_auth_strategy,
)
from blobstream.transport.base import BaseStub, DefaultStorageStub
from blobstream.transport.channel import ChannelTuning, create_channel
from blobstream.transport.pool import create_storage_stub
from blobstream.transport.round_robin import RoundRobinStub

__all__ = [
    "AccessTokenStrategy",
    "AuthenticationStrategy",
    "AuthStub",
    "BaseStub",
    "ChannelTuning",
    "DefaultStorageStub",
    "InsecureStrategy",
    "RoundRobinStub",
    "SslStrategy",
    "create_auth_strategy",
    "create_channel",
    "create_storage_stub",
]
