"""
Stub pool construction.

Builds one channel per index, composes the per-channel stubs behind a
round-robin dispatcher and adds the authentication decorator when the
strategy needs per-call credentials.
"""

from __future__ import annotations

from blobstream.config import StorageSettings, get_settings
from blobstream.logging import get_logger
from blobstream.transport.auth import AuthenticationStrategy, AuthStub, create_auth_strategy
from blobstream.transport.base import BaseStub, DefaultStorageStub
from blobstream.transport.channel import ChannelTuning, create_channel
from blobstream.transport.round_robin import RoundRobinStub

logger = get_logger(__name__)


def create_storage_stub(
    settings: StorageSettings | None = None,
    strategy: AuthenticationStrategy | None = None,
) -> BaseStub:
    """
    Create the stub used by a storage client.

    Args:
        settings: Endpoint, channel count and tuning (default: global settings).
        strategy: Authentication strategy (default: selected from settings).

    Returns:
        Round-robin stub, wrapped in AuthStub when required.
    """
    settings = settings or get_settings()
    strategy = strategy or create_auth_strategy(settings)
    tuning = ChannelTuning.parse(settings.grpc_plugin_config)

    # Unvalidated configuration may ask for zero channels.
    count = max(1, settings.num_channels)
    children: list[DefaultStorageStub] = []
    try:
        for channel_id in range(count):
            channel = create_channel(strategy, settings, channel_id, tuning)
            children.append(DefaultStorageStub(channel, channel_id))
    except Exception:
        logger.warning(f"Channel creation failed, closing {len(children)} open channels")
        for child in children:
            child.close()
        raise
    logger.info(f"Created {count} channels to {settings.endpoint}")

    stub: BaseStub = RoundRobinStub(children)
    if strategy.requires_call_metadata:
        stub = AuthStub(strategy, stub)
    return stub
