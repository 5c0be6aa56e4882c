"""
Channel creation and transport tuning.

The tuning string is a comma-separated list of flags:

    dp, alts               direct-path routing (alts also uses ALTS credentials)
    pick-first-lb          grpclb with pick_first child policy
    enable-dns-srv-queries / disable-dns-srv-queries
    exclusive              give every channel its own connection

An empty string, "default" or "none" selects regular routing, where every
channel still gets a distinct channel id.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import grpc

from blobstream.logging import get_logger

if TYPE_CHECKING:
    from blobstream.config import StorageSettings
    from blobstream.transport.auth import AuthenticationStrategy

logger = get_logger(__name__)

DIRECT_PATH_SERVICE_CONFIG = json.dumps(
    {"loadBalancingConfig": [{"grpclb": {"childPolicy": [{"pick_first": {}}]}}]}
)


@dataclass(frozen=True)
class ChannelTuning:
    """Parsed transport tuning flags."""

    configured: bool = False
    direct_path: bool = False
    pick_first_lb: bool = False
    dns_srv_queries: bool | None = None
    exclusive: bool = False
    alts: bool = False

    @classmethod
    def parse(cls, config: str | None) -> ChannelTuning:
        """Parse a comma-separated tuning string."""
        config = (config or "").strip()
        if config in ("", "default", "none"):
            return cls()
        flags = {flag.strip() for flag in config.split(",") if flag.strip()}
        alts = "alts" in flags
        direct_path = "dp" in flags or alts
        dns_srv_queries: bool | None = None
        if direct_path or "enable-dns-srv-queries" in flags:
            dns_srv_queries = True
        if "disable-dns-srv-queries" in flags:
            dns_srv_queries = False
        return cls(
            configured=True,
            direct_path=direct_path,
            pick_first_lb=direct_path or "pick-first-lb" in flags,
            dns_srv_queries=dns_srv_queries,
            exclusive="exclusive" in flags,
            alts=alts,
        )

    def to_channel_options(self, channel_id: int) -> list[tuple[str, Any]]:
        """gRPC channel arguments for the channel with the given index."""
        if not self.configured:
            return [("grpc.channel_id", channel_id)]
        options: list[tuple[str, Any]] = []
        if self.pick_first_lb:
            options.append(("grpc.service_config", DIRECT_PATH_SERVICE_CONFIG))
        if self.dns_srv_queries is not None:
            options.append(("grpc.dns_enable_srv_queries", int(self.dns_srv_queries)))
        if self.exclusive:
            options.append(("grpc.channel_id", channel_id))
        return options


def create_channel(
    strategy: AuthenticationStrategy,
    settings: StorageSettings,
    channel_id: int,
    tuning: ChannelTuning | None = None,
) -> grpc.Channel:
    """
    Open one channel to the configured endpoint.

    Args:
        strategy: Authentication strategy that opens the channel.
        settings: Endpoint and message size limits.
        channel_id: Index of the channel within its pool.
        tuning: Parsed tuning flags (default: parsed from settings).

    Returns:
        New gRPC channel.
    """
    if tuning is None:
        tuning = ChannelTuning.parse(settings.grpc_plugin_config)
    options = tuning.to_channel_options(channel_id)
    options.extend(
        [
            ("grpc.max_send_message_length", settings.max_message_size),
            ("grpc.max_receive_message_length", settings.max_message_size),
        ]
    )
    logger.debug(f"Creating channel {channel_id} to {settings.endpoint}")
    if tuning.alts:
        return grpc.secure_channel(
            settings.endpoint, grpc.alts_channel_credentials(), options=options
        )
    return strategy.create_channel(settings.endpoint, options)
