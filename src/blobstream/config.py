"""
SDK settings for blobstream.

Values come from keyword arguments, then BLOBSTREAM_* environment variables,
then defaults. CLOUD_STORAGE_GRPC_ENDPOINT points the client at an emulator:
it replaces the endpoint and switches to insecure credentials.
"""

from __future__ import annotations

import os
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

EMULATOR_ENDPOINT_ENV = "CLOUD_STORAGE_GRPC_ENDPOINT"

DEFAULT_ENDPOINT = "storage.googleapis.com:443"

# Protocol limit for a single InsertObject message payload
MAX_WRITE_CHUNK_BYTES = 2 * 1024 * 1024  # 2MB

MINIMUM_CHANNELS = 4


def default_channel_count() -> int:
    """At least MINIMUM_CHANNELS, more on machines with many cores."""
    return max(MINIMUM_CHANNELS, os.cpu_count() or 1)


class StorageSettings(BaseSettings):
    """Transfer engine configuration."""

    model_config = SettingsConfigDict(
        env_prefix="BLOBSTREAM_",
        extra="ignore",
    )

    # Connection
    endpoint: str = DEFAULT_ENDPOINT
    num_channels: int = Field(default_factory=default_channel_count, ge=0, le=256)
    auth_strategy: Literal["insecure", "ssl", "access_token"] = "ssl"
    access_token: str | None = None
    grpc_plugin_config: str = ""

    # Timeouts (seconds)
    request_timeout: float = Field(default=30.0, ge=1.0, le=300.0)
    download_stall_timeout: float = Field(default=0.0, ge=0.0)

    # Transfer
    upload_chunk_size: int = Field(default=MAX_WRITE_CHUNK_BYTES, ge=1, le=MAX_WRITE_CHUNK_BYTES)
    max_message_size: int = Field(default=32 * 1024 * 1024, ge=1024 * 1024)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False

    @model_validator(mode="after")
    def _apply_emulator_override(self) -> StorageSettings:
        emulator = os.environ.get(EMULATOR_ENDPOINT_ENV)
        if emulator:
            self.endpoint = emulator
            self.auth_strategy = "insecure"
        if self.auth_strategy == "access_token" and not self.access_token:
            raise ValueError("access_token is required for the access_token auth strategy")
        return self


_settings: StorageSettings | None = None


def get_settings() -> StorageSettings:
    """Return the process-wide settings, creating them on first use."""
    global _settings
    if _settings is None:
        _settings = StorageSettings()
    return _settings


def configure_settings(**overrides: object) -> StorageSettings:
    """Replace the process-wide settings with explicitly configured ones."""
    global _settings
    _settings = StorageSettings(**overrides)  # type: ignore[arg-type]
    return _settings


def reset_settings() -> None:
    """Drop cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None


__all__ = [
    "StorageSettings",
    "get_settings",
    "configure_settings",
    "reset_settings",
    "default_channel_count",
    "DEFAULT_ENDPOINT",
    "EMULATOR_ENDPOINT_ENV",
    "MAX_WRITE_CHUNK_BYTES",
]
