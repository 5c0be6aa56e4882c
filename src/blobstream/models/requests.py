"""
Request models for object transfers.

Requests are immutable once built. Optional fields left as None are not sent.
"""

from __future__ import annotations

import base64
import hashlib

from pydantic import BaseModel, ConfigDict, Field, model_validator

from blobstream.models.objects import ObjectMetadata, PredefinedAcl, Projection


class EncryptionKey(BaseModel):
    """Customer-supplied encryption key (base64 key and base64 SHA256)."""

    model_config = ConfigDict(frozen=True)

    algorithm: str = "AES256"
    key: str
    sha256: str

    @classmethod
    def from_binary_key(cls, key: bytes) -> EncryptionKey:
        """Build the key descriptor from raw key bytes."""
        return cls(
            key=base64.b64encode(key).decode("ascii"),
            sha256=base64.b64encode(hashlib.sha256(key).digest()).decode("ascii"),
        )


class ReadRange(BaseModel):
    """Half-open byte range [begin, end)."""

    model_config = ConfigDict(frozen=True)

    begin: int = Field(ge=0)
    end: int = Field(ge=0)


class _RequestBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    bucket_name: str
    object_name: str

    # Common request parameters
    user_project: str | None = None
    quota_user: str | None = None
    user_ip: str | None = None
    encryption_key: EncryptionKey | None = None

    # Preconditions
    if_generation_match: int | None = None
    if_generation_not_match: int | None = None
    if_metageneration_match: int | None = None
    if_metageneration_not_match: int | None = None


class _WriteRequestBase(_RequestBase):
    content_type: str | None = None
    content_encoding: str | None = None
    kms_key_name: str | None = None
    object_metadata: ObjectMetadata | None = None
    predefined_acl: PredefinedAcl | None = None
    projection: Projection | None = None


class InsertObjectRequest(_WriteRequestBase):
    """
    Single-shot upload of an in-memory payload.

    Whole-object checksums: an explicit value (base64) wins, a disable
    flag skips the checksum, otherwise it is computed from contents.
    """

    contents: bytes = b""
    crc32c_value: str | None = None
    disable_crc32c: bool = False
    md5_hash_value: str | None = None
    disable_md5: bool = False

    @model_validator(mode="after")
    def _check_checksum_options(self) -> InsertObjectRequest:
        if self.crc32c_value is not None and self.disable_crc32c:
            raise ValueError("crc32c_value and disable_crc32c are mutually exclusive")
        if self.md5_hash_value is not None and self.disable_md5:
            raise ValueError("md5_hash_value and disable_md5 are mutually exclusive")
        return self


class ResumableUploadRequest(_WriteRequestBase):
    """
    Start (or restore) a resumable upload session.

    A non-empty upload_session_id restores that session instead of
    starting a new one.
    """

    upload_session_id: str | None = None


class ReadObjectRequest(_RequestBase):
    """
    Streaming read of an object.

    read_range, read_last and read_from_offset may be combined; see
    blobstream.services._ranges for how they are resolved.
    """

    generation: int | None = None
    read_range: ReadRange | None = None
    read_last: int | None = Field(default=None, ge=0)
    read_from_offset: int | None = Field(default=None, ge=0)
