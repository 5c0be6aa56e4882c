"""
Checksum computation and encoding.

The service carries crc32c as a raw 32-bit integer inside streaming messages
but callers see it as base64 of the big-endian 4 bytes. MD5 travels as hex
on the wire and is displayed as base64.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import struct

import google_crc32c

from blobstream.exceptions import InvalidArgumentError


def compute_crc32c(data: bytes) -> int:
    """Compute crc32c of a payload."""
    return google_crc32c.value(bytes(data))


def extend_crc32c(crc: int, data: bytes) -> int:
    """Extend a running crc32c with more data."""
    return google_crc32c.extend(crc, bytes(data))


def encode_crc32c(value: int) -> str:
    """Encode a crc32c value as base64 of its big-endian bytes."""
    return base64.b64encode(struct.pack(">I", value & 0xFFFFFFFF)).decode("ascii")


def _b64decode(text: str, what: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidArgumentError(f"Invalid base64 {what}: {text!r}", cause=e) from e


def decode_crc32c(text: str) -> int:
    """
    Decode a base64 crc32c value into an integer.

    Raises:
        InvalidArgumentError: text is not base64 or does not hold 4 bytes.
    """
    raw = _b64decode(text, "crc32c checksum")
    if len(raw) != 4:
        raise InvalidArgumentError(
            f"Invalid crc32c checksum {text!r}: expected 4 bytes, got {len(raw)}"
        )
    return struct.unpack(">I", raw)[0]


def compute_md5_hex(data: bytes) -> str:
    """MD5 of a payload in the hex form used on the wire."""
    return hashlib.md5(data).hexdigest()


def md5_hex_to_base64(value: str) -> str:
    """Convert a wire (hex) MD5 into display (base64) form."""
    if not value:
        return ""
    try:
        raw = bytes.fromhex(value)
    except ValueError as e:
        raise InvalidArgumentError(f"Invalid hex MD5 hash: {value!r}", cause=e) from e
    return base64.b64encode(raw).decode("ascii")


def md5_base64_to_hex(value: str) -> str:
    """
    Convert a display (base64) MD5 into wire (hex) form.

    Raises:
        InvalidArgumentError: value is not valid base64.
    """
    if not value:
        return ""
    return _b64decode(value, "MD5 hash").hex()


class ObjectHasher:
    """Running crc32c and MD5 over streamed blocks."""

    def __init__(self) -> None:
        self._crc32c = 0
        self._md5 = hashlib.md5()
        self.size = 0

    def update(self, data: bytes) -> None:
        self._crc32c = extend_crc32c(self._crc32c, data)
        self._md5.update(data)
        self.size += len(data)

    @property
    def crc32c(self) -> int:
        return self._crc32c

    @property
    def md5_hex(self) -> str:
        return self._md5.hexdigest()


__all__ = [
    "compute_crc32c",
    "extend_crc32c",
    "encode_crc32c",
    "decode_crc32c",
    "compute_md5_hex",
    "md5_hex_to_base64",
    "md5_base64_to_hex",
    "ObjectHasher",
]
