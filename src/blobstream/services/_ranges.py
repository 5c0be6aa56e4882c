"""
Read range resolution.

Combines the three range options of a read request into the single
(offset, limit) pair sent on the wire. No I/O happens here.
"""

from __future__ import annotations

from typing import NamedTuple

from blobstream.exceptions import InvalidArgumentError, OutOfRangeError
from blobstream.models.requests import ReadRange


class ReadSelector(NamedTuple):
    """
    Wire range for a streaming read.

    limit == 0 reads to the end of the object; a negative offset counts
    from the end.
    """

    offset: int = 0
    limit: int = 0


def resolve_read_range(
    read_range: ReadRange | None = None,
    read_last: int | None = None,
    read_from_offset: int | None = None,
) -> ReadSelector:
    """
    Resolve range options into a ReadSelector.

    Args:
        read_range: Absolute [begin, end) range
        read_last: Read only the last N bytes
        read_from_offset: Start reading at this offset

    Returns:
        Resolved (offset, limit)

    Raises:
        OutOfRangeError: read_last is 0. The service treats 0 as "not set"
            and would return the whole object.
        InvalidArgumentError: read_range ends before it begins.
    """
    offset = 0
    limit = 0

    if read_last is not None:
        if read_last == 0:
            raise OutOfRangeError(
                "read_last=0 is invalid: it would return the full object instead of no bytes"
            )
        offset = -read_last

    if read_range is not None:
        if read_range.end < read_range.begin:
            raise InvalidArgumentError(
                f"Invalid read range [{read_range.begin}, {read_range.end})"
            )
        offset = read_range.begin
        limit = read_range.end - read_range.begin

    if read_from_offset is not None and read_from_offset > offset:
        if limit > 0:
            limit -= read_from_offset - offset
            if limit <= 0:
                raise OutOfRangeError(
                    f"read_from_offset={read_from_offset} is past the end of the read range"
                )
        offset = read_from_offset

    return ReadSelector(offset=offset, limit=limit)
