"""Round-robin dispatch across a fixed set of stubs."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Any

from blobstream.exceptions import InvalidArgumentError
from blobstream.transport.base import BaseStub


class RoundRobinStub(BaseStub):
    """
    Sends each call to the next child stub in cyclic order.

    The call counter is shared by all callers and guarded by a lock, so
    concurrent callers never observe a lost or duplicated increment.
    """

    def __init__(self, children: Sequence[BaseStub]) -> None:
        if not children:
            raise InvalidArgumentError("RoundRobinStub requires at least one child stub")
        self._children = tuple(children)
        self._counter = 0
        self._lock = threading.Lock()

    @property
    def children(self) -> tuple[BaseStub, ...]:
        return self._children

    def next_index(self) -> int:
        """Claim the index used by the next call."""
        with self._lock:
            index = self._counter % len(self._children)
            self._counter += 1
        return index

    def invoke(self, method: str, request: Any, **kwargs: Any) -> Any:
        return self._children[self.next_index()].invoke(method, request, **kwargs)

    def close(self) -> None:
        for child in self._children:
            child.close()

    def __repr__(self) -> str:
        return f"RoundRobinStub(channels={len(self._children)})"
