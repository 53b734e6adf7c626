"""Bounded response reading shared by the outbound HTTP clients."""

from __future__ import annotations

import time
from typing import Any, Callable, List

CHUNK_SIZE = 1024


class DeadlineExceeded(TimeoutError):
    """The response was still arriving when the attempt budget ran out."""


def deadline_after(timeout: float, clock: Callable[[], float] = time.monotonic) -> float:
    return clock() + timeout


def read_before(
    response: Any,
    deadline: float,
    *,
    clock: Callable[[], float] = time.monotonic,
    chunk_size: int = CHUNK_SIZE,
) -> bytes:
    """Read ``response`` to the end, closing it if ``deadline`` passes first.

    ``read1`` returns after at most one socket read, so a body trickled in
    byte by byte is cut off once the deadline passes. Each individual read
    is still bounded by the socket timeout given to ``urlopen``.
    """
    chunks: List[bytes] = []
    while True:
        if clock() >= deadline:
            response.close()
            raise DeadlineExceeded("response exceeded the attempt timeout")
        chunk = response.read1(chunk_size)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


__all__ = ["CHUNK_SIZE", "DeadlineExceeded", "deadline_after", "read_before"]
