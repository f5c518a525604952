"""Core byte-stream helpers.

- ``copy``: drain one binary stream into another, counting bytes
- ``read_bytes``: drain a binary stream into memory
- ``using`` / ``quiet_closing``: scoped acquisition with best-effort close
"""
from __future__ import annotations

import io
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any, Callable, Iterator, Protocol, TypeVar, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_BUFFER_SIZE = 8192


class Closeable(Protocol):
    def close(self) -> Any: ...


C = TypeVar("C", bound=Closeable)
R = TypeVar("R")


def copy(source: IO[bytes], destination: IO[bytes], buffer_size: int = DEFAULT_BUFFER_SIZE) -> int:
    """Copy ``source`` into ``destination`` until end of stream.

    Each chunk is written as soon as it is read. Buffered readers are read
    with ``read1`` so data arriving on a pipe is forwarded without waiting
    for a full buffer.

    Args:
        source: Binary stream to read from
        destination: Binary stream to write to
        buffer_size: Maximum chunk size in bytes (default: 8 KiB)

    Returns:
        int: Number of bytes copied

    Raises:
        OSError: If reading or writing fails. Nothing is retried; bytes
            already written stay written.
    """
    read = getattr(source, "read1", None) or source.read
    copied = 0
    while True:
        chunk = read(buffer_size)
        if not chunk:
            break
        destination.write(chunk)
        copied += len(chunk)
    return copied


def read_bytes(source: IO[bytes]) -> bytes:
    """Read ``source`` to end of stream and return its content."""
    buffer = io.BytesIO()
    copy(source, buffer)
    return buffer.getvalue()


def _close_quietly(resource: Closeable) -> None:
    try:
        resource.close()
    except Exception as exc:
        # Best-effort release; never mask the caller's outcome.
        logger.debug("Ignoring error while closing %r: %s", resource, exc)


@contextmanager
def quiet_closing(resource: C) -> Iterator[C]:
    """Yield ``resource`` and close it on exit, ignoring close errors.

    Unlike :func:`contextlib.closing`, a failing ``close()`` never replaces
    the exception (or result) of the ``with`` body.
    """
    try:
        yield resource
    finally:
        _close_quietly(resource)


def using(resource: C, operation: Callable[[C], R]) -> R:
    """Run ``operation(resource)`` and close ``resource`` on every exit path.

    Examples:
        >>> using(open("data.bin", "rb"), read_bytes)
    """
    with quiet_closing(resource):
        return operation(resource)


__all__ = [
    "PathLike",
    "DEFAULT_BUFFER_SIZE",
    "Closeable",
    "copy",
    "read_bytes",
    "quiet_closing",
    "using",
]
