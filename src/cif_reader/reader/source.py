"""
Byte Sources
============

The incremental reader needs exactly one operation from whatever supplies
its bytes: ``readinto(buffer) -> int``, filling as much of ``buffer`` as is
available and returning the count, with 0 meaning end of input. This is the
method binary file objects already have, so all of these work directly:

- ``open(path, "rb")`` and ``io.BufferedReader`` objects
- ``io.BytesIO``
- ``sock.makefile("rb")`` for sockets
- ``mmap.mmap`` wrapped in ``io.BytesIO`` or read through a file

ChunkedSource adapts an iterable of byte chunks (for example an HTTP
response streamed with ``iter_content()``), and open_source() turns
bytes-like objects into a source.
"""

import io
from typing import Iterable, Iterator, Optional, Protocol, Union, runtime_checkable


@runtime_checkable
class ByteSource(Protocol):
    """Anything the reader can pull bytes from."""

    def readinto(self, buffer: memoryview) -> Optional[int]:
        """
        Read up to ``len(buffer)`` bytes into ``buffer``.

        Returns:
            Bytes read; 0 at end of input. None means "no data right now"
            from a non-blocking source, which the reader treats as an error.

        Raises:
            OSError: If the underlying device fails
        """
        ...


class ChunkedSource:
    """
    Byte source fed from an iterable of chunks.

    Each readinto() call copies from the current chunk only, so a chunk
    boundary is also a read boundary. Empty chunks are skipped; they do not
    signal end of input.

    Example:
        >>> source = ChunkedSource([b"HD...", b"...\\n"])
        >>> reader = Reader(source)
    """

    def __init__(self, chunks: Iterable[bytes]):
        self._chunks: Iterator[bytes] = iter(chunks)
        self._current = memoryview(b"")
        self._done = False

    def readinto(self, buffer: memoryview) -> int:
        while not self._current and not self._done:
            try:
                self._current = memoryview(bytes(next(self._chunks)))
            except StopIteration:
                self._done = True

        count = min(len(buffer), len(self._current))
        buffer[:count] = self._current[:count]
        self._current = self._current[count:]
        return count


def open_source(obj: Union[ByteSource, bytes, bytearray, memoryview]) -> ByteSource:
    """
    Adapt an object to a ByteSource.

    Bytes-like objects are wrapped in io.BytesIO; anything with a
    readinto() method is returned unchanged.

    Raises:
        TypeError: If the object is neither
    """
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(obj))
    if isinstance(obj, ByteSource):
        return obj
    raise TypeError(
        f"expected a bytes-like object or an object with readinto(), "
        f"got {type(obj).__name__}"
    )
