"""
Incremental Record Reader
=========================

Reads CIF records one at a time from a byte source that delivers data in
arbitrary-sized pieces, without holding the whole file in memory.

Framing
-------
Every physical line is exactly 80 content bytes followed by ``\\n``:

    ┌──────┬───────────────────────────────┬────┐
    │ Tag  │ Fields + space padding        │ \\n │
    │ 2 B  │ 78 B                          │ 1 B│
    └──────┴───────────────────────────────┴────┘

The reader checks only this framing. Field content is decoded later, on
demand, by the record schemas.

Reader States
-------------
    NEED_REFILL ──refill──> HAVE_CANDIDATE ──framing ok──> EMIT ──> NEED_REFILL
         │                        │
         │ source empty           └──bad terminator──> FAILED (terminal)
         └──────────────────> EXHAUSTED (terminal)

A failing source (OSError, read on a closed file, no data from a
non-blocking source) also moves the reader to FAILED. A failed reader
re-raises the same error on every later call and never reads again.

Buffer Management
-----------------
Bytes live in a bytearray with a separate consumed-prefix index. Delivered
records only advance the index; the consumed prefix is cut off at the next
refill, just before the buffer is grown by one chunk and handed to the
source's readinto(). At most one chunk of unconsumed tail plus one partial
record is ever buffered.

Usage
-----
    >>> reader = Reader.from_file("timetable.cif")
    >>> for record in reader:
    ...     print(record.kind)

Stopping early is safe: iterating the same reader again resumes with the
next undelivered record.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from cif_reader.config import (
    LINE_LENGTH,
    RECORD_TERMINATOR,
    RECORD_WIDTH,
    ReaderConfig,
)
from cif_reader.errors import InvalidRecordError, ReaderError, SourceIOError
from cif_reader.reader.source import ByteSource, open_source
from cif_reader.records.dispatch import dispatch
from cif_reader.records.schemas import Record

logger = logging.getLogger(__name__)

_TERMINATOR_BYTE = RECORD_TERMINATOR[0]


class ReaderState(Enum):
    """Position of the reader in its read loop."""
    NEED_REFILL = "need_refill"
    HAVE_CANDIDATE = "have_candidate"
    EMIT = "emit"
    EXHAUSTED = "exhausted"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ReaderState.EXHAUSTED, ReaderState.FAILED)


class Reader:
    """
    Pull-based reader producing one dispatched record per call.

    Attributes:
        offset: Absolute number of input bytes delivered as records
        last_record_offset: Input offset where the most recently delivered
            record started (None before the first record)
        state: Current ReaderState

    Example:
        >>> with open("timetable.cif", "rb") as fp:
        ...     reader = Reader(fp)
        ...     while (record := reader.read_next()) is not None:
        ...         handle(record)
    """

    def __init__(
        self,
        source: Union[ByteSource, bytes, bytearray, memoryview],
        config: Optional[ReaderConfig] = None,
    ):
        self._source = open_source(source)
        self._config = config or ReaderConfig()
        self._buffer = bytearray()
        self._pos = 0
        self._error: Optional[ReaderError] = None
        self.offset = 0
        self.last_record_offset: Optional[int] = None
        self.state = ReaderState.NEED_REFILL

    @classmethod
    def from_bytes(cls, data: bytes, config: Optional[ReaderConfig] = None) -> "Reader":
        """Create a reader over an in-memory CIF image."""
        return cls(data, config)

    @classmethod
    def from_file(
        cls, filepath: Union[str, Path], config: Optional[ReaderConfig] = None
    ) -> "Reader":
        """
        Create a reader over a file on disk.

        The file stays open until the reader is closed (or used as a
        context manager).

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        return cls(open(Path(filepath), "rb"), config)

    @property
    def config(self) -> ReaderConfig:
        return self._config

    @property
    def unconsumed(self) -> int:
        """Bytes buffered but not yet delivered as a record."""
        return len(self._buffer) - self._pos

    # -------------------------------------------------------------------------
    # Read loop
    # -------------------------------------------------------------------------

    def read_next(self) -> Optional[Record]:
        """
        Return the next record, or None at a clean end of input.

        Raises:
            InvalidRecordError: If the next line is not 80 bytes plus a
                terminator. The reader stays failed; later calls raise
                the same error.
            SourceIOError: If the byte source fails. The reader stays
                failed; later calls raise the same error.
        """
        while True:
            if self.state is ReaderState.EXHAUSTED:
                return None
            if self.state is ReaderState.FAILED:
                raise self._error

            if self.unconsumed >= LINE_LENGTH:
                self.state = ReaderState.HAVE_CANDIDATE
                return self._emit()

            self.state = ReaderState.NEED_REFILL
            if not self._refill():
                self.state = ReaderState.EXHAUSTED
                if self.unconsumed:
                    logger.debug(
                        f"Source exhausted with {self.unconsumed} trailing bytes "
                        f"at offset {self.offset}"
                    )
                return None

    def _emit(self) -> Record:
        start = self._pos
        end = start + RECORD_WIDTH
        if self._buffer[end] != _TERMINATOR_BYTE:
            raise self._fail(
                InvalidRecordError(self.offset, bytes(self._buffer[start:end]))
            )

        self.state = ReaderState.EMIT
        span = bytes(self._buffer[start:end])
        self.last_record_offset = self.offset
        self.offset += LINE_LENGTH
        self._pos += LINE_LENGTH
        record = dispatch(span)
        self.state = ReaderState.NEED_REFILL
        return record

    def _fail(self, error: ReaderError) -> ReaderError:
        """Enter the terminal FAILED state, remembering ``error``."""
        self.state = ReaderState.FAILED
        self._error = error
        return error

    def _refill(self) -> bool:
        """
        Pull one chunk from the source.

        Returns:
            True if any bytes were read, False at end of input

        Raises:
            SourceIOError: If the source fails
        """
        # Drop the consumed prefix before growing
        if self._pos:
            del self._buffer[:self._pos]
            self._pos = 0

        prev_len = len(self._buffer)
        self._buffer.extend(bytes(self._config.chunk_size))
        nread = None
        try:
            # Both views must be released before the buffer can be resized
            with memoryview(self._buffer) as whole, whole[prev_len:] as region:
                nread = self._source.readinto(region)
        except (OSError, ValueError) as e:
            # ValueError: readinto() on a closed file
            raise self._fail(
                SourceIOError(f"read failed at offset {self.offset}: {e}")
            ) from e
        finally:
            # Only bytes the source actually wrote stay buffered
            del self._buffer[prev_len + (nread or 0):]

        if nread is None:
            raise self._fail(SourceIOError(
                f"source returned no data without reaching end of input "
                f"at offset {self.offset}"
            ))

        logger.debug(f"Read {nread} bytes")
        return nread > 0

    # -------------------------------------------------------------------------
    # Iteration and lifetime
    # -------------------------------------------------------------------------

    def __iter__(self) -> "Reader":
        return self

    def __next__(self) -> Record:
        record = self.read_next()
        if record is None:
            raise StopIteration
        return record

    def close(self) -> None:
        """Close the byte source if it can be closed."""
        close = getattr(self._source, "close", None)
        if close is not None:
            close()

    def __enter__(self) -> "Reader":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"Reader(offset={self.offset}, state={self.state.value}, "
            f"unconsumed={self.unconsumed})"
        )
