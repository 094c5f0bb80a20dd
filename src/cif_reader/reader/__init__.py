"""
Streaming Reader
================

- **Reader**: incremental, framing-checked record reader over any byte
  source with ``readinto()``
- **ChunkedSource / open_source**: byte-source adapters
- **Lookahead, read_schedule, group_records, iter_schedules**: fold
  BS/BX/LO/LI/CR/LT runs into Schedule values
"""

from cif_reader.reader.source import (
    ByteSource,
    ChunkedSource,
    open_source,
)

from cif_reader.reader.incremental import (
    Reader,
    ReaderState,
)

from cif_reader.reader.schedule import (
    Lookahead,
    Schedule,
    RouteEntry,
    read_schedule,
    group_records,
    iter_schedules,
)

__all__ = [
    "ByteSource",
    "ChunkedSource",
    "open_source",
    "Reader",
    "ReaderState",
    "Lookahead",
    "Schedule",
    "RouteEntry",
    "read_schedule",
    "group_records",
    "iter_schedules",
]
