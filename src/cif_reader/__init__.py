"""
CIF Reader - Streaming Decoder for Railway Timetable CIF Files
==============================================================

This package reads the fixed-width Common Interface File (CIF) format used
to distribute railway timetables: a text file of 80-column records, one per
line, each starting with a two-character tag that selects its layout.

Main Components
---------------
- **records**: Field decoders, one lazily decoded schema per record kind,
  and the tag dispatcher

- **reader**: Incremental reader that pulls bytes from a file, socket or
  buffer in bounded chunks, plus the schedule aggregator

- **cli**: The ``cifdump`` command-line tool

Quick Start
-----------
Iterate the records of a file:
    >>> from cif_reader import Reader
    >>> with Reader.from_file("timetable.cif") as reader:
    ...     for record in reader:
    ...         print(record.kind.get_description())

Read fields on demand:
    >>> from cif_reader import BasicSchedule
    >>> if isinstance(record, BasicSchedule):
    ...     print(record.uid, record.start_date, record.days)

Fold schedules:
    >>> from cif_reader import iter_schedules
    >>> for schedule in iter_schedules(Reader.from_file("timetable.cif")):
    ...     print(schedule.uid, len(schedule.sequence))

Or use the command-line tool:
    $ cifdump stats timetable.cif
    $ cifdump schedules --uid W03751 timetable.cif

Version History
---------------
1.0.0 - Initial release with reader, record schemas and schedule aggregator
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from cif_reader.config import (
    ReaderConfig,
    RECORD_WIDTH,
    LINE_LENGTH,
    DEFAULT_CHUNK_SIZE,
)

from cif_reader.errors import (
    CIFError,
    ReaderError,
    SourceIOError,
    InvalidRecordError,
    FieldError,
    EncodingError,
    InvalidNumberError,
    InvalidDateError,
    InvalidTimeError,
    InvalidItemError,
    MandatoryFieldMissingError,
    ScheduleError,
)

from cif_reader.records import (
    RecordKind,
    TransactionType,
    StpIndicator,
    UpdateIndicator,
    Days,
    Header,
    TiplocInsert,
    TiplocAmend,
    Association,
    BasicSchedule,
    ScheduleExtra,
    LocationOrigin,
    LocationIntermediate,
    LocationTerminating,
    ChangeEnRoute,
    Trailer,
    Unrecognised,
    Record,
    dispatch,
    iter_fields,
)

from cif_reader.reader import (
    Reader,
    ReaderState,
    ChunkedSource,
    Lookahead,
    Schedule,
    read_schedule,
    group_records,
    iter_schedules,
)

__all__ = [
    "__version__",
    # Configuration
    "ReaderConfig",
    "RECORD_WIDTH",
    "LINE_LENGTH",
    "DEFAULT_CHUNK_SIZE",
    # Exception hierarchy
    "CIFError",
    "ReaderError",
    "SourceIOError",
    "InvalidRecordError",
    "FieldError",
    "EncodingError",
    "InvalidNumberError",
    "InvalidDateError",
    "InvalidTimeError",
    "InvalidItemError",
    "MandatoryFieldMissingError",
    "ScheduleError",
    # Records
    "RecordKind",
    "TransactionType",
    "StpIndicator",
    "UpdateIndicator",
    "Days",
    "Header",
    "TiplocInsert",
    "TiplocAmend",
    "Association",
    "BasicSchedule",
    "ScheduleExtra",
    "LocationOrigin",
    "LocationIntermediate",
    "LocationTerminating",
    "ChangeEnRoute",
    "Trailer",
    "Unrecognised",
    "Record",
    "dispatch",
    "iter_fields",
    # Reader
    "Reader",
    "ReaderState",
    "ChunkedSource",
    "Lookahead",
    "Schedule",
    "read_schedule",
    "group_records",
    "iter_schedules",
]
