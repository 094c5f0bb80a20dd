"""
CIF Reader Error Hierarchy
==========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from CIFError, allowing callers to catch every
reader-related error with a single except clause if desired.

Exception Hierarchy
-------------------
CIFError (base)
├── ReaderError (stream-level, fatal for the reader instance)
│   ├── SourceIOError - the byte source failed
│   └── InvalidRecordError - physical framing violated
├── FieldError (field-level, raised lazily by one accessor)
│   ├── EncodingError - bytes are not valid text
│   ├── InvalidNumberError - a numeric sub-field is not all digits
│   ├── InvalidDateError - digits do not form a calendar date
│   ├── InvalidTimeError - digits do not form a time of day
│   ├── InvalidItemError - enumerated field holds an unknown code
│   └── MandatoryFieldMissingError - mandatory field is blank
└── ScheduleError - schedule aggregation used at the wrong position

Error Context
-------------
Stream errors carry the absolute byte offset of the record that failed.
Field errors carry the raw bytes of the field (never more than
MAX_SNIPPET_LENGTH of them are shown in messages) plus the record type
and field name once the record accessor has annotated them:

    BasicSchedule.start_date: invalid date b'150431'
"""

from typing import Optional


# Longest run of raw bytes ever echoed back in an error message
MAX_SNIPPET_LENGTH = 32


def format_snippet(raw: bytes, limit: int = MAX_SNIPPET_LENGTH) -> str:
    """
    Render raw bytes for an error message, truncated to ``limit`` bytes.

    Example:
        >>> format_snippet(b"BSN")
        "b'BSN'"
        >>> format_snippet(b"x" * 40, limit=4)
        "b'xxxx'..."
    """
    if len(raw) <= limit:
        return repr(bytes(raw))
    return f"{bytes(raw[:limit])!r}..."


# =============================================================================
# Base Exception Class
# =============================================================================

class CIFError(Exception):
    """
    Base exception for all CIF reader errors.

        try:
            for record in Reader.from_file("timetable.cif"):
                handle(record)
        except CIFError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Stream Errors
# =============================================================================

class ReaderError(CIFError):
    """Base exception for errors that stop an incremental reader."""
    pass


class SourceIOError(ReaderError):
    """
    The underlying byte source failed.

    The original OSError (when there is one) is chained as __cause__.
    Reads are never retried internally.
    """
    pass


class InvalidRecordError(ReaderError):
    """
    Physical framing violated.

    Raised when the byte following the 80 content bytes of a line is not
    the line terminator. ``offset`` is the absolute position in the input
    where the malformed record starts.

    Attributes:
        offset: Absolute byte offset of the start of the bad record
        snippet: Leading bytes of the bad record (bounded)
    """

    def __init__(self, offset: int, snippet: bytes = b""):
        self.offset = offset
        self.snippet = bytes(snippet[:MAX_SNIPPET_LENGTH])
        message = f"invalid record framing at byte offset {offset}"
        if snippet:
            message += f": {format_snippet(snippet)}"
        super().__init__(message)


# =============================================================================
# Field Errors
# =============================================================================

class FieldError(CIFError):
    """
    Base exception for field decode failures.

    Field errors are raised only by the accessor that reads the broken
    field; the record and its other fields stay usable.

    Attributes:
        raw: The bytes of the field that failed to decode
        record: Name of the record type (set by the record accessor)
        field: Name of the field (set by the record accessor)
    """

    description = "invalid field"

    def __init__(self, raw: bytes, detail: Optional[str] = None):
        self.raw = bytes(raw)
        self.detail = detail
        self.record: Optional[str] = None
        self.field: Optional[str] = None
        super().__init__(raw)

    def annotate(self, record: str, field: str) -> "FieldError":
        """Attach the record type and field name for error messages."""
        self.record = record
        self.field = field
        return self

    def __str__(self) -> str:
        parts = []
        if self.record and self.field:
            parts.append(f"{self.record}.{self.field}: ")
        elif self.field:
            parts.append(f"{self.field}: ")
        parts.append(f"{self.description} {format_snippet(self.raw)}")
        if self.detail:
            parts.append(f" ({self.detail})")
        return "".join(parts)


class EncodingError(FieldError):
    """Field bytes are not valid ASCII text."""
    description = "undecodable text"


class InvalidNumberError(FieldError):
    """A numeric sub-field contains something other than ASCII digits."""
    description = "invalid number"


class InvalidDateError(FieldError):
    """
    Digits are numeric but do not form a calendar date.

    Example: b"150431" read as YYMMDD is 31 April 2015.
    """
    description = "invalid date"


class InvalidTimeError(FieldError):
    """
    Digits are numeric but do not form a time of day, or the half-minute
    flag of a 5-character time is neither space nor 'H'.
    """
    description = "invalid time"


class InvalidItemError(FieldError):
    """An enumerated field holds a code outside its known alphabet."""
    description = "invalid item"


class MandatoryFieldMissingError(FieldError):
    """A field the schema declares mandatory is blank."""
    description = "mandatory field missing"


# =============================================================================
# Aggregation Errors
# =============================================================================

class ScheduleError(CIFError):
    """
    Schedule aggregation started somewhere other than a BasicSchedule.

    The aggregator does not resynchronise; finding the start of a
    schedule is the caller's job.
    """
    pass
