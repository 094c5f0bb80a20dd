"""
Fixed-Width Field Decoders
==========================

Pure functions that turn a byte slice of a known width into a typed
value. Record schemas pair each of these with a fixed byte range; the
decoders themselves never slice or adjust bounds.

Empty and Error Semantics
-------------------------
- Blank (all-space) slices decode to None in the ``optional_*`` variants.
- ``mandatory()`` turns a None result into MandatoryFieldMissingError.
- Non-digit numeric content raises InvalidNumberError.
- Well-formed digits that are not a real date or time raise
  InvalidDateError / InvalidTimeError.
- Unknown enumeration codes raise InvalidItemError.

Date Conventions
----------------
Both conventions use two-digit years that always mean 2000+YY:

    >>> date_ymd(b"151019")
    datetime.date(2015, 10, 19)
    >>> date_dmy(b"151019")
    datetime.date(2019, 10, 15)

Which convention applies is fixed per field by the record layout.
"""

from datetime import date, time
from enum import Enum
from typing import Callable, Optional, TypeVar

from cif_reader.errors import (
    EncodingError,
    InvalidDateError,
    InvalidItemError,
    InvalidNumberError,
    InvalidTimeError,
    MandatoryFieldMissingError,
)
from cif_reader.records.types import Days

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

Decoder = Callable[[bytes], T]

# All CIF text is 7-bit ASCII
TEXT_ENCODING = "ascii"

YEAR_BASE = 2000


def _is_blank(raw: bytes) -> bool:
    return raw.strip(b" ") == b""


def _number(raw: bytes, start: int, width: int = 2) -> int:
    """Parse a zero-padded unsigned decimal sub-field."""
    digits = raw[start:start + width]
    if len(digits) != width or not digits.isdigit():
        raise InvalidNumberError(raw)
    return int(digits)


# =============================================================================
# Strings
# =============================================================================

def trimmed_string(raw: bytes) -> str:
    """
    Decode a text field, removing trailing spaces only.

    Leading spaces are significant in some fields and are kept.

    Raises:
        EncodingError: If the bytes are not ASCII
    """
    try:
        text = raw.decode(TEXT_ENCODING)
    except UnicodeDecodeError as e:
        raise EncodingError(raw, str(e.reason)) from e
    return text.rstrip(" ")


def optional_string(raw: bytes) -> Optional[str]:
    """Like trimmed_string(), but a blank field is None."""
    return trimmed_string(raw) or None


def mandatory(decoder: Callable[[bytes], Optional[T]]) -> Callable[[bytes], T]:
    """
    Wrap an optional decoder so that an absent value is an error.

    Example:
        >>> uid = mandatory(optional_string)
        >>> uid(b"W03751")
        'W03751'
        >>> uid(b"      ")
        Traceback (most recent call last):
        ...
        cif_reader.errors.MandatoryFieldMissingError: mandatory field missing b'      '
    """
    def decode(raw: bytes) -> T:
        value = decoder(raw)
        if value is None:
            raise MandatoryFieldMissingError(raw)
        return value

    return decode


# =============================================================================
# Dates
# =============================================================================

def _make_date(raw: bytes, year: int, month: int, day: int) -> date:
    try:
        return date(YEAR_BASE + year, month, day)
    except ValueError as e:
        raise InvalidDateError(raw, str(e)) from e


def date_dmy(raw: bytes) -> date:
    """Decode a 6-byte DDMMYY date."""
    day, month, year = _number(raw, 0), _number(raw, 2), _number(raw, 4)
    return _make_date(raw, year, month, day)


def date_ymd(raw: bytes) -> date:
    """Decode a 6-byte YYMMDD date."""
    year, month, day = _number(raw, 0), _number(raw, 2), _number(raw, 4)
    return _make_date(raw, year, month, day)


def optional_date_ymd(raw: bytes) -> Optional[date]:
    """Decode a 6-byte YYMMDD date, blank meaning absent."""
    if _is_blank(raw):
        return None
    return date_ymd(raw)


# =============================================================================
# Times
# =============================================================================

def time_hm(raw: bytes) -> time:
    """Decode a 4-byte HHMM time with seconds fixed at zero."""
    hour, minute = _number(raw, 0), _number(raw, 2)
    try:
        return time(hour, minute)
    except ValueError as e:
        raise InvalidTimeError(raw, str(e)) from e


def optional_time_hm(raw: bytes) -> Optional[time]:
    """Decode a 4-byte HHMM time, blank meaning absent."""
    if _is_blank(raw):
        return None
    return time_hm(raw)


def time_half(raw: bytes) -> time:
    """
    Decode a 5-byte HHMM[H] time.

    The fifth byte is a half-minute flag: space adds nothing, 'H' adds
    thirty seconds.

        >>> time_half(b"0005H")
        datetime.time(0, 5, 30)
    """
    flag = raw[4:5]
    if flag == b" ":
        second = 0
    elif flag == b"H":
        second = 30
    else:
        raise InvalidTimeError(raw, "half-minute flag must be ' ' or 'H'")
    return time_hm(raw[:4]).replace(second=second)


def optional_time_half(raw: bytes) -> Optional[time]:
    """Decode a 5-byte HHMM[H] time, blank meaning absent."""
    if _is_blank(raw):
        return None
    return time_half(raw)


# =============================================================================
# Weekday Mask
# =============================================================================

def weekday_mask(raw: bytes) -> Days:
    """
    Decode a 7-byte days-run field, Monday first.

    '1' sets the day's bit; '0' and space clear it. A blank field is an
    empty mask, not an absent value.

        >>> weekday_mask(b"1100100")
        <Days.MON|TUE|FRI: 19>

    Raises:
        InvalidItemError: If any byte is not '0', '1' or space
    """
    days = Days(0)
    for bit, char in enumerate(raw[:7]):
        if char == 0x31:  # '1'
            days |= Days(1 << bit)
        elif char not in (0x30, 0x20):  # '0', ' '
            raise InvalidItemError(raw, f"unexpected day flag {chr(char)!r}")
    return days


# =============================================================================
# Enumerations
# =============================================================================

def enumerated(enum_cls: type[E]) -> Callable[[bytes], E]:
    """
    Build a decoder that maps a field's text onto a ``str`` enum.

    Matching is exact and exhaustive: any code that is not a member value
    raises InvalidItemError, including bytes that are not ASCII at all.
    """
    def decode(raw: bytes) -> E:
        try:
            return enum_cls(trimmed_string(raw))
        except (EncodingError, ValueError) as e:
            raise InvalidItemError(raw, f"not a {enum_cls.__name__}") from e

    decode.__name__ = f"enumerated_{enum_cls.__name__}"
    return decode


def optional_enumerated(enum_cls: type[E]) -> Callable[[bytes], Optional[E]]:
    """Like enumerated(), but a blank field is None."""
    inner = enumerated(enum_cls)

    def decode(raw: bytes) -> Optional[E]:
        if _is_blank(raw):
            return None
        return inner(raw)

    decode.__name__ = f"optional_enumerated_{enum_cls.__name__}"
    return decode
