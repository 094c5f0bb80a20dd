"""
CIF Enumerations
================

Enumerated values used by the record schemas.

Single-character codes are modelled as ``str`` enums whose values are the
literal codes found in the file, so decoding a field is an exact lookup:

    >>> TransactionType("R")
    <TransactionType.REVISE: 'R'>

The weekday mask is an IntFlag with Monday as bit 0, matching the
left-to-right order of the 7-character "days run" fields.
"""

from enum import Enum, IntFlag


class RecordKind(str, Enum):
    """
    Two-character record identity tags.

    UNRECOGNISED is not a real tag; it is the kind reported by records
    whose tag is not in the dispatch table.
    """
    HEADER = "HD"
    TIPLOC_INSERT = "TI"
    TIPLOC_AMEND = "TA"
    ASSOCIATION = "AA"
    BASIC_SCHEDULE = "BS"
    SCHEDULE_EXTRA = "BX"
    LOCATION_ORIGIN = "LO"
    LOCATION_INTERMEDIATE = "LI"
    LOCATION_TERMINATING = "LT"
    CHANGE_EN_ROUTE = "CR"
    TRAILER = "ZZ"
    UNRECOGNISED = "??"

    def get_description(self) -> str:
        """Get a human-readable name for the record kind."""
        descriptions = {
            RecordKind.HEADER: "Header",
            RecordKind.TIPLOC_INSERT: "TIPLOC Insert",
            RecordKind.TIPLOC_AMEND: "TIPLOC Amend",
            RecordKind.ASSOCIATION: "Association",
            RecordKind.BASIC_SCHEDULE: "Basic Schedule",
            RecordKind.SCHEDULE_EXTRA: "Basic Schedule Extra",
            RecordKind.LOCATION_ORIGIN: "Origin Location",
            RecordKind.LOCATION_INTERMEDIATE: "Intermediate Location",
            RecordKind.LOCATION_TERMINATING: "Terminating Location",
            RecordKind.CHANGE_EN_ROUTE: "Change en Route",
            RecordKind.TRAILER: "Trailer",
            RecordKind.UNRECOGNISED: "Unrecognised",
        }
        return descriptions[self]


class TransactionType(str, Enum):
    """Transaction type of BS and AA records."""
    NEW = "N"
    DELETE = "D"
    REVISE = "R"


class StpIndicator(str, Enum):
    """
    Short-term planning indicator (last byte of BS and AA records).

    PERMANENT records come from the long-term plan; OVERLAY and NEW are
    short-term variations; CANCELLATION removes a permanent schedule for
    the given dates.
    """
    CANCELLATION = "C"
    NEW = "N"
    OVERLAY = "O"
    PERMANENT = "P"


class UpdateIndicator(str, Enum):
    """Whether a file is a full extract or an update (HD byte 46)."""
    FULL = "F"
    UPDATE = "U"


class AssociationCategory(str, Enum):
    """How two associated trains relate."""
    JOIN = "JJ"
    DIVIDE = "VV"
    NEXT = "NP"


class AssociationDateIndicator(str, Enum):
    """Day on which an association happens relative to the main train."""
    STANDARD = "S"
    OVER_NEXT_MIDNIGHT = "N"
    OVER_PREVIOUS_MIDNIGHT = "P"


class AssociationType(str, Enum):
    """Whether associated trains carry passengers across the association."""
    PASSENGER = "P"
    OPERATING = "O"


class Days(IntFlag):
    """
    Weekday mask, one bit per day, Monday first.

    Example:
        >>> Days.MON | Days.FRI in Days.WEEKDAYS
        True
    """
    MON = 1 << 0
    TUE = 1 << 1
    WED = 1 << 2
    THU = 1 << 3
    FRI = 1 << 4
    SAT = 1 << 5
    SUN = 1 << 6

    WEEKDAYS = MON | TUE | WED | THU | FRI
    WEEKEND = SAT | SUN
    ALL = WEEKDAYS | WEEKEND

    def to_pattern(self) -> str:
        """Render as the 7-character '1'/'0' pattern used in the file."""
        return "".join(
            "1" if self & (1 << bit) else "0" for bit in range(7)
        )
