"""
CIF Record Schemas
==================

One class per physical record kind. Every class is a frozen dataclass
holding the 80-byte span of its line; fields are declared as FieldSpec
descriptors giving a fixed byte range and a decoder.

Lazy Decoding
-------------
Constructing a record only captures its span and cannot fail. Reading a
field attribute slices the span and runs the decoder, every time:

    >>> bs = BasicSchedule(b"BSRG828851510191510231100100 POO2N75    ...")
    >>> bs.uid
    'G82885'
    >>> bs.start_date
    datetime.date(2015, 10, 19)

A malformed field raises a FieldError (annotated with the record and field
names) from that attribute only; other fields stay readable, and a
consumer that never reads the broken field never sees the error.

Record Layout Reference
-----------------------
Offsets below are 0-based with exclusive ends, so ``FieldSpec(9, 15, ...)``
covers columns 10-15 of the printed CIF specification. Dates are YYMMDD
except in the Header record, which uses DDMMYY.

The record classes deliberately share no base class: a record is pure
data plus accessors, and ``Record`` is the union of the classes below.
Each class reports its tag through the ``kind`` class attribute.
"""

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Iterator, Union

from cif_reader.errors import FieldError
from cif_reader.records.fields import (
    date_dmy,
    date_ymd,
    enumerated,
    mandatory,
    optional_date_ymd,
    optional_enumerated,
    optional_string,
    optional_time_half,
    optional_time_hm,
    time_half,
    time_hm,
    weekday_mask,
)
from cif_reader.records.types import (
    AssociationCategory,
    AssociationDateIndicator,
    AssociationType,
    RecordKind,
    StpIndicator,
    TransactionType,
    UpdateIndicator,
)


# =============================================================================
# Field Descriptor
# =============================================================================

class FieldSpec:
    """
    A named fixed-width field of a record schema.

    Accessing the attribute on a record instance decodes
    ``span[start:end]``; accessing it on the class returns the FieldSpec
    itself, which is how iter_fields() discovers the layout.

    Attributes:
        start: First byte of the field (0-based)
        end: One past the last byte of the field
        decoder: Function converting the raw slice to a value
        name: Attribute name, set when the owning class is created
    """

    def __init__(self, start: int, end: int, decoder: Callable[[bytes], Any]):
        self.start = start
        self.end = end
        self.decoder = decoder
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, instance: Any, owner: type = None) -> Any:
        if instance is None:
            return self
        raw = instance.span[self.start:self.end]
        try:
            return self.decoder(raw)
        except FieldError as e:
            raise e.annotate(type(instance).__name__, self.name)

    @property
    def width(self) -> int:
        return self.end - self.start

    def __repr__(self) -> str:
        return f"FieldSpec({self.name!r}, {self.start}, {self.end})"


# Shorthands for the common field shapes
def _text(start: int, end: int) -> FieldSpec:
    return FieldSpec(start, end, optional_string)


def _required_text(start: int, end: int) -> FieldSpec:
    return FieldSpec(start, end, mandatory(optional_string))


# =============================================================================
# Header and Trailer
# =============================================================================

@dataclass(frozen=True)
class Header:
    """
    HD - file header, the first record of every file.

    Structure:
        Offset  Size    Field
        ------  ----    -----
        2       20      File mainframe identity
        22      6       Date of extract (DDMMYY)
        28      4       Time of extract (HHMM)
        32      7       Current file reference
        39      7       Last file reference
        46      1       Update indicator (F/U)
        47      1       Version
        48      6       User start date (DDMMYY)
        54      6       User end date (DDMMYY)
        60      20      Spare
    """
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.HEADER

    file_mainframe_identity = _required_text(2, 22)
    extract_date = FieldSpec(22, 28, date_dmy)
    extract_time = FieldSpec(28, 32, time_hm)
    current_file_reference = _required_text(32, 39)
    last_file_reference = _text(39, 46)
    update_indicator = FieldSpec(46, 47, enumerated(UpdateIndicator))
    version = _required_text(47, 48)
    user_start_date = FieldSpec(48, 54, date_dmy)
    user_end_date = FieldSpec(54, 60, date_dmy)


@dataclass(frozen=True)
class Trailer:
    """ZZ - end of file marker. Carries no fields."""
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.TRAILER


# =============================================================================
# TIPLOC Records
# =============================================================================

@dataclass(frozen=True)
class TiplocInsert:
    """
    TI - adds a timing point location.

    Structure:
        Offset  Size    Field
        ------  ----    -----
        2       7       TIPLOC
        9       2       Capitals identification
        11      6       NALCO (national location code)
        17      1       NLC check character
        18      26      TPS description
        44      5       STANOX
        49      4       PO MCP code
        53      3       CRS code
        56      16      Description
        72      8       Spare
    """
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.TIPLOC_INSERT

    tiploc = _required_text(2, 9)
    capitals = _text(9, 11)
    nalco = _required_text(11, 17)
    nlc_check_character = _required_text(17, 18)
    tps_description = _required_text(18, 44)
    stanox = _required_text(44, 49)
    po_mcp_code = _text(49, 53)
    crs_code = _text(53, 56)
    description = _text(56, 72)


@dataclass(frozen=True)
class TiplocAmend:
    """TA - amends a TIPLOC. Same layout as TI plus a new TIPLOC at 72-79."""
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.TIPLOC_AMEND

    tiploc = _required_text(2, 9)
    capitals = _text(9, 11)
    nalco = _required_text(11, 17)
    nlc_check_character = _required_text(17, 18)
    tps_description = _required_text(18, 44)
    stanox = _required_text(44, 49)
    po_mcp_code = _text(49, 53)
    crs_code = _text(53, 56)
    description = _text(56, 72)
    new_tiploc = _text(72, 79)


# =============================================================================
# Association
# =============================================================================

@dataclass(frozen=True)
class Association:
    """
    AA - links two train schedules (join, divide or next working).

    Structure:
        Offset  Size    Field
        ------  ----    -----
        2       1       Transaction type (N/D/R)
        3       6       Main train UID
        9       6       Associated train UID
        15      6       Start date (YYMMDD)
        21      6       End date (YYMMDD)
        27      7       Days
        34      2       Category (JJ/VV/NP)
        36      1       Date indicator (S/N/P)
        37      7       Location (TIPLOC)
        44      1       Base location suffix
        45      1       Associated location suffix
        46      1       Diagram type
        47      1       Association type (P/O)
        48      31      Filler
        79      1       STP indicator
    """
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.ASSOCIATION

    transaction_type = FieldSpec(2, 3, enumerated(TransactionType))
    main_train_uid = _required_text(3, 9)
    associated_train_uid = _required_text(9, 15)
    start_date = FieldSpec(15, 21, date_ymd)
    end_date = FieldSpec(21, 27, optional_date_ymd)
    days = FieldSpec(27, 34, weekday_mask)
    category = FieldSpec(34, 36, optional_enumerated(AssociationCategory))
    date_indicator = FieldSpec(36, 37, optional_enumerated(AssociationDateIndicator))
    location = _required_text(37, 44)
    base_location_suffix = _text(44, 45)
    associated_location_suffix = _text(45, 46)
    diagram_type = _text(46, 47)
    association_type = FieldSpec(47, 48, optional_enumerated(AssociationType))
    stp_indicator = FieldSpec(79, 80, enumerated(StpIndicator))


# =============================================================================
# Schedule Records
# =============================================================================

@dataclass(frozen=True)
class BasicSchedule:
    """
    BS - opens a train schedule.

    Structure:
        Offset  Size    Field
        ------  ----    -----
        2       1       Transaction type (N/D/R)
        3       6       Train UID
        9       6       Date runs from (YYMMDD)
        15      6       Date runs to (YYMMDD, blank for deletes)
        21      7       Days run
        28      1       Bank holiday running
        29      1       Train status
        30      2       Train category
        32      4       Train identity (signalling ID)
        36      4       Headcode
        40      1       Course indicator
        41      8       Train service code
        49      1       Portion ID
        50      3       Power type
        53      4       Timing load
        57      3       Speed
        60      6       Operating characteristics
        66      1       Seating class
        67      1       Sleepers
        68      1       Reservations
        69      1       Connection indicator
        70      4       Catering code
        74      4       Service branding
        78      1       Spare
        79      1       STP indicator (C/N/O/P)
    """
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.BASIC_SCHEDULE

    transaction_type = FieldSpec(2, 3, enumerated(TransactionType))
    uid = _required_text(3, 9)
    start_date = FieldSpec(9, 15, date_ymd)
    end_date = FieldSpec(15, 21, optional_date_ymd)
    days = FieldSpec(21, 28, weekday_mask)
    bank_holiday_running = _text(28, 29)
    train_status = _text(29, 30)
    category = _text(30, 32)
    identity = _text(32, 36)
    headcode = _text(36, 40)
    course_indicator = _text(40, 41)
    service_code = _text(41, 49)
    portion_id = _text(49, 50)
    power_type = _text(50, 53)
    timing_load = _text(53, 57)
    speed = _text(57, 60)
    operating_characteristics = _text(60, 66)
    seating_class = _text(66, 67)
    sleepers = _text(67, 68)
    reservations = _text(68, 69)
    connection_indicator = _text(69, 70)
    catering = _text(70, 74)
    branding = _text(74, 78)
    stp_indicator = FieldSpec(79, 80, enumerated(StpIndicator))

    @property
    def is_cancellation(self) -> bool:
        return self.stp_indicator is StpIndicator.CANCELLATION


@dataclass(frozen=True)
class ScheduleExtra:
    """BX - optional extra details following a BS record."""
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.SCHEDULE_EXTRA

    traction_class = _text(2, 6)
    uic_code = _text(6, 11)
    atoc_code = _required_text(11, 13)
    applicable_timetable_code = _required_text(13, 14)
    retail_service_id = _text(14, 22)
    data_source = _text(22, 23)


# =============================================================================
# Location Records
# =============================================================================

@dataclass(frozen=True)
class LocationOrigin:
    """
    LO - where the train starts.

    The 8-byte location is a 7-byte TIPLOC plus a 1-byte suffix that
    distinguishes repeat visits to the same TIPLOC.
    """
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.LOCATION_ORIGIN

    location = _required_text(2, 10)
    tiploc = _required_text(2, 9)
    tiploc_instance = _text(9, 10)
    scheduled_departure = FieldSpec(10, 15, time_half)
    public_departure = FieldSpec(15, 19, optional_time_hm)
    platform = _text(19, 22)
    line = _text(22, 25)
    engineering_allowance = _text(25, 27)
    pathing_allowance = _text(27, 29)
    activity = _text(29, 41)
    performance_allowance = _text(41, 43)


@dataclass(frozen=True)
class LocationIntermediate:
    """
    LI - a calling or passing point between origin and destination.

    A stopping point has scheduled arrival and departure times; a passing
    point has only a scheduled pass time.
    """
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.LOCATION_INTERMEDIATE

    location = _required_text(2, 10)
    tiploc = _required_text(2, 9)
    tiploc_instance = _text(9, 10)
    scheduled_arrival = FieldSpec(10, 15, optional_time_half)
    scheduled_departure = FieldSpec(15, 20, optional_time_half)
    scheduled_pass = FieldSpec(20, 25, optional_time_half)
    public_arrival = FieldSpec(25, 29, optional_time_hm)
    public_departure = FieldSpec(29, 33, optional_time_hm)
    platform = _text(33, 36)
    line = _text(36, 39)
    path = _text(39, 42)
    activity = _text(42, 54)
    engineering_allowance = _text(54, 56)
    pathing_allowance = _text(56, 58)
    performance_allowance = _text(58, 60)

    @property
    def is_pass(self) -> bool:
        """True when the train passes without a scheduled stop."""
        return self.scheduled_pass is not None


@dataclass(frozen=True)
class LocationTerminating:
    """LT - where the train ends."""
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.LOCATION_TERMINATING

    location = _required_text(2, 10)
    tiploc = _required_text(2, 9)
    tiploc_instance = _text(9, 10)
    scheduled_arrival = FieldSpec(10, 15, time_half)
    public_arrival = FieldSpec(15, 19, optional_time_hm)
    platform = _text(19, 22)
    path = _text(22, 25)
    activity = _text(25, 37)


@dataclass(frozen=True)
class ChangeEnRoute:
    """
    CR - train characteristics change at a location.

    Appears between LI records and applies from the named location
    onwards; the fields mirror the corresponding BS/BX fields.
    """
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.CHANGE_EN_ROUTE

    location = _required_text(2, 10)
    tiploc = _required_text(2, 9)
    tiploc_instance = _text(9, 10)
    category = _text(10, 12)
    identity = _text(12, 16)
    headcode = _text(16, 20)
    course_indicator = _text(20, 21)
    service_code = _text(21, 29)
    portion_id = _text(29, 30)
    power_type = _text(30, 33)
    timing_load = _text(33, 37)
    speed = _text(37, 40)
    operating_characteristics = _text(40, 46)
    seating_class = _text(46, 47)
    sleepers = _text(47, 48)
    reservations = _text(48, 49)
    connection_indicator = _text(49, 50)
    catering = _text(50, 54)
    branding = _text(54, 58)
    traction_class = _text(58, 62)
    uic_code = _text(62, 67)
    retail_service_id = _text(67, 75)


# =============================================================================
# Catch-all
# =============================================================================

@dataclass(frozen=True)
class Unrecognised:
    """
    A record whose tag is not a known record kind.

    Kept rather than rejected so unknown or future record types do not
    abort an otherwise valid stream.
    """
    span: bytes
    kind: ClassVar[RecordKind] = RecordKind.UNRECOGNISED

    @property
    def tag(self) -> str:
        """The first two bytes, decoded losslessly."""
        return self.span[:2].decode("latin-1")


Record = Union[
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
]


# =============================================================================
# Introspection
# =============================================================================

def field_specs(record_cls: type) -> list[FieldSpec]:
    """Return the FieldSpecs of a record class in declaration order."""
    return [
        value for value in vars(record_cls).values()
        if isinstance(value, FieldSpec)
    ]


def field_names(record_cls: type) -> list[str]:
    """Return the field names of a record class in declaration order."""
    return [spec.name for spec in field_specs(record_cls)]


def iter_fields(record: Record) -> Iterator[tuple[str, Any]]:
    """
    Decode every field of a record.

    Yields ``(name, value)`` pairs. A field that fails to decode yields its
    FieldError as the value instead of raising, so one bad field does not
    hide the rest.
    """
    for spec in field_specs(type(record)):
        try:
            yield spec.name, getattr(record, spec.name)
        except FieldError as e:
            yield spec.name, e
