"""
CIF Records
===========

Typed, lazily decoded views over the 80-byte records of a CIF file.

This package provides:
- **Field decoders**: pure functions from fixed-width bytes to values
- **Record schemas**: one frozen dataclass per record kind, with a
  FieldSpec descriptor per field
- **Dispatcher**: tag -> schema lookup that never fails

Quick Start
-----------
    >>> from cif_reader.records import dispatch, BasicSchedule
    >>> record = dispatch(line[:80])
    >>> if isinstance(record, BasicSchedule):
    ...     print(record.uid, record.start_date, record.days)

Record Kinds
------------
- HD Header, ZZ Trailer
- TI TIPLOC Insert, TA TIPLOC Amend
- AA Association
- BS Basic Schedule, BX Basic Schedule Extra
- LO Origin, LI Intermediate, LT Terminating location
- CR Change en Route
- anything else: Unrecognised
"""

from cif_reader.records.types import (
    RecordKind,
    TransactionType,
    StpIndicator,
    UpdateIndicator,
    AssociationCategory,
    AssociationDateIndicator,
    AssociationType,
    Days,
)

from cif_reader.records.fields import (
    trimmed_string,
    optional_string,
    mandatory,
    date_dmy,
    date_ymd,
    optional_date_ymd,
    time_hm,
    optional_time_hm,
    time_half,
    optional_time_half,
    weekday_mask,
    enumerated,
    optional_enumerated,
)

from cif_reader.records.schemas import (
    FieldSpec,
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
    field_specs,
    field_names,
    iter_fields,
)

from cif_reader.records.dispatch import (
    RECORD_TYPES,
    dispatch,
)

__all__ = [
    # Enums
    "RecordKind",
    "TransactionType",
    "StpIndicator",
    "UpdateIndicator",
    "AssociationCategory",
    "AssociationDateIndicator",
    "AssociationType",
    "Days",
    # Field decoders
    "trimmed_string",
    "optional_string",
    "mandatory",
    "date_dmy",
    "date_ymd",
    "optional_date_ymd",
    "time_hm",
    "optional_time_hm",
    "time_half",
    "optional_time_half",
    "weekday_mask",
    "enumerated",
    "optional_enumerated",
    # Schemas
    "FieldSpec",
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
    "field_specs",
    "field_names",
    "iter_fields",
    # Dispatch
    "RECORD_TYPES",
    "dispatch",
]
