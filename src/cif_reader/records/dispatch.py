"""
Record Dispatcher
=================

Maps the two-byte tag at the start of a record span to its schema class.

Dispatch never fails: a tag that is not in RECORD_TYPES produces an
Unrecognised record carrying the raw span, and the consumer decides
whether that is fatal.

    >>> dispatch(b"ZZ" + b" " * 78).kind
    <RecordKind.TRAILER: 'ZZ'>
    >>> dispatch(b"XX" + b" " * 78).kind
    <RecordKind.UNRECOGNISED: '??'>
"""

import logging

from cif_reader.records.schemas import (
    Association,
    BasicSchedule,
    ChangeEnRoute,
    Header,
    LocationIntermediate,
    LocationOrigin,
    LocationTerminating,
    Record,
    ScheduleExtra,
    TiplocAmend,
    TiplocInsert,
    Trailer,
    Unrecognised,
)

logger = logging.getLogger(__name__)


# Tag -> schema class. Built from each class's own ``kind`` so the table
# and the classes cannot disagree.
RECORD_TYPES: dict[bytes, type] = {
    cls.kind.value.encode("ascii"): cls
    for cls in (
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
    )
}


def dispatch(span: bytes) -> Record:
    """
    Wrap a record span in the schema class selected by its tag.

    Args:
        span: The record content (80 bytes, terminator excluded)

    Returns:
        The matching record, or Unrecognised for unknown tags
    """
    span = bytes(span)
    record_cls = RECORD_TYPES.get(span[:2])
    if record_cls is None:
        logger.debug(f"Unrecognised record tag {span[:2]!r}")
        return Unrecognised(span)
    return record_cls(span)
