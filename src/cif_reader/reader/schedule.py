"""
Schedule Aggregation
====================

A train schedule spans several physical records. This module folds such a
run into one Schedule value:

    BS  BX?  LO?  (LI | CR)*  LT?

Every stage after BS is optional, and a stage only consumes the next
record if its kind matches; otherwise the record is left in place for the
next stage (or the caller). Cancellation schedules (STP 'C') and deletes
legitimately consist of a lone BS record.

Lookahead
---------
Matching needs to see one record ahead without consuming it. Lookahead
wraps any record iterator (a Reader, a list iterator, ...) with a
single-slot peek buffer, leaving the reader itself untouched:

    >>> records = Lookahead(Reader.from_file("timetable.cif"))
    >>> header = records.next()
    >>> while isinstance(records.peek(), BasicSchedule):
    ...     schedule = read_schedule(records)

The record after a schedule stays in the lookahead slot and is the next
thing returned by ``records.next()``.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Union

from cif_reader.errors import ScheduleError
from cif_reader.records.schemas import (
    BasicSchedule,
    ChangeEnRoute,
    LocationIntermediate,
    LocationOrigin,
    LocationTerminating,
    Record,
    ScheduleExtra,
)

logger = logging.getLogger(__name__)

# Entries of the ordered intermediate sequence
RouteEntry = Union[LocationIntermediate, ChangeEnRoute]

_EMPTY = object()


# =============================================================================
# Lookahead Adapter
# =============================================================================

class Lookahead:
    """
    One-record peek/consume wrapper around a record iterator.

    Errors raised by the wrapped iterator propagate from whichever of
    peek() or next() triggered the read.
    """

    def __init__(self, records: Iterable[Record]):
        self._records = iter(records)
        self._slot = _EMPTY

    def peek(self) -> Optional[Record]:
        """Return the next record without consuming it (None at the end)."""
        if self._slot is _EMPTY:
            self._slot = next(self._records, None)
        return self._slot

    def next(self) -> Optional[Record]:
        """Consume and return the next record (None at the end)."""
        record = self.peek()
        if record is not None:
            self._slot = _EMPTY
        return record

    def take_if(self, *record_types: type) -> Optional[Record]:
        """Consume the next record only if it is one of ``record_types``."""
        if isinstance(self.peek(), record_types):
            return self.next()
        return None

    def __iter__(self) -> "Lookahead":
        return self

    def __next__(self) -> Record:
        record = self.next()
        if record is None:
            raise StopIteration
        return record


# =============================================================================
# Logical Schedule
# =============================================================================

@dataclass
class Schedule:
    """
    One logical train schedule.

    Attributes:
        basic: The BS record that opens the schedule
        extra: The BX record, if present
        origin: The LO record, if present
        sequence: LI and CR records in file order
        terminal: The LT record, if present
    """
    basic: BasicSchedule
    extra: Optional[ScheduleExtra] = None
    origin: Optional[LocationOrigin] = None
    sequence: list[RouteEntry] = field(default_factory=list)
    terminal: Optional[LocationTerminating] = None

    @property
    def uid(self) -> str:
        return self.basic.uid

    @property
    def intermediates(self) -> list[LocationIntermediate]:
        """The LI records of the sequence, in order."""
        return [e for e in self.sequence if isinstance(e, LocationIntermediate)]

    @property
    def changes(self) -> list[ChangeEnRoute]:
        """The CR records of the sequence, in order."""
        return [e for e in self.sequence if isinstance(e, ChangeEnRoute)]

    @property
    def record_count(self) -> int:
        """Number of physical records folded into this schedule."""
        return (
            1
            + (self.extra is not None)
            + (self.origin is not None)
            + len(self.sequence)
            + (self.terminal is not None)
        )

    def records(self) -> Iterator[Record]:
        """Yield the physical records back in file order."""
        yield self.basic
        if self.extra is not None:
            yield self.extra
        if self.origin is not None:
            yield self.origin
        yield from self.sequence
        if self.terminal is not None:
            yield self.terminal


# =============================================================================
# Aggregation
# =============================================================================

def read_schedule(records: Lookahead) -> Schedule:
    """
    Consume one schedule from ``records``.

    Args:
        records: Lookahead positioned at a BasicSchedule

    Returns:
        The aggregated Schedule; the record after it (if any) is left in
        the lookahead slot

    Raises:
        ScheduleError: If the next record is not a BasicSchedule
    """
    basic = records.take_if(BasicSchedule)
    if basic is None:
        found = records.peek()
        found_desc = "end of input" if found is None else found.kind.get_description()
        raise ScheduleError(f"expected a Basic Schedule record, found {found_desc}")

    schedule = Schedule(basic=basic)
    schedule.extra = records.take_if(ScheduleExtra)
    schedule.origin = records.take_if(LocationOrigin)
    while (entry := records.take_if(LocationIntermediate, ChangeEnRoute)) is not None:
        schedule.sequence.append(entry)
    schedule.terminal = records.take_if(LocationTerminating)

    logger.debug(
        f"Schedule {basic.span[3:9]!r}: {schedule.record_count} records"
    )
    return schedule


def group_records(records: Iterable[Record]) -> Iterator[Union[Schedule, Record]]:
    """
    Yield a Schedule for each BS run and every other record unchanged.

    Output order follows the input. Location records outside a schedule
    (which a well-formed file does not have) pass through individually.
    """
    lookahead = records if isinstance(records, Lookahead) else Lookahead(records)
    while (record := lookahead.peek()) is not None:
        if isinstance(record, BasicSchedule):
            yield read_schedule(lookahead)
        else:
            yield lookahead.next()


def iter_schedules(records: Iterable[Record]) -> Iterator[Schedule]:
    """Yield only the schedules of a record stream."""
    for item in group_records(records):
        if isinstance(item, Schedule):
            yield item
