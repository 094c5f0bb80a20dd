"""
Record Schema Unit Tests
========================

Tests for the per-kind record schemas and the tag dispatcher, using
records from real timetable extracts.

Test Categories
---------------
1. Dispatch: tag lookup and the unrecognised fallback
2. Schemas: decoded values for each record kind
3. Laziness: construction never fails, errors stay per field
4. Introspection: field_specs / iter_fields
"""

from datetime import date, time

import pytest

from cif_reader.errors import (
    InvalidDateError,
    InvalidItemError,
    MandatoryFieldMissingError,
)
from cif_reader.records import (
    RECORD_TYPES,
    Association,
    AssociationCategory,
    AssociationDateIndicator,
    AssociationType,
    BasicSchedule,
    ChangeEnRoute,
    Days,
    Header,
    LocationIntermediate,
    LocationOrigin,
    LocationTerminating,
    RecordKind,
    ScheduleExtra,
    StpIndicator,
    TiplocAmend,
    TiplocInsert,
    Trailer,
    TransactionType,
    Unrecognised,
    UpdateIndicator,
    dispatch,
    field_names,
    field_specs,
    iter_fields,
)

from samples import (
    ASSOCIATION,
    BASIC_SCHEDULE,
    CANCELLATION,
    CHANGE_EN_ROUTE,
    DELETE,
    HEADER,
    INTERMEDIATE,
    ORIGIN,
    TERMINATING,
    TIPLOC_AMEND,
    TIPLOC_INSERT,
    TRAILER,
    W03751,
    pad,
)


# =============================================================================
# Dispatch Tests
# =============================================================================

class TestDispatch:
    """Tests for tag -> schema dispatch."""

    @pytest.mark.parametrize("span, record_cls", [
        (HEADER, Header),
        (TIPLOC_INSERT, TiplocInsert),
        (TIPLOC_AMEND, TiplocAmend),
        (ASSOCIATION, Association),
        (BASIC_SCHEDULE, BasicSchedule),
        (W03751[1], ScheduleExtra),
        (ORIGIN, LocationOrigin),
        (INTERMEDIATE, LocationIntermediate),
        (TERMINATING, LocationTerminating),
        (CHANGE_EN_ROUTE, ChangeEnRoute),
        (TRAILER, Trailer),
    ])
    def test_known_tags(self, span, record_cls):
        record = dispatch(span)
        assert isinstance(record, record_cls)
        assert record.span == span
        assert record.kind.value == span[:2].decode("ascii")

    def test_table_covers_every_real_kind(self):
        tags = {kind.value.encode("ascii") for kind in RecordKind
                if kind is not RecordKind.UNRECOGNISED}
        assert set(RECORD_TYPES) == tags

    def test_unknown_tag(self):
        record = dispatch(pad("XXsomething"))
        assert isinstance(record, Unrecognised)
        assert record.kind is RecordKind.UNRECOGNISED
        assert record.tag == "XX"

    def test_non_ascii_tag_does_not_fail(self):
        record = dispatch(b"\xff\xfe" + b" " * 78)
        assert isinstance(record, Unrecognised)
        assert record.tag == "\xff\xfe"

    def test_accepts_memoryview(self):
        record = dispatch(memoryview(TRAILER))
        assert isinstance(record, Trailer)
        assert isinstance(record.span, bytes)


# =============================================================================
# Schema Tests
# =============================================================================

class TestHeader:
    """Tests for the HD record (DDMMYY dates)."""

    def test_fields(self):
        hd = Header(HEADER)
        assert hd.file_mainframe_identity == "TPS.UDFROC1.PD190705"
        assert hd.extract_date == date(2019, 7, 5)
        assert hd.extract_time == time(19, 39)
        assert hd.current_file_reference == "DFROC2S"
        assert hd.last_file_reference is None
        assert hd.update_indicator is UpdateIndicator.FULL
        assert hd.version == "A"
        assert hd.user_start_date == date(2019, 7, 5)
        assert hd.user_end_date == date(2020, 7, 4)


class TestTiplocRecords:
    """Tests for the TI and TA records."""

    def test_insert(self):
        ti = TiplocInsert(TIPLOC_INSERT)
        assert ti.tiploc == "BLTNODR"
        assert ti.capitals == "24"
        assert ti.nalco == "853600"
        assert ti.nlc_check_character == "D"
        assert ti.tps_description == "BOLTON-UPON-DEARNE"
        assert ti.stanox == "24011"
        assert ti.crs_code == "BTD"
        assert ti.description == "BOLTON ON DEARNE"

    def test_amend(self):
        ta = TiplocAmend(TIPLOC_AMEND)
        assert ta.tiploc == "MBRK942"
        assert ta.nalco == "590970"
        assert ta.nlc_check_character == "A"
        assert ta.tps_description == "MILLBROOK SIG E942"
        assert ta.stanox == "86536"
        assert ta.crs_code is None
        assert ta.description is None
        assert ta.new_tiploc is None


class TestAssociation:
    """Tests for the AA record."""

    def test_fields(self):
        aa = Association(ASSOCIATION)
        assert aa.transaction_type is TransactionType.NEW
        assert aa.main_train_uid == "Y80987"
        assert aa.associated_train_uid == "Y80880"
        assert aa.start_date == date(2016, 1, 4)
        assert aa.end_date == date(2016, 2, 12)
        assert aa.days == Days.WEEKDAYS
        assert aa.category is AssociationCategory.JOIN
        assert aa.date_indicator is AssociationDateIndicator.STANDARD
        assert aa.location == "PRST"
        assert aa.diagram_type == "T"
        assert aa.association_type is AssociationType.PASSENGER
        assert aa.stp_indicator is StpIndicator.PERMANENT


class TestBasicSchedule:
    """Tests for the BS record."""

    def test_overlay_schedule(self):
        bs = BasicSchedule(BASIC_SCHEDULE)
        assert bs.transaction_type is TransactionType.REVISE
        assert bs.uid == "G82885"
        assert bs.start_date == date(2015, 10, 19)
        assert bs.end_date == date(2015, 10, 23)
        assert bs.days == Days.MON | Days.TUE | Days.FRI
        assert bs.bank_holiday_running is None
        assert bs.train_status == "P"
        assert bs.category == "OO"
        assert bs.identity == "2N75"
        assert bs.headcode is None
        assert bs.course_indicator == "1"
        assert bs.service_code == "13575825"
        assert bs.power_type == "DMU"
        assert bs.timing_load == "E"
        assert bs.speed == "090"
        assert bs.seating_class == "S"
        assert bs.sleepers is None
        assert bs.catering is None
        assert bs.stp_indicator is StpIndicator.OVERLAY
        assert not bs.is_cancellation

    def test_cancellation(self):
        bs = BasicSchedule(CANCELLATION)
        assert bs.transaction_type is TransactionType.NEW
        assert bs.uid == "C67006"
        assert bs.start_date == date(2019, 5, 19)
        assert bs.end_date == date(2019, 7, 28)
        assert bs.days == Days.SUN
        assert bs.train_status is None
        assert bs.category is None
        assert bs.stp_indicator is StpIndicator.CANCELLATION
        assert bs.is_cancellation

    def test_delete_has_no_end_date(self):
        bs = BasicSchedule(DELETE)
        assert bs.transaction_type is TransactionType.DELETE
        assert bs.uid == "S48587"
        assert bs.start_date == date(2019, 5, 25)
        assert bs.end_date is None
        assert bs.days == Days(0)
        assert bs.stp_indicator is StpIndicator.NEW


class TestScheduleExtra:
    """Tests for the BX record."""

    def test_fields(self):
        bx = ScheduleExtra(W03751[1])
        assert bx.traction_class is None
        assert bx.uic_code is None
        assert bx.atoc_code == "SE"
        assert bx.applicable_timetable_code == "Y"


class TestLocations:
    """Tests for the LO, LI, LT and CR records."""

    def test_origin(self):
        lo = LocationOrigin(ORIGIN)
        assert lo.location == "CHRX"
        assert lo.tiploc == "CHRX"
        assert lo.tiploc_instance is None
        assert lo.scheduled_departure == time(0, 15)
        assert lo.public_departure == time(0, 15)
        assert lo.platform == "6"
        assert lo.line == "FL"
        assert lo.engineering_allowance is None
        assert lo.activity == "TB"

    def test_intermediate_stop(self):
        li = LocationIntermediate(INTERMEDIATE)
        assert li.tiploc == "WLOE"
        assert li.scheduled_arrival == time(23, 27)
        assert li.scheduled_departure == time(23, 28)
        assert li.scheduled_pass is None
        assert li.public_arrival == time(23, 27)
        assert li.public_departure == time(23, 28)
        assert li.platform == "C"
        assert li.line is None
        assert li.activity == "T"
        assert not li.is_pass

    def test_intermediate_pass(self):
        li = LocationIntermediate(pad("LIWOKINGJ           1234H                  "))
        assert li.scheduled_arrival is None
        assert li.scheduled_pass == time(12, 34, 30)
        assert li.is_pass

    def test_intermediate_half_minute(self):
        li = LocationIntermediate(W03751[3])
        assert li.tiploc == "SNDP"
        assert li.scheduled_arrival == time(0, 5, 30)
        assert li.scheduled_departure == time(0, 6)

    def test_terminating(self):
        lt = LocationTerminating(TERMINATING)
        assert lt.tiploc == "TUNWELL"
        assert lt.scheduled_arrival == time(1, 25)
        assert lt.public_arrival == time(1, 27)
        assert lt.platform == "1"
        assert lt.path is None
        assert lt.activity == "TF"

    def test_change_en_route(self):
        cr = ChangeEnRoute(CHANGE_EN_ROUTE)
        assert cr.location == "CTRDJN"
        assert cr.category == "DT"
        assert cr.identity == "3Q27"
        assert cr.headcode is None
        assert cr.course_indicator == "1"
        assert cr.service_code == "52495112"
        assert cr.power_type == "D"
        assert cr.timing_load is None
        assert cr.speed == "030"
        assert cr.retail_service_id is None


# =============================================================================
# Lazy Decoding Tests
# =============================================================================

class TestLazyDecoding:
    """Tests that decoding happens per field, on access."""

    def test_construction_never_fails(self):
        """A record of garbage can be built; only its accessors fail."""
        bs = BasicSchedule(b"BS" + b"\xff" * 78)
        assert bs.kind is RecordKind.BASIC_SCHEDULE

    def test_bad_field_does_not_hide_others(self):
        # 31 April 2015 is not a date
        span = bytearray(BASIC_SCHEDULE)
        span[9:15] = b"150431"
        bs = BasicSchedule(bytes(span))
        with pytest.raises(InvalidDateError) as exc_info:
            bs.start_date
        assert exc_info.value.record == "BasicSchedule"
        assert exc_info.value.field == "start_date"
        assert bs.uid == "G82885"
        assert bs.end_date == date(2015, 10, 23)

    def test_unknown_stp_indicator(self):
        bs = BasicSchedule(BASIC_SCHEDULE[:79] + b"X")
        with pytest.raises(InvalidItemError):
            bs.stp_indicator

    def test_non_ascii_stp_indicator(self):
        bs = BasicSchedule(BASIC_SCHEDULE[:79] + b"\xe9")
        with pytest.raises(InvalidItemError) as exc_info:
            bs.stp_indicator
        assert exc_info.value.field == "stp_indicator"
        assert bs.uid == "G82885"

    def test_missing_mandatory(self):
        ti = TiplocInsert(pad("TI"))
        with pytest.raises(MandatoryFieldMissingError) as exc_info:
            ti.tiploc
        assert str(exc_info.value).startswith("TiplocInsert.tiploc:")

    def test_accessors_idempotent(self):
        """Reading a field twice gives equal values (or the same error type)."""
        for span in (HEADER, ASSOCIATION, BASIC_SCHEDULE, *W03751, CHANGE_EN_ROUTE):
            record = dispatch(span)
            first = dict(iter_fields(record))
            second = dict(iter_fields(record))
            assert first == second

    def test_records_are_frozen(self):
        bs = BasicSchedule(BASIC_SCHEDULE)
        with pytest.raises(AttributeError):
            bs.span = b""

    def test_equality_by_span(self):
        assert BasicSchedule(BASIC_SCHEDULE) == BasicSchedule(BASIC_SCHEDULE)
        assert BasicSchedule(BASIC_SCHEDULE) != BasicSchedule(CANCELLATION)


# =============================================================================
# Introspection Tests
# =============================================================================

class TestIntrospection:
    """Tests for field_specs, field_names and iter_fields."""

    def test_declaration_order(self):
        names = field_names(BasicSchedule)
        assert names[:4] == ["transaction_type", "uid", "start_date", "end_date"]
        assert names[-1] == "stp_indicator"

    def test_specs_stay_within_span(self):
        for record_cls in RECORD_TYPES.values():
            for spec in field_specs(record_cls):
                assert 2 <= spec.start < spec.end <= 80, (record_cls, spec)

    def test_trailer_has_no_fields(self):
        assert list(iter_fields(Trailer(TRAILER))) == []

    def test_iter_fields_yields_errors(self):
        span = bytearray(BASIC_SCHEDULE)
        span[21:28] = b"11x0000"
        fields = dict(iter_fields(BasicSchedule(bytes(span))))
        assert isinstance(fields["days"], InvalidItemError)
        assert fields["uid"] == "G82885"
