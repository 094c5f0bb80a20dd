"""
Shared Test Fixtures
====================

Fixtures assembling the sample records from ``samples.py`` into CIF
images and files.
"""

from pathlib import Path

import pytest

from samples import (
    ASSOCIATION,
    BASIC_SCHEDULE,
    CANCELLATION,
    CHANGE_EN_ROUTE,
    HEADER,
    INTERMEDIATE,
    ORIGIN,
    TERMINATING,
    TIPLOC_AMEND,
    TIPLOC_INSERT,
    TRAILER,
    W03751,
    cif_file_bytes,
)


@pytest.fixture
def sample_records() -> list[bytes]:
    """
    A small but complete extract: header, TIPLOCs, an association, three
    schedules (one full, one cancellation, one with a change en route)
    and the trailer.
    """
    return [
        HEADER,
        TIPLOC_INSERT,
        TIPLOC_AMEND,
        ASSOCIATION,
        *W03751,
        CANCELLATION,
        BASIC_SCHEDULE,
        ORIGIN,
        INTERMEDIATE,
        CHANGE_EN_ROUTE,
        INTERMEDIATE,
        TERMINATING,
        TRAILER,
    ]


@pytest.fixture
def sample_cif(sample_records: list[bytes]) -> bytes:
    """The sample extract as a CIF byte image."""
    return cif_file_bytes(*sample_records)


@pytest.fixture
def sample_cif_file(tmp_path: Path, sample_cif: bytes) -> Path:
    """The sample extract written to a temporary file."""
    path = tmp_path / "timetable.cif"
    path.write_bytes(sample_cif)
    return path
