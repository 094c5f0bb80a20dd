"""
Sample CIF Records
==================

Records taken from real timetable extracts. Every sample is the 80-byte
content of one line; ``cif_file_bytes()`` adds the line terminators.
"""


def pad(text: str) -> bytes:
    """Space-pad a record to the full 80 columns."""
    assert len(text) <= 80
    return text.ljust(80).encode("ascii")


def cif_file_bytes(*records: bytes) -> bytes:
    """Join 80-byte record spans into a CIF image, one line each."""
    return b"".join(record + b"\n" for record in records)


HEADER = pad("HDTPS.UDFROC1.PD1907050507191939DFROC2S       FA050719040720")
TIPLOC_INSERT = pad(
    "TIBLTNODR24853600DBOLTON-UPON-DEARNE        24011   0BTDBOLTON ON DEARNE"
)
TIPLOC_AMEND = pad("TAMBRK94200590970AMILLBROOK SIG E942        86536   0")
ASSOCIATION = (
    b"AANY80987Y808801601041602121111100JJSPRST     TP"
    + b" " * 31 + b"P"
)
BASIC_SCHEDULE = (
    b"BSRG828851510191510231100100 POO2N75    113575825 DMUE   090      S"
    + b" " * 12 + b"O"
)
CANCELLATION = (
    b"BSNC670061905191907280000001            1"
    + b" " * 38 + b"C"
)
DELETE = b"BSDS48587190525" + b" " * 64 + b"N"
ORIGIN = pad("LOCHRX    0015 00156  FL     TB")
INTERMEDIATE = pad("LIWLOE    2327 2328      23272328C        T")
TERMINATING = pad("LTTUNWELL 0125 01271     TF")
CHANGE_EN_ROUTE = pad("CRCTRDJN  DT3Q27    152495112 D      030")
TRAILER = pad("ZZ")

# Schedule W03751: BS, BX, LO, one LI, LT
W03751 = (
    b"BSNW037511905191912080000001 POO2J43    124655005 EMU    090D     S"
    + b" " * 12 + b"P",
    pad("BX         SEY"),
    pad("LOBROMLYN 0004 00041         TB"),
    pad("LISNDP    0005H0006      00060006         T"),
    pad("LTGRVPK   0009 00091     TF"),
)
