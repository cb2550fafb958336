"""Render sweep rows as report cells.

Destination cells mark the fidelity outcome: plain hex for a round-trip,
``>hex`` for encode-only (the bytes decode to something else), ``<hex`` for
decode-only (the defining bytes, which the encoder does not produce) and
``-`` when the character is not representable. Unavailable destinations
render as empty cells.
"""

from __future__ import annotations

from typing import Sequence

from jis_charsets.charsets.destinations import (
    ASCII_SUBSTITUTION,
    DEFAULT_DESTINATIONS,
    SHIFT_JIS_2004,
    DestinationEncoding,
    PythonCodec,
    Windows31JCodec,
)
from jis_charsets.charsets.hexfmt import ebcdic_to_hex, jis_to_hex, to_hex, utf16_hex
from jis_charsets.models import FidelityOutcome, MappingRecord, RecordKind, SweepRow
from jis_charsets.stages.stage1_records import COMBINING_CODE_POINTS
from jis_charsets.stages.stage3_classify import GOVERNING_ENCODING

CONTROL_NAMES = (
    "NUL", "SOH", "STX", "ETX", "EOT", "ENQ", "ACK", "BEL",
    "BS", "HT", "LF", "VT", "FF", "CR", "SO", "SI",
    "DLE", "DC1", "DC2", "DC3", "DC4", "NAK", "SYN", "ETB",
    "CAN", "EM", "SUB", "ESC", "FS", "GS", "RS", "US",
)
DELETE_NAME = "DEL"

LEADING_COLUMNS = [
    "block",
    "unicode",
    "kubun",
    "utf16",
    "utf8",
    "variant",
    "position",
    "jis",
    "euc",
    "sjis",
]

ENCODABLE_OUTCOMES = (FidelityOutcome.ROUND_TRIPS, FidelityOutcome.ENCODE_ONLY)

# Encoding a record must be representable in for its remarks to list replacements.
REMARK_GOVERNING = {RecordKind.SINGLE_BYTE: "sjis", **GOVERNING_ENCODING}

_MARKERS = {
    FidelityOutcome.ROUND_TRIPS: "",
    FidelityOutcome.ENCODE_ONLY: ">",
    FidelityOutcome.DECODE_ONLY: "<",
}

# Combining-sequence renderings longer than this are abbreviated.
MAX_UTF16_UNITS = 2

# Decoders for the cross-encoding remarks.
_SHIFT_JIS_2004 = PythonCodec(SHIFT_JIS_2004)
_WINDOWS_31J = Windows31JCodec()

# Standalone sound marks a half-width form decomposes to under NFKC.
COMBINING_MARKS = tuple(chr(cp) for cp in COMBINING_CODE_POINTS)


def header(destinations: Sequence[DestinationEncoding] = DEFAULT_DESTINATIONS) -> list[str]:
    return [*LEADING_COLUMNS, *(destination.label for destination in destinations), "remarks"]


def control_name(value: int) -> str | None:
    if value < 0x20:
        return CONTROL_NAMES[value]
    if value == 0x7F:
        return DELETE_NAME
    return None


def unicode_label(record: MappingRecord) -> str:
    cp = record.code_point
    if cp is None:
        return "-"
    if cp <= 0xFFFF:
        return f"U+{cp:04X}"
    return f"U+{cp:06X}"


def _abbreviated(text: str) -> str:
    if len(text.encode("utf-16-be")) // 2 <= MAX_UTF16_UNITS:
        return utf16_hex(text)
    return f"{utf16_hex(text)[:4]}..."


def variant_cell(record: MappingRecord) -> str:
    """Show the variant, or else the first normalization form that changes the text."""

    text = record.canonical
    if record.variant is not None:
        return utf16_hex(record.variant.alternate)
    if record.nfc != text:
        return utf16_hex(record.nfc)
    if record.nfkc != text:
        return _abbreviated(record.nfkc)
    if record.nfd != text:
        return _abbreviated(record.nfd)
    return "-"


def _code_cell(value: int | None) -> str:
    if value is None:
        return "-"
    if value <= 0xFF:
        return f"{value:02X}"
    if value <= 0xFFFF:
        return f"{value:04X}"
    return f"{value:06X}"


def _bytes_hex(destination: DestinationEncoding, data: bytes) -> str:
    if destination.family == "jis":
        return jis_to_hex(data)
    if destination.ebcdic:
        return ebcdic_to_hex(data)
    return to_hex(data)


def destination_cell(row: SweepRow, destination: DestinationEncoding) -> str:
    """Render one destination column of ``row``."""

    outcome = row.outcomes.get(destination.key)
    if outcome is None:
        return ""
    if destination.key == "w31j" and row.record.w31j_reading == row.record.canonical:
        # Same character at the same position in Windows-31J.
        return to_hex(row.record.defining)
    if outcome is FidelityOutcome.UNDEFINED:
        return "-"
    if outcome is FidelityOutcome.DECODE_ONLY:
        return f"<{to_hex(row.record.defining)}"
    encoded = row.record.encoded[destination.key]
    return f"{_MARKERS[outcome]}{_bytes_hex(destination, encoded)}"


def _sjis2004_remark(row: SweepRow) -> str | None:
    record = row.record
    if record.kind is RecordKind.WINDOWS_31J:
        if not record.show_sjis and row.outcomes.get("sjis2004") in ENCODABLE_OUTCOMES:
            return None
    elif record.kind is not RecordKind.SINGLE_BYTE:
        return None

    encoded = record.encoded.get("sjis2004")
    if encoded is None or _SHIFT_JIS_2004.decode(encoded) == record.canonical:
        return None
    if record.kind is RecordKind.WINDOWS_31J and ASCII_SUBSTITUTION in encoded:
        return None
    return f"-> {to_hex(encoded)} (SJIS2004)"


def _w31j_remark(row: SweepRow) -> str | None:
    record = row.record
    if record.kind is not RecordKind.JIS_X0213:
        return None
    encoded = record.encoded.get("w31j")
    if encoded is None or ASCII_SUBSTITUTION in encoded:
        return None
    text = _WINDOWS_31J.decode(encoded)
    if text == record.canonical:
        return None
    return f"-> [{text}] (W31J)"


def remarks_cell(row: SweepRow) -> str:
    """Describe the character and how it maps outside its own table.

    Control characters are named; other characters are shown in brackets.
    When the character is representable in its own encoding, its
    normalization or variant replacement follows, and then the character a
    sibling Shift_JIS encoding reads back instead: the Shift_JIS-2004 code
    for single bytes and Windows-31J rows, the Windows-31J character for
    JIS X 0213 rows.
    """

    record = row.record
    if record.undefined:
        return ""
    name = control_name(record.code) if record.kind is RecordKind.SINGLE_BYTE else None
    parts = [name or f"[{record.canonical}]"]

    governing = REMARK_GOVERNING.get(record.kind)
    if governing is None or row.outcomes.get(governing) not in ENCODABLE_OUTCOMES:
        return parts[0]

    text = record.canonical
    if record.nfc != text:
        parts.append(f"-> [{record.nfc}] (NFC)")
    elif record.nfkc != text:
        if record.kind is RecordKind.SINGLE_BYTE and record.nfkc in COMBINING_MARKS:
            parts.append("-> (NFKC)")
        else:
            parts.append(f"-> [{record.nfkc}] (NFKC)")
    variant = record.variant
    if (
        variant is not None
        and not variant.alternate.startswith(record.nfc)
        and variant.alternate != record.nfkc
    ):
        parts.append(f"-> [{variant.alternate}]")
        if variant.note:
            parts.append(f"({variant.note})")
    for remark in (_sjis2004_remark(row), _w31j_remark(row)):
        if remark is not None:
            parts.append(remark)
    return " ".join(parts)


def row_cells(
    row: SweepRow,
    destinations: Sequence[DestinationEncoding] = DEFAULT_DESTINATIONS,
) -> list[str]:
    """Render one sweep row in :func:`header` column order."""

    record = row.record
    jis = record.jis
    if record.kind is RecordKind.SINGLE_BYTE and record.code >= 0x80:
        jis = None
    return [
        row.block,
        unicode_label(record),
        row.kubun.code,
        utf16_hex(record.canonical),
        to_hex(record.canonical.encode("utf-8")),
        variant_cell(record),
        record.position_label,
        _code_cell(jis),
        _code_cell(record.euc),
        _code_cell(record.sjis),
        *(destination_cell(row, destination) for destination in destinations),
        remarks_cell(row),
    ]
