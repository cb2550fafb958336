"""Stage 1: build cross-encoding mapping records for code positions."""

from __future__ import annotations

import unicodedata
from typing import Mapping

from jis_charsets.charsets.destinations import (
    EUC_JP,
    SHIFT_JIS,
    SHIFT_JIS_2004,
    EncodingSet,
    PythonCodec,
    Windows31JCodec,
)
from jis_charsets.charsets.kuten import (
    is_supplementary_row,
    kuten_to_euc,
    kuten_to_euc_plane,
    kuten_to_jis,
    kuten_to_sjis,
    kuten_to_sjis_plane,
    word_to_bytes,
)
from jis_charsets.errors import InvalidRegion
from jis_charsets.models import (
    REPLACEMENT_CHARACTER,
    Coordinate,
    MappingRecord,
    RecordKind,
    VariantEntry,
)

# JIS X 0201 Roman readings of the two bytes where it departs from ASCII.
ALTERNATE_SINGLE_BYTE = {0x5C: "¥", 0x7E: "‾"}

COMBINING_CODE_POINTS = (0x3099, 0x309A)

_SHIFT_JIS = PythonCodec(SHIFT_JIS)
_SHIFT_JIS_2004 = PythonCodec(SHIFT_JIS_2004)
_WINDOWS_31J = Windows31JCodec()
_EUC_JP = PythonCodec(EUC_JP)


def collapse_undefined(text: str) -> str:
    """Collapse a decoding that starts with U+FFFD to a single U+FFFD.

    Decoders differ in how many replacement characters an invalid sequence
    produces; a single marker keeps undefined positions comparable.
    """

    if text.startswith(REPLACEMENT_CHARACTER):
        return REPLACEMENT_CHARACTER
    return text


def single_code_point(text: str) -> int | None:
    return ord(text) if len(text) == 1 else None


def _build_record(
    kind: RecordKind,
    canonical: str,
    defining: bytes,
    defining_encoding: str,
    encodings: EncodingSet,
    variants: Mapping[str, VariantEntry] | None,
    **fields,
) -> MappingRecord:
    return MappingRecord(
        kind=kind,
        canonical=canonical,
        code_point=single_code_point(canonical),
        nfc=unicodedata.normalize("NFC", canonical),
        nfd=unicodedata.normalize("NFD", canonical),
        nfkc=unicodedata.normalize("NFKC", canonical),
        defining=defining,
        defining_encoding=defining_encoding,
        encoded={bound.key: bound.encode(canonical) for bound in encodings},
        variant=(variants or {}).get(canonical),
        **fields,
    )


def build_single_byte_records(
    value: int,
    encodings: EncodingSet,
    variants: Mapping[str, VariantEntry] | None = None,
) -> list[MappingRecord]:
    """Build the record(s) for one single-byte value.

    Bytes ``0x5C`` and ``0x7E`` yield a second record carrying the JIS X 0201
    Roman reading (yen sign, overline), which has no EUC-JP code.

    Args:
        value: Byte value in ``0x00..0xFF``.
        encodings: Destination encodings for this run.
        variants: Variant table.

    Returns:
        One or two records, primary reading first.
    """

    defining = bytes([value])
    primary = _build_record(
        RecordKind.SINGLE_BYTE,
        collapse_undefined(_SHIFT_JIS.decode(defining)),
        defining,
        "sjis",
        encodings,
        variants,
        code=value,
        jis=value & 0x7F,
        euc=value if value < 0x80 else 0x8E00 | value,
        sjis=None if value in ALTERNATE_SINGLE_BYTE else value,
    )
    records = [primary]

    alternate = ALTERNATE_SINGLE_BYTE.get(value)
    if alternate is not None:
        records.append(
            _build_record(
                RecordKind.SINGLE_BYTE,
                alternate,
                defining,
                "sjis",
                encodings,
                variants,
                code=value,
                jis=value & 0x7F,
                euc=None,
                sjis=value,
            )
        )
    return records


def build_windows31j_record(
    row: int,
    col: int,
    encodings: EncodingSet,
    variants: Mapping[str, VariantEntry] | None = None,
) -> MappingRecord:
    """Build the Windows-31J record for a two-byte coordinate in rows ``1..120``."""

    sjis = kuten_to_sjis(row, col)
    defining = word_to_bytes(sjis, 2)
    return _build_record(
        RecordKind.WINDOWS_31J,
        collapse_undefined(_WINDOWS_31J.decode(defining)),
        defining,
        "w31j",
        encodings,
        variants,
        coordinate=Coordinate.kuten(row, col),
        jis=kuten_to_jis(row, col) if row <= 94 else None,
        euc=kuten_to_euc(row, col) if row <= 94 else None,
        sjis=sjis,
        sjis_reading=collapse_undefined(_SHIFT_JIS.decode(defining)),
    )


def shift_jis_reading(
    record: MappingRecord,
    encodings: EncodingSet,
    variants: Mapping[str, VariantEntry] | None = None,
) -> MappingRecord:
    """Build the JIS X 0208 record for the Shift_JIS reading of a Windows-31J record."""

    return _build_record(
        RecordKind.JIS_X0208,
        record.sjis_reading or REPLACEMENT_CHARACTER,
        record.defining,
        "sjis",
        encodings,
        variants,
        coordinate=record.coordinate,
        jis=record.jis,
        euc=record.euc,
        sjis=record.sjis,
    )


def build_two_byte_records(
    row: int,
    col: int,
    encodings: EncodingSet,
    variants: Mapping[str, VariantEntry] | None = None,
) -> list[MappingRecord]:
    """Build the records for one two-byte coordinate.

    When the Shift_JIS reading is defined and differs from the Windows-31J
    one, the JIS X 0208 record for that reading comes first.

    Raises:
        OutOfRange: If ``row`` is outside ``1..120`` or ``col`` outside ``1..94``.
    """

    record = build_windows31j_record(row, col, encodings, variants)
    if record.show_sjis:
        return [shift_jis_reading(record, encodings, variants), record]
    return [record]


def build_jisx0213_record(
    plane: int,
    row: int,
    col: int,
    encodings: EncodingSet,
    variants: Mapping[str, VariantEntry] | None = None,
) -> MappingRecord | None:
    """Build the record for a JIS X 0213 men-ku-ten coordinate.

    Positions that are undefined, or whose character is already the plain
    Shift_JIS reading of the same bytes, produce no record.

    Raises:
        InvalidRegion: If a plane-2 row belongs to the supplementary block.
    """

    sjis = kuten_to_sjis_plane(plane, row, col)
    defining = word_to_bytes(sjis, 2)
    canonical = collapse_undefined(_SHIFT_JIS_2004.decode(defining))
    sjis_reading = collapse_undefined(_SHIFT_JIS.decode(defining))
    if REPLACEMENT_CHARACTER in canonical or canonical == sjis_reading:
        return None

    return _build_record(
        RecordKind.JIS_X0213,
        canonical,
        defining,
        "sjis2004",
        encodings,
        variants,
        coordinate=Coordinate(plane, row, col),
        jis=kuten_to_jis(row, col),
        euc=kuten_to_euc_plane(plane, row, col),
        sjis=sjis,
        sjis_reading=sjis_reading,
        w31j_reading=collapse_undefined(_WINDOWS_31J.decode(defining)),
    )


def build_jisx0212_record(
    row: int,
    col: int,
    encodings: EncodingSet,
    variants: Mapping[str, VariantEntry] | None = None,
) -> MappingRecord | None:
    """Build the record for a JIS X 0212 coordinate from its three-byte EUC-JP code.

    Returns:
        The record, or ``None`` when EUC-JP leaves the position undefined.

    Raises:
        InvalidRegion: If ``row`` is not one of the supplementary rows.
    """

    if not is_supplementary_row(row):
        raise InvalidRegion(2, row)
    euc = kuten_to_euc_plane(2, row, col)
    defining = word_to_bytes(euc, 3)
    canonical = collapse_undefined(_EUC_JP.decode(defining))
    if REPLACEMENT_CHARACTER in canonical:
        return None

    return _build_record(
        RecordKind.JIS_X0212,
        canonical,
        defining,
        "euc",
        encodings,
        variants,
        coordinate=Coordinate(2, row, col),
        jis=kuten_to_jis(row, col),
        euc=euc,
        sjis=None,
    )


def build_combining_record(
    code_point: int,
    encodings: EncodingSet,
    variants: Mapping[str, VariantEntry] | None = None,
) -> MappingRecord:
    """Build the fixed record for a standalone combining sound mark."""

    return _build_record(
        RecordKind.COMBINING,
        chr(code_point),
        b"",
        "",
        encodings,
        variants,
    )
