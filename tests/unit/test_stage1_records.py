"""Unit tests for Stage 1 record construction."""

from __future__ import annotations

import pytest

from jis_charsets.charsets.destinations import resolve_encodings
from jis_charsets.errors import InvalidRegion, OutOfRange
from jis_charsets.models import Coordinate, RecordKind, VariantEntry
from jis_charsets.stages.stage1_records import (
    build_combining_record,
    build_jisx0212_record,
    build_jisx0213_record,
    build_single_byte_records,
    build_two_byte_records,
    collapse_undefined,
)

ENCODINGS = resolve_encodings()


def test_collapse_undefined() -> None:
    """Decodings starting with U+FFFD collapse to a single marker."""

    assert collapse_undefined("\ufffd\ufffd") == "\ufffd"
    assert collapse_undefined("a\ufffd") == "a\ufffd"
    assert collapse_undefined("亜") == "亜"


def test_ascii_byte_record() -> None:
    """An ASCII byte maps to itself in every code column."""

    (record,) = build_single_byte_records(0x41, ENCODINGS)

    assert record.kind is RecordKind.SINGLE_BYTE
    assert record.canonical == "A"
    assert record.code_point == 0x41
    assert (record.code, record.jis, record.euc, record.sjis) == (0x41, 0x41, 0x41, 0x41)
    assert record.defining == b"A"
    assert record.encoded["w31j"] == b"A"
    assert set(record.encoded) == set(ENCODINGS.keys)
    assert record.coordinate is None
    assert record.position_label == "41"


def test_backslash_byte_yields_yen_alternate() -> None:
    """Byte 0x5C yields the backslash and then its JIS X 0201 yen reading."""

    primary, alternate = build_single_byte_records(0x5C, ENCODINGS)

    assert primary.canonical == "\\"
    assert primary.sjis is None
    assert primary.euc == 0x5C
    assert alternate.canonical == "¥"
    assert alternate.sjis == 0x5C
    assert alternate.euc is None
    assert alternate.defining == b"\x5c"


def test_tilde_byte_yields_overline_alternate() -> None:
    """Byte 0x7E yields the tilde and then the overline."""

    records = build_single_byte_records(0x7E, ENCODINGS)
    assert [record.canonical for record in records] == ["~", "‾"]


def test_halfwidth_katakana_record() -> None:
    """Half-width katakana carry the single-shift EUC-JP code."""

    (record,) = build_single_byte_records(0xB1, ENCODINGS)

    assert record.canonical == "ｱ"
    assert record.jis == 0x31
    assert record.euc == 0x8EB1
    assert record.sjis == 0xB1
    assert record.nfkc == "ア"


def test_undefined_single_byte_collapses_to_replacement() -> None:
    """Unassigned bytes become a single U+FFFD."""

    (record,) = build_single_byte_records(0x80, ENCODINGS)
    assert record.canonical == "\ufffd"
    assert record.undefined


def test_two_byte_record_for_first_kanji() -> None:
    """The first level-1 kanji gets all three code words from its coordinate."""

    (record,) = build_two_byte_records(16, 1, ENCODINGS)

    assert record.kind is RecordKind.WINDOWS_31J
    assert record.canonical == "亜"
    assert record.coordinate == Coordinate.kuten(16, 1)
    assert (record.jis, record.euc, record.sjis) == (0x3021, 0xB0A1, 0x889F)
    assert record.defining == b"\x88\x9f"
    assert record.sjis_reading == "亜"
    assert not record.show_sjis
    assert record.position_label == "16-01"


@pytest.mark.parametrize(
    ("row", "col", "sjis_text", "w31j_text"),
    [(2, 44, "¬", "￢"), (1, 33, "〜", "～")],
)
def test_differing_mapping_emits_shift_jis_record_first(
    row: int, col: int, sjis_text: str, w31j_text: str
) -> None:
    """Positions read differently by Shift_JIS yield that reading before the Windows-31J one."""

    first, second = build_two_byte_records(row, col, ENCODINGS)

    assert first.kind is RecordKind.JIS_X0208
    assert first.canonical == sjis_text
    assert first.defining == second.defining
    assert second.kind is RecordKind.WINDOWS_31J
    assert second.canonical == w31j_text
    assert second.show_sjis


def test_vendor_rows_have_no_jis_or_euc_code() -> None:
    """Vendor rows only have a Shift_JIS code word."""

    (record,) = build_two_byte_records(115, 1, ENCODINGS)
    assert record.jis is None
    assert record.euc is None
    assert record.sjis == 0xFA40


def test_two_byte_rejects_rows_past_vendor_area() -> None:
    """Rows past the IBM extension block are out of range."""

    with pytest.raises(OutOfRange):
        build_two_byte_records(121, 1, ENCODINGS)


def test_jisx0213_skips_positions_shared_with_shift_jis() -> None:
    """JIS X 0213 positions that Shift_JIS already reads the same yield no record."""

    assert build_jisx0213_record(1, 1, 1, ENCODINGS) is None
    assert build_jisx0213_record(1, 16, 1, ENCODINGS) is None


def test_jisx0213_record_for_level3_kanji() -> None:
    """Level-3 kanji are defined by their Shift_JIS-2004 bytes."""

    record = build_jisx0213_record(1, 14, 1, ENCODINGS)

    assert record is not None
    assert record.kind is RecordKind.JIS_X0213
    assert record.sjis == 0x879F
    assert record.euc == 0xAEA1
    assert record.defining == b"\x87\x9f"
    assert record.position_label == "1-14-01"


def test_jisx0213_plane2_record() -> None:
    """Plane-2 positions use the three-byte EUC-JP code and lead bytes from 0xF0."""

    record = build_jisx0213_record(2, 1, 1, ENCODINGS)

    assert record is not None
    assert record.coordinate == Coordinate(2, 1, 1)
    assert record.euc == 0x8FA1A1
    assert record.sjis == 0xF040
    assert record.code_point is not None and record.code_point >= 0x20000


def test_jisx0213_supplementary_rows_raise() -> None:
    """Plane-2 rows owned by JIS X 0212 are rejected."""

    with pytest.raises(InvalidRegion):
        build_jisx0213_record(2, 16, 1, ENCODINGS)


def test_jisx0212_record_uses_three_byte_euc() -> None:
    """Supplementary kanji are defined by their three-byte EUC-JP code."""

    record = build_jisx0212_record(16, 1, ENCODINGS)

    assert record is not None
    assert record.kind is RecordKind.JIS_X0212
    assert record.canonical == "丂"
    assert record.defining == b"\x8f\xb0\xa1"
    assert record.sjis is None
    assert record.position_label == "S-16-01"


def test_jisx0212_undefined_and_reserved_positions() -> None:
    """Undefined supplementary positions yield nothing and reserved rows raise."""

    assert build_jisx0212_record(2, 1, ENCODINGS) is None
    with pytest.raises(InvalidRegion):
        build_jisx0212_record(3, 1, ENCODINGS)


def test_combining_record() -> None:
    """Standalone sound marks have no position and no defining bytes."""

    record = build_combining_record(0x309A, ENCODINGS)

    assert record.kind is RecordKind.COMBINING
    assert record.canonical == "\u309a"
    assert record.code_point == 0x309A
    assert record.defining == b""
    assert record.position_label == "-"


def test_variant_lookup_by_canonical() -> None:
    """Variants are attached by the canonical string."""

    variants = {"亜": VariantEntry(alternate="亞", note="old")}
    (record,) = build_two_byte_records(16, 1, ENCODINGS, variants)
    assert record.variant == VariantEntry(alternate="亞", note="old")
