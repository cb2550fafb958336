"""Unit tests for Stage 3 classification."""

from __future__ import annotations

from dataclasses import dataclass, field
import unicodedata

import pytest

from jis_charsets.charsets.destinations import (
    DEFAULT_DESTINATIONS,
    BoundEncoding,
    EncodingSet,
    resolve_encodings,
)
from jis_charsets.models import (
    UNDEFINED_KUBUN,
    USER_DEFINED_KUBUN,
    Coordinate,
    Kubun,
    MappingRecord,
    RecordKind,
)
from jis_charsets.stages.stage1_records import (
    build_combining_record,
    build_jisx0212_record,
    build_jisx0213_record,
    build_single_byte_records,
    build_two_byte_records,
)
from jis_charsets.stages.stage3_classify import (
    COMBINING_KUBUN,
    ClassificationEngine,
    ClassificationPolicy,
    normalization_digit,
    unicode_digit,
)

ENCODINGS = resolve_encodings()
DESTINATIONS = {destination.key: destination for destination in DEFAULT_DESTINATIONS}


def _engine(
    kanji_levels: dict[str, str] | None = None,
    attribute_to_jisx0213: bool = False,
    encodings: EncodingSet = ENCODINGS,
) -> ClassificationEngine:
    return ClassificationEngine(
        kanji_levels=kanji_levels or {},
        encodings=encodings,
        policy=ClassificationPolicy(attribute_to_jisx0213=attribute_to_jisx0213),
    )


@dataclass(frozen=True)
class _MapCodec:
    decodings: dict[bytes, str] = field(default_factory=dict)

    def encode(self, text: str) -> bytes:
        return b"?"

    def decode(self, data: bytes) -> str:
        return self.decodings.get(data, "\ufffd")


def _fake_encodings(**decodings: dict[bytes, str]) -> EncodingSet:
    bound = []
    for key in ("euc", "sjis2004", "w31j"):
        codec = _MapCodec(decodings.get(key, {}))
        bound.append(BoundEncoding(DESTINATIONS[key], encoder=codec, decoder=codec, source="test"))
    return EncodingSet(bound=tuple(bound))


def _fake_record(kind: RecordKind, row: int, encoded: dict[str, bytes]) -> MappingRecord:
    return MappingRecord(
        kind=kind,
        canonical="丂",
        code_point=0x4E02,
        nfc="丂",
        nfd="丂",
        nfkc="丂",
        defining=b"\xfa\x9f",
        defining_encoding="w31j",
        encoded=encoded,
        coordinate=Coordinate.kuten(row, 1),
    )


def _text_record(text: str) -> MappingRecord:
    return MappingRecord(
        kind=RecordKind.WINDOWS_31J,
        canonical=text,
        code_point=ord(text) if len(text) == 1 else None,
        nfc=unicodedata.normalize("NFC", text),
        nfd=unicodedata.normalize("NFD", text),
        nfkc=unicodedata.normalize("NFKC", text),
        defining=b"",
        defining_encoding="w31j",
        encoded={},
    )


def test_kubun_from_code_and_filled() -> None:
    assert Kubun.from_code("103137").level == "1"
    assert str(Kubun.filled("9")) == "999999"
    with pytest.raises(ValueError):
        Kubun.from_code("10313")


@pytest.mark.parametrize(
    ("text", "digit"),
    [("亜", "1"), ("\U00020089", "2"), ("\u0301", "3"), ("か\u309a", "4")],
)
def test_unicode_digit(text: str, digit: str) -> None:
    assert unicode_digit(_text_record(text)) == digit


@pytest.mark.parametrize(
    ("text", "digit"),
    [("\u212b", "4"), ("ｱ", "3"), ("①", "2"), ("が", "1"), ("亜", "0")],
)
def test_normalization_digit(text: str, digit: str) -> None:
    assert normalization_digit(_text_record(text)) == digit


@pytest.mark.parametrize(
    ("value", "code"),
    [(0x00, "100000"), (0x7F, "100000"), (0x41, "101010"), (0xB1, "132020")],
)
def test_single_byte_kubun(value: int, code: str) -> None:
    """Single bytes classify by range."""

    (record,) = build_single_byte_records(value, ENCODINGS)
    assert _engine().classify(record).code == code


def test_alternate_single_byte_readings() -> None:
    """The yen reading of 0x5C is JIS X 0201 Roman with no Windows-31J form."""

    primary, alternate = build_single_byte_records(0x5C, ENCODINGS)
    engine = _engine()

    assert engine.classify(primary).code == "101010"
    assert engine.classify(alternate).code == "102070"


def test_undefined_single_byte_is_all_nines() -> None:
    (record,) = build_single_byte_records(0x80, ENCODINGS)
    assert _engine().classify(record) == UNDEFINED_KUBUN


def test_first_kanji_kubun_uses_kanji_table() -> None:
    """The kanji table overrides the generic kanji digit."""

    (record,) = build_two_byte_records(16, 1, ENCODINGS)

    assert _engine().classify(record).code == "103137"
    assert _engine({"亜": "1"}).classify(record).code == "103131"


def test_level_and_vendor_digits_from_encoded_forms() -> None:
    (record,) = build_two_byte_records(16, 1, ENCODINGS)
    engine = _engine()

    assert engine.level_digit(record) == "1"
    assert engine.vendor_digit(record) == "3"
    assert engine.governing_encodable(record)


def test_unassigned_two_byte_position_is_undefined() -> None:
    """Unassigned two-byte positions classify as all nines."""

    (record,) = build_two_byte_records(2, 15, ENCODINGS)
    assert _engine().classify(record) == UNDEFINED_KUBUN


def test_user_defined_rows() -> None:
    """User-defined rows classify as all eights."""

    (record,) = build_two_byte_records(95, 1, ENCODINGS)
    assert _engine().classify(record) == USER_DEFINED_KUBUN


def test_nec_special_characters_follow_policy() -> None:
    """NEC special characters move to JIS X 0213 only when attribution is enabled."""

    (record,) = build_two_byte_records(13, 1, ENCODINGS)
    assert record.canonical == "①"

    default = _engine().classify(record)
    attributed = _engine(attribute_to_jisx0213=True).classify(record)

    assert (default.standard, default.vendor) == ("7", "4")
    assert (attributed.standard, attributed.vendor) == ("4", "4")


def test_nec_selected_ibm_extension_is_decode_only() -> None:
    """A NEC-selected duplicate encodes to its IBM extension code, so it only decodes."""

    (record,) = build_two_byte_records(89, 1, ENCODINGS)
    kubun = _engine().classify(record)

    assert record.canonical == "纊"
    assert record.encoded["w31j"] == b"\xfa\x5c"
    assert (kubun.unicode, kubun.standard, kubun.vendor, kubun.kanji) == ("7", "7", "5", "7")


def test_ibm_extension_round_trips() -> None:
    """IBM extension characters keep their own code in Windows-31J."""

    (record,) = build_two_byte_records(115, 1, ENCODINGS)
    assert record.canonical == "ⅰ"
    assert _engine().classify(record).code == "127060"


def test_ibm_extension_attributed_to_jisx0213() -> None:
    """With attribution, a small roman numeral covered by JIS X 0213 is standard 4."""

    (record,) = build_two_byte_records(115, 1, ENCODINGS)
    kubun = _engine(attribute_to_jisx0213=True).classify(record)
    assert (kubun.standard, kubun.level, kubun.vendor) == ("4", "0", "6")


@pytest.mark.parametrize(
    ("decodings", "attribute", "code"),
    [
        ({"sjis2004": {b"\xf0\x40": "丂"}}, True, "104467"),
        ({"euc": {b"\x8f\xb0\xa1": "丂"}}, True, "105567"),
        ({}, True, "107767"),
        ({"euc": {b"\x8f\xb0\xa1": "丂"}}, False, "107567"),
    ],
)
def test_ibm_extension_kanji_standard_follows_level(
    decodings: dict[str, dict[bytes, str]], attribute: bool, code: str
) -> None:
    """IBM kanji are attributed to JIS X 0213 or JIS X 0212 by the encoding that covers them."""

    record = _fake_record(
        RecordKind.WINDOWS_31J,
        116,
        {"w31j": b"\xfa\x9f", "sjis2004": b"\xf0\x40", "euc": b"\x8f\xb0\xa1"},
    )
    engine = _engine(attribute_to_jisx0213=attribute, encodings=_fake_encodings(**decodings))

    assert engine.classify(record).code == code


@pytest.mark.parametrize(
    ("encoded", "decodes", "digit"),
    [
        (b"\x87\x40", True, "4"),
        (b"\xfa\x40", True, "6"),
        (b"\x81\x60", False, "7"),
        (b"?", False, "9"),
    ],
)
def test_vendor_digit_from_windows31j_form(encoded: bytes, decodes: bool, digit: str) -> None:
    """Encode-only Windows-31J forms give 7, substituted ones give 9."""

    record = _fake_record(RecordKind.JIS_X0213, 14, {"w31j": encoded})
    w31j = {encoded: "丂"} if decodes else {encoded: "〜"}
    engine = _engine(encodings=_fake_encodings(w31j=w31j))

    assert engine.vendor_digit(record) == digit


def test_jisx0213_plane1_and_plane2_levels() -> None:
    """Plane-1 rows from 14 are level 3 and plane 2 is level 4."""

    level3 = build_jisx0213_record(1, 14, 1, ENCODINGS)
    level4 = build_jisx0213_record(2, 1, 1, ENCODINGS)
    assert level3 is not None and level4 is not None
    engine = _engine()

    first = engine.classify(level3)
    second = engine.classify(level4)

    assert (first.standard, first.level, first.kanji) == ("4", "3", "7")
    assert (second.unicode, second.standard, second.level) == ("2", "4", "4")


def test_supplementary_kanji_kubun() -> None:
    """Supplementary kanji are attributed to JIS X 0212."""

    record = build_jisx0212_record(16, 1, ENCODINGS)
    assert record is not None

    kubun = _engine().classify(record)

    assert (kubun.unicode, kubun.standard, kubun.kanji) == ("1", "5", "7")


def test_combining_records_have_fixed_kubun() -> None:
    """Standalone sound marks always classify as 309090."""

    record = build_combining_record(0x3099, ENCODINGS)
    assert _engine().classify(record) == COMBINING_KUBUN
    assert COMBINING_KUBUN.code == "309090"
