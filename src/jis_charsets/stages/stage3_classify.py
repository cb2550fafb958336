"""Stage 3: six-digit classification ("kubun") of mapping records.

Digits, left to right: Unicode plane/kind, normalization behaviour, standard,
kanji level, Windows-31J region, and kanji usage. Digit ``7`` on the first
axis means the character can only be decoded into its governing encoding;
``999999`` marks undefined positions and ``888888`` the user-defined rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from jis_charsets.charsets.destinations import ASCII_SUBSTITUTION, EncodingSet
from jis_charsets.charsets.hexfmt import to_hex
from jis_charsets.models import (
    UNDEFINED_KUBUN,
    USER_DEFINED_KUBUN,
    Kubun,
    MappingRecord,
    RecordKind,
)
from jis_charsets.stages.stage1_records import ALTERNATE_SINGLE_BYTE
from jis_charsets.stages.stage2_fidelity import decodable, encodable

COMBINING_KUBUN = Kubun.from_code("309090")

USER_DEFINED_ROWS = range(95, 115)

# Encoding whose defining bytes a record kind reproduces when it round-trips.
GOVERNING_ENCODING = {
    RecordKind.JIS_X0208: "sjis",
    RecordKind.WINDOWS_31J: "w31j",
    RecordKind.JIS_X0213: "sjis2004",
    RecordKind.JIS_X0212: "euc",
}

# Upper bounds (exclusive) of Shift_JIS-2004 code ranges -> kanji level.
LEVEL_BOUNDS = (
    ("879F", "0"),
    ("889F", "3"),
    ("9873", "1"),
    ("989F", "3"),
    ("EAA5", "2"),
    ("F040", "3"),
)
LEVEL_4 = "4"

# Upper bounds (exclusive) of Windows-31J code ranges -> vendor region.
VENDOR_BOUNDS = (
    ("8740", "3"),
    ("889F", "4"),
    ("ED40", "3"),
    ("F040", "5"),
    ("FA40", "8"),
)
IBM_EXTENSION = "6"

KANJI_RANGES = (
    (0x3400, 0x9FFF),
    (0xF900, 0xFAFF),
    (0x20000, 0x2FA1F),
)


@dataclass(frozen=True)
class ClassificationPolicy:
    """Options that change how vendor characters are attributed.

    Attributes:
        attribute_to_jisx0213: Attribute vendor characters covered by JIS X
            0213 (or, for IBM extensions, by JIS X 0212) to that standard
            instead of to the vendor.
    """

    attribute_to_jisx0213: bool = False


def _bounded_digit(code: str, bounds: tuple[tuple[str, str], ...], default: str) -> str:
    for bound, digit in bounds:
        if code < bound:
            return digit
    return default


def unicode_digit(record: MappingRecord) -> str:
    cp = record.code_point
    if cp is None:
        return "4"
    if 0x0300 <= cp <= 0x036F:
        return "3"
    if cp >= 0x10000:
        return "2"
    return "1"


def normalization_digit(record: MappingRecord) -> str:
    """Classify how the canonical string reacts to normalization.

    Returns:
        ``4`` if NFC changes it, ``3`` if NFKC changes a half-width or
        full-width form, ``2`` if NFKC changes it otherwise, ``1`` if only NFD
        changes it, else ``0``.
    """

    text = record.canonical
    if text != record.nfc:
        return "4"
    if text != record.nfkc:
        return "3" if 0xFF00 <= ord(text[0]) <= 0xFFEF else "2"
    if text != record.nfd:
        return "1"
    return "0"


@dataclass(frozen=True)
class ClassificationEngine:
    """Compute the kubun of mapping records.

    Attributes:
        kanji_levels: Character -> kanji-usage digit table.
        encodings: Destination encodings of the run.
        policy: Attribution options.
    """

    kanji_levels: Mapping[str, str]
    encodings: EncodingSet
    policy: ClassificationPolicy = field(default_factory=ClassificationPolicy)

    def classify(self, record: MappingRecord) -> Kubun:
        """Classify one record.

        Args:
            record: Stage 1 record.

        Returns:
            Six-axis classification.
        """

        if record.kind is RecordKind.COMBINING:
            return COMBINING_KUBUN
        if record.undefined:
            return UNDEFINED_KUBUN
        if record.kind is RecordKind.SINGLE_BYTE:
            return self._classify_single_byte(record)
        if record.kind is RecordKind.JIS_X0208:
            return self._classify_jisx0208(record)
        if record.kind is RecordKind.WINDOWS_31J:
            return self._classify_windows31j(record)
        if record.kind is RecordKind.JIS_X0213:
            return self._classify_jisx0213(record)
        return self._classify_jisx0212(record)

    def _encodable(self, record: MappingRecord, key: str) -> bool:
        bound = self.encodings.get(key)
        return bound is not None and encodable(record, bound)

    def _decodable(self, record: MappingRecord, key: str) -> bool:
        bound = self.encodings.get(key)
        return bound is not None and decodable(record, bound)

    def _substituted(self, record: MappingRecord, key: str) -> bool:
        encoded = record.encoded.get(key)
        return encoded is None or ASCII_SUBSTITUTION in encoded

    def governing_encodable(self, record: MappingRecord) -> bool:
        return self._encodable(record, GOVERNING_ENCODING[record.kind])

    def level_digit(self, record: MappingRecord) -> str:
        """Kanji level derived from the Shift_JIS-2004 code of the character.

        ``5`` marks supplementary kanji only EUC-JP can represent and ``7``
        characters no standard covers.
        """

        if self._decodable(record, "sjis2004"):
            return _bounded_digit(to_hex(record.encoded["sjis2004"]), LEVEL_BOUNDS, LEVEL_4)
        if self._decodable(record, "euc"):
            return "5"
        return "7"

    def vendor_digit(self, record: MappingRecord) -> str:
        """Windows-31J region of the character's encoded form."""

        if self._decodable(record, "w31j"):
            return _bounded_digit(to_hex(record.encoded["w31j"]), VENDOR_BOUNDS, IBM_EXTENSION)
        if not self._substituted(record, "w31j"):
            return "7"
        return "9"

    def kanji_digit(self, record: MappingRecord) -> str:
        level = self.kanji_levels.get(record.canonical)
        if level is not None:
            return level
        cp = record.code_point
        if cp is not None and any(low <= cp <= high for low, high in KANJI_RANGES):
            return "7"
        return "0"

    def _first_digit(self, record: MappingRecord, base: str) -> str:
        return base if self.governing_encodable(record) else "7"

    def _vendor_standard(self, level: str, ceiling: str) -> str:
        if not self.policy.attribute_to_jisx0213 or level > ceiling:
            return "7"
        return "4"

    def _classify_single_byte(self, record: MappingRecord) -> Kubun:
        value = record.code
        if record.canonical in ALTERNATE_SINGLE_BYTE.values():
            standard, level, vendor = "2", "0", "7"
        elif value < 0x20 or value == 0x7F:
            standard, level, vendor = "0", "0", "0"
        elif value < 0x80:
            standard, level, vendor = "1", "0", "1"
        else:
            standard, level, vendor = "2", "0", "2"
        return Kubun("1", normalization_digit(record), standard, level, vendor, "0")

    def _classify_jisx0208(self, record: MappingRecord) -> Kubun:
        row = record.coordinate.row
        if row < 16:
            standard, level = "3", "0"
            vendor = "9" if self._substituted(record, "w31j") else "7"
        elif row < 48:
            standard, level, vendor = "3", "1", "3"
        else:
            standard, level, vendor = "3", "2", "3"
        return Kubun(
            self._first_digit(record, "1"),
            normalization_digit(record),
            standard,
            level,
            vendor,
            self.kanji_digit(record),
        )

    def _classify_windows31j(self, record: MappingRecord) -> Kubun:
        row = record.coordinate.row
        if row in USER_DEFINED_ROWS:
            return USER_DEFINED_KUBUN

        if row < 13:
            level = self.level_digit(record)
            if record.sjis_reading == record.canonical:
                standard = "3"
            else:
                standard = self._vendor_standard(level, "4")
            vendor = "3"
        elif row < 16:
            level = self.level_digit(record)
            standard = self._vendor_standard(level, "4")
            vendor = "4"
        elif row < 48:
            standard, level, vendor = "3", "1", "3"
        elif row < 89:
            standard, level, vendor = "3", "2", "3"
        elif row < 95:
            standard, level, vendor = "7", self.level_digit(record), "5"
        else:
            level = self.level_digit(record)
            if not self.policy.attribute_to_jisx0213 or level > "5":
                standard = "7"
            elif level > "4":
                standard = "5"
            else:
                standard = "4"
            vendor = IBM_EXTENSION
        return Kubun(
            self._first_digit(record, "1"),
            normalization_digit(record),
            standard,
            level,
            vendor,
            self.kanji_digit(record),
        )

    def _classify_jisx0213(self, record: MappingRecord) -> Kubun:
        coordinate = record.coordinate
        if coordinate.plane == 2:
            level = "4"
        elif coordinate.row < 14:
            level = "0"
        else:
            level = "3"
        return Kubun(
            self._first_digit(record, unicode_digit(record)),
            normalization_digit(record),
            "4",
            level,
            self.vendor_digit(record),
            self.kanji_digit(record),
        )

    def _classify_jisx0212(self, record: MappingRecord) -> Kubun:
        return Kubun(
            self._first_digit(record, unicode_digit(record)),
            normalization_digit(record),
            "5",
            self.level_digit(record),
            self.vendor_digit(record),
            self.kanji_digit(record),
        )
