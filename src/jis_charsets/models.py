"""Frozen data models passed between the sweep stages.

A ``MappingRecord`` is the cross-encoding snapshot of one code position.
``Kubun`` holds the six classification axes until the renderer turns them
into digits.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import enum
from typing import Mapping

REPLACEMENT_CHARACTER = "\ufffd"


@dataclass(frozen=True, order=True)
class Coordinate:
    """Men-ku-ten position; ``plane`` is 1 for the two-dimensional standards."""

    plane: int
    row: int
    col: int

    @classmethod
    def kuten(cls, row: int, col: int) -> Coordinate:
        return cls(1, row, col)


class RecordKind(enum.Enum):
    """Which table a mapping record was read from."""

    SINGLE_BYTE = "single_byte"
    JIS_X0208 = "jis_x0208"
    WINDOWS_31J = "windows_31j"
    JIS_X0213 = "jis_x0213"
    JIS_X0212 = "jis_x0212"
    COMBINING = "combining"


class FidelityOutcome(enum.Enum):
    """Round-trip fidelity of one record in one destination encoding."""

    ROUND_TRIPS = "round-trips"
    ENCODE_ONLY = "encode-only"
    DECODE_ONLY = "decode-only"
    UNDEFINED = "undefined"


@dataclass(frozen=True)
class VariantEntry:
    """Alternate code point(s) for a character, with an optional annotation."""

    alternate: str
    note: str | None = None


@dataclass(frozen=True)
class MappingRecord:
    """Cross-encoding snapshot of one code position.

    ``canonical`` is never empty: undefined positions hold U+FFFD. ``encoded``
    always has an entry per available destination, possibly a substitution
    sequence. ``jis``, ``euc``, and ``sjis`` are the code words derived from the
    coordinate and are ``None`` where that encoding has no value for it.

    ``sjis_reading`` and ``w31j_reading`` are per-kind override fields: the
    Shift_JIS and Windows-31J decodings of the defining bytes, used by
    Windows-31J and JIS X 0213 records.
    """

    kind: RecordKind
    canonical: str
    code_point: int | None
    nfc: str
    nfd: str
    nfkc: str
    defining: bytes
    defining_encoding: str
    encoded: Mapping[str, bytes]
    coordinate: Coordinate | None = None
    code: int | None = None
    jis: int | None = None
    euc: int | None = None
    sjis: int | None = None
    variant: VariantEntry | None = None
    sjis_reading: str | None = None
    w31j_reading: str | None = None

    @property
    def undefined(self) -> bool:
        return REPLACEMENT_CHARACTER in self.canonical

    @property
    def show_sjis(self) -> bool:
        """Whether a Windows-31J position has a distinct, defined Shift_JIS reading."""

        if self.kind is not RecordKind.WINDOWS_31J or self.sjis_reading is None:
            return False
        reading = self.sjis_reading
        return REPLACEMENT_CHARACTER not in reading and reading != self.canonical

    @property
    def position_label(self) -> str:
        """Render the position as ``5C``, ``16-01``, ``1-14-01``, or ``S-16-01``."""

        if self.code is not None:
            return f"{self.code:02X}"
        if self.coordinate is None:
            return "-"
        row, col = self.coordinate.row, self.coordinate.col
        if self.kind is RecordKind.JIS_X0213:
            return f"{self.coordinate.plane}-{row:02d}-{col:02d}"
        if self.kind is RecordKind.JIS_X0212:
            return f"S-{row:02d}-{col:02d}"
        return f"{row:02d}-{col:02d}"


@dataclass(frozen=True)
class Kubun:
    """Six-axis classification of a record.

    Each field holds one digit character. The wire form is the concatenation
    in declaration order, produced only by :attr:`code`.
    """

    unicode: str
    normalization: str
    standard: str
    level: str
    vendor: str
    kanji: str

    @property
    def code(self) -> str:
        return "".join(
            (self.unicode, self.normalization, self.standard, self.level, self.vendor, self.kanji)
        )

    def __str__(self) -> str:
        return self.code

    @classmethod
    def from_code(cls, code: str) -> Kubun:
        if len(code) != 6 or not code.isdigit():
            raise ValueError(f"kubun must be six digits: {code!r}")
        return cls(*code)

    @classmethod
    def filled(cls, digit: str) -> Kubun:
        return cls(*(digit * 6))


UNDEFINED_KUBUN = Kubun.filled("9")
USER_DEFINED_KUBUN = Kubun.filled("8")


@dataclass(frozen=True)
class SweepRow:
    """One output row: a record with its fidelity outcomes and classification."""

    block: str
    record: MappingRecord
    outcomes: Mapping[str, FidelityOutcome]
    kubun: Kubun


@dataclass(frozen=True)
class SweepBlock:
    """Rows of one fixed block of the index space, in ascending position order."""

    key: str
    title: str
    rows: tuple[SweepRow, ...] = field(default_factory=tuple)
