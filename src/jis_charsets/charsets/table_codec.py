"""Table-driven codecs for IBM code pages that CPython does not ship.

Mapping tables use the Unicode.org text layout: one ``0xBYTES 0xUNICODE``
pair per line, ``#`` comments, and ``0xXXXX+0xYYYY`` for code point
sequences. An optional third field in ICU precision notation restricts an
entry: ``|3`` marks a decode-only mapping and ``|1`` an encode-only fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import re
from types import MappingProxyType
from typing import Iterable, Mapping

from jis_charsets.charsets.hexfmt import SHIFT_IN, SHIFT_OUT
from jis_charsets.errors import LookupParseSkipped
from jis_charsets.models import REPLACEMENT_CHARACTER

logger = logging.getLogger(__name__)

TABLE_LINE_RE = re.compile(
    r"^\s*0x([0-9A-Fa-f]{2,4})"
    r"\s+(0x[0-9A-Fa-f]{4,6}(?:\+0x[0-9A-Fa-f]{4,6})*)"
    r"(?:\s+\|([013]))?\s*(?:#.*)?$"
)


@dataclass(frozen=True)
class CodePageEntry:
    """One parsed mapping line."""

    code: bytes
    text: str
    precision: str


def _parse_unicode_field(field: str) -> str:
    return "".join(chr(int(part, 16)) for part in field.split("+"))


def parse_table_line(line_number: int, line: str) -> CodePageEntry | None:
    """Parse one mapping-table line.

    Args:
        line_number: 1-based line number, used for diagnostics.
        line: Raw line text.

    Returns:
        Parsed entry, or ``None`` for blank and comment lines.

    Raises:
        LookupParseSkipped: If the line is neither blank, a comment, nor a mapping.
    """

    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None
    match = TABLE_LINE_RE.match(stripped)
    if not match:
        raise LookupParseSkipped(line_number, line)
    code_hex, unicode_field, precision = match.groups()
    if len(code_hex) % 2:
        raise LookupParseSkipped(line_number, line)
    return CodePageEntry(
        code=bytes.fromhex(code_hex),
        text=_parse_unicode_field(unicode_field),
        precision=precision or "0",
    )


def parse_table_lines(lines: Iterable[str]) -> list[CodePageEntry]:
    """Parse mapping lines, skipping malformed ones with a debug log entry."""

    entries: list[CodePageEntry] = []
    for line_number, line in enumerate(lines, start=1):
        try:
            entry = parse_table_line(line_number, line.rstrip("\n"))
        except LookupParseSkipped as exc:
            logger.debug("Skipping code-page table %s", exc)
            continue
        if entry is not None:
            entries.append(entry)
    return entries


@dataclass(frozen=True)
class CodePageTable:
    """Stateless single-string codec backed by explicit mapping tables.

    Attributes:
        decode_map: Byte code -> Unicode text.
        encode_map: Unicode text -> byte code; first round-trip entry wins.
        substitution: Byte written for characters without a mapping.
        shift_framing: Whether double-byte codes are framed by SO/SI (EBCDIC
            mixed code pages such as IBM-930 and IBM-939).
    """

    decode_map: Mapping[bytes, str]
    encode_map: Mapping[str, bytes]
    substitution: int
    shift_framing: bool = False
    max_text_length: int = 1

    @classmethod
    def from_entries(
        cls,
        entries: Iterable[CodePageEntry],
        substitution: int,
        shift_framing: bool = False,
    ) -> CodePageTable:
        decode_map: dict[bytes, str] = {}
        encode_map: dict[str, bytes] = {}
        for entry in entries:
            if entry.precision != "1":
                decode_map.setdefault(entry.code, entry.text)
            if entry.precision != "3":
                encode_map.setdefault(entry.text, entry.code)
        return cls(
            decode_map=MappingProxyType(decode_map),
            encode_map=MappingProxyType(encode_map),
            substitution=substitution,
            shift_framing=shift_framing,
            max_text_length=max((len(text) for text in encode_map), default=1),
        )

    def encode(self, text: str) -> bytes:
        """Encode ``text``, writing the substitution byte for unmapped characters."""

        out = bytearray()
        shifted = False
        longest = self.max_text_length
        pos = 0
        while pos < len(text):
            for size in range(min(longest, len(text) - pos), 0, -1):
                code = self.encode_map.get(text[pos:pos + size])
                if code is not None:
                    break
            else:
                size = 1
                code = bytes([self.substitution])

            if self.shift_framing:
                if len(code) == 2 and not shifted:
                    out.append(SHIFT_OUT)
                    shifted = True
                elif len(code) == 1 and shifted:
                    out.append(SHIFT_IN)
                    shifted = False
            out += code
            pos += size

        if shifted:
            out.append(SHIFT_IN)
        return bytes(out)

    def decode(self, data: bytes) -> str:
        """Decode ``data``, writing U+FFFD for byte codes without a mapping."""

        chars: list[str] = []
        shifted = False
        pos = 0
        while pos < len(data):
            byte = data[pos]
            if self.shift_framing and byte == SHIFT_OUT:
                shifted = True
                pos += 1
                continue
            if self.shift_framing and byte == SHIFT_IN:
                shifted = False
                pos += 1
                continue

            if self.shift_framing:
                width = 2 if shifted else 1
                text = self.decode_map.get(data[pos:pos + width])
            else:
                width = 2
                text = self.decode_map.get(data[pos:pos + 2]) if pos + 1 < len(data) else None
                if text is None:
                    width = 1
                    text = self.decode_map.get(data[pos:pos + 1])

            chars.append(REPLACEMENT_CHARACTER if text is None else text)
            pos += width
        return "".join(chars)


def load_codepage_table(
    path: Path, substitution: int, shift_framing: bool = False
) -> CodePageTable:
    """Load a mapping-table file into a :class:`CodePageTable`.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
    """

    if not path.exists():
        raise FileNotFoundError(f"Code-page table not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        entries = parse_table_lines(handle)

    logger.debug("Loaded %d code-page entries from %s", len(entries), path)
    return CodePageTable.from_entries(
        entries, substitution=substitution, shift_framing=shift_framing
    )
