"""Hex rendering helpers for encoded byte sequences."""

from __future__ import annotations

SHIFT_OUT = 0x0E
SHIFT_IN = 0x0F

# ISO-2022 designation prefix -> character-set label used in reports.
JIS_ESCAPE_LABELS = (
    ("1B284A", "1", 2),  # JIS X 0201 Roman
    ("1B2849", "2", 2),  # JIS X 0201 Katakana
    ("1B2442", "4", 4),  # JIS X 0208
    ("1B242844", "5", 4),  # JIS X 0212
)


def to_hex(data: bytes) -> str:
    """Render bytes as contiguous uppercase hex, e.g. ``b"\\x88\\x9f"`` -> ``889F``."""

    return data.hex().upper()


def utf16_hex(text: str) -> str:
    """Render a string as its UTF-16 code units in uppercase hex."""

    return to_hex(text.encode("utf-16-be"))


def jis_to_hex(encoded: bytes) -> str:
    """Label an ISO-2022-JP sequence with its designated set and payload.

    The escape sequence is replaced by a set number, so ``1B2442 3021 1B2842``
    renders as ``4-3021``; sequences without a known designation keep their
    full hex with a ``0-`` prefix.
    """

    text = to_hex(encoded)
    for prefix, label, width in JIS_ESCAPE_LABELS:
        if text.startswith(prefix):
            start = len(prefix)
            return f"{label}-{text[start:start + width]}"
    return f"0-{text}"


def is_ebcdic_kanji(encoded: bytes) -> bool:
    """Return whether ``encoded`` is one double-byte character framed by SO/SI."""

    return len(encoded) == 4 and encoded[0] == SHIFT_OUT and encoded[-1] == SHIFT_IN


def ebcdic_payload(encoded: bytes) -> bytes:
    """Strip SO/SI framing from a single EBCDIC double-byte character."""

    if is_ebcdic_kanji(encoded):
        return encoded[1:-1]
    return encoded


def ebcdic_to_hex(encoded: bytes) -> str:
    return to_hex(ebcdic_payload(encoded))
