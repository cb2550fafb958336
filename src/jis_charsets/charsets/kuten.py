"""Ku-ten coordinate arithmetic for JIS, EUC-JP, and Shift_JIS code words.

All functions are pure integer arithmetic. A "word" is the big-endian integer
value of a code, e.g. ``0x889F`` for the Shift_JIS bytes ``88 9F``; three-byte
EUC-JP codes carry the ``0x8F`` single-shift in the top byte.
"""

from __future__ import annotations

from jis_charsets.errors import InvalidRegion, OutOfRange

EUC_PLANE2_MARKER = 0x8F0000


def _assert_range(name: str, value: int, minimum: int, maximum: int) -> None:
    if value < minimum or maximum < value:
        raise OutOfRange(name, value, minimum, maximum)


def word(hi: int, lo: int) -> int:
    """Combine two byte values into one big-endian code word."""

    return hi << 8 | lo


def word_to_bytes(value: int, length: int) -> bytes:
    """Render a code word as exactly ``length`` big-endian bytes.

    Args:
        value: Code word such as ``0x889F`` or ``0x8FA1A1``.
        length: Number of bytes to emit; higher bits are dropped.

    Returns:
        Byte string of ``length`` bytes.
    """

    return (value & ((1 << (8 * length)) - 1)).to_bytes(length, "big")


def is_supplementary_row(row: int) -> bool:
    """Return whether plane-2 ``row`` belongs to the JIS X 0212 supplementary block.

    JIS X 0213 plane 2 only occupies the rows JIS X 0212 leaves free; the
    remaining rows are reserved for the supplementary kanji set.
    """

    return row == 2 or 6 <= row <= 7 or 9 <= row <= 11 or 16 <= row <= 77


def kuten_to_jis(row: int, col: int) -> int:
    """Convert a ku-ten coordinate to its 7-bit JIS code word."""

    _assert_range("row", row, 1, 94)
    _assert_range("col", col, 1, 94)
    return word(row + 0x20, col + 0x20)


def kuten_to_euc(row: int, col: int) -> int:
    """Convert a ku-ten coordinate to its two-byte EUC-JP code word."""

    _assert_range("row", row, 1, 94)
    _assert_range("col", col, 1, 94)
    return word(row + 0xA0, col + 0xA0)


def kuten_to_euc_plane(plane: int, row: int, col: int) -> int:
    """Convert a plane-aware coordinate to EUC-JP, adding ``0x8F`` for plane 2."""

    _assert_range("plane", plane, 1, 2)
    if plane == 1:
        return kuten_to_euc(row, col)
    return EUC_PLANE2_MARKER | kuten_to_euc(row, col)


def _sjis_trail(row: int, col: int) -> int:
    if row % 2 == 1:
        return col + (0x3F if col <= 63 else 0x40)
    return col + 0x9E


def kuten_to_sjis(row: int, col: int) -> int:
    """Convert a ku-ten coordinate to its Shift_JIS code word.

    Rows 95-120 are the vendor extension rows of Windows-31J (user-defined and
    IBM extension blocks) and continue the lead-byte sequence past ``0xEF``.

    Args:
        row: Row in ``1..120``.
        col: Column in ``1..94``.

    Returns:
        Two-byte Shift_JIS code word.

    Raises:
        OutOfRange: If ``row`` or ``col`` is outside its domain.
    """

    _assert_range("row", row, 1, 120)
    _assert_range("col", col, 1, 94)
    lead = (row - 1) // 2 + (0x81 if row <= 62 else 0xC1)
    return word(lead, _sjis_trail(row, col))


def kuten_to_sjis_plane(plane: int, row: int, col: int) -> int:
    """Convert a JIS X 0213 men-ku-ten coordinate to its Shift_JIS-2004 code word.

    Args:
        plane: Plane ``1`` or ``2``.
        row: Row in ``1..94``.
        col: Column in ``1..94``.

    Returns:
        Two-byte Shift_JIS-2004 code word.

    Raises:
        OutOfRange: If a component is outside its domain.
        InvalidRegion: If a plane-2 row is reserved for the supplementary block.
    """

    _assert_range("plane", plane, 1, 2)
    _assert_range("row", row, 1, 94)
    if plane == 1:
        return kuten_to_sjis(row, col)

    if is_supplementary_row(row):
        raise InvalidRegion(plane, row)
    _assert_range("col", col, 1, 94)
    if row <= 15:
        lead = (row + 0x1DF) // 2 - (row // 8) * 3
    else:
        lead = (row + 0x19B) // 2
    return word(lead, _sjis_trail(row, col))


def sjis2004_to_kuten(code: bytes) -> tuple[int, int, int]:
    """Invert :func:`kuten_to_sjis_plane` for a two-byte Shift_JIS-2004 code.

    Args:
        code: At least two bytes; only the first two are read.

    Returns:
        ``(plane, row, col)`` tuple.
    """

    c1 = code[0]
    c2 = code[1]
    value = word(c1, c2)

    plane = 1 if c1 < 0xF0 else 2
    if c1 < 0xE0:
        base = 0x80
    elif c1 < 0xF0:
        base = 0xC0
    elif value < 0xF09F:
        base = 0xEF
    elif value < 0xF140:
        base = 0xEC
    elif value < 0xF29F:
        base = 0xEF
    elif value < 0xF49F:
        base = 0xEC
    else:
        base = 0xCD
    row = (c1 - base) * 2 - (1 if c2 < 0x9F else 0)

    if c2 < 0x80:
        col = c2 - 0x3F
    elif c2 < 0x9F:
        col = c2 - 0x40
    else:
        col = c2 - 0x9E
    return plane, row, col


def sjis2004_to_euc(code: bytes) -> int:
    """Translate a Shift_JIS-2004 code to the EUC-JIS-2004 code of the same position."""

    return kuten_to_euc_plane(*sjis2004_to_kuten(code))
