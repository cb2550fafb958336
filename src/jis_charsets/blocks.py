"""Fixed block layout of the swept index space.

Blocks are listed in output order. Each block enumerates its positions in
ascending order; the record source decides which stage 1 builder reads them.
"""

from __future__ import annotations

from dataclasses import dataclass
import enum
from typing import Iterable

from jis_charsets.charsets.kuten import is_supplementary_row
from jis_charsets.stages.stage1_records import COMBINING_CODE_POINTS


class RecordSource(enum.Enum):
    SINGLE_BYTE = "single_byte"
    TWO_BYTE = "two_byte"
    JIS_X0213 = "jis_x0213"
    COMBINING = "combining"
    JIS_X0212 = "jis_x0212"


@dataclass(frozen=True)
class BlockDefinition:
    """One block of the sweep.

    Attributes:
        key: Stable identifier, used for ``--block`` selection.
        title: Heading in rendered reports.
        source: Record builder for the block's positions.
        positions: Builder arguments per position, in output order.
        defers_alternates: Whether extra records of a position are moved to
            the start of the next block (the JIS X 0201 Roman readings).
    """

    key: str
    title: str
    source: RecordSource
    positions: tuple[tuple[int, ...], ...]
    defers_alternates: bool = False


# Positions whose Shift_JIS and Windows-31J readings differ.
DIFFERING_MAPPING_KUTEN = ((1, 29), (1, 33), (1, 34), (1, 61), (1, 81), (1, 82), (2, 44))


def _bytes(start: int, stop: int) -> tuple[tuple[int, ...], ...]:
    return tuple((value,) for value in range(start, stop))


def _grid(rows: Iterable[int], plane: int | None = None) -> tuple[tuple[int, ...], ...]:
    prefix = () if plane is None else (plane,)
    return tuple((*prefix, row, col) for row in rows for col in range(1, 95))


def _level3_rows() -> list[int]:
    # Rows 16-46 and 48-83 of plane 1 hold the JIS X 0208 kanji.
    return [row for row in range(14, 95) if not (16 <= row <= 46 or 48 <= row <= 83)]


BLOCKS: tuple[BlockDefinition, ...] = (
    BlockDefinition("ascii", "ASCII", RecordSource.SINGLE_BYTE, _bytes(0x00, 0x80), True),
    BlockDefinition("jisx0201", "JIS X 0201", RecordSource.SINGLE_BYTE, _bytes(0x80, 0x100)),
    BlockDefinition(
        "jisx0208-differing",
        "JIS X 0208 - differing mappings",
        RecordSource.TWO_BYTE,
        DIFFERING_MAPPING_KUTEN,
    ),
    BlockDefinition(
        "jisx0208-nonkanji",
        "JIS X 0208 - non-kanji",
        RecordSource.TWO_BYTE,
        _grid(range(1, 13)),
    ),
    BlockDefinition(
        "nec-special", "NEC special characters", RecordSource.TWO_BYTE, _grid(range(13, 16))
    ),
    BlockDefinition(
        "jisx0208-level1",
        "JIS X 0208 - level 1 kanji",
        RecordSource.TWO_BYTE,
        _grid(range(16, 48)),
    ),
    BlockDefinition(
        "jisx0208-level2",
        "JIS X 0208 - level 2 kanji",
        RecordSource.TWO_BYTE,
        _grid(range(48, 89)),
    ),
    BlockDefinition(
        "nec-selected-ibm",
        "NEC-selected IBM extensions",
        RecordSource.TWO_BYTE,
        _grid(range(89, 95)),
    ),
    BlockDefinition(
        "user-defined", "User-defined area", RecordSource.TWO_BYTE, _grid(range(95, 115))
    ),
    BlockDefinition(
        "ibm-extensions", "IBM extensions", RecordSource.TWO_BYTE, _grid(range(115, 121))
    ),
    BlockDefinition(
        "jisx0213-nonkanji",
        "JIS X 0213 - non-kanji",
        RecordSource.JIS_X0213,
        _grid(range(2, 14), plane=1),
    ),
    BlockDefinition(
        "jisx0213-level3",
        "JIS X 0213 - level 3 kanji",
        RecordSource.JIS_X0213,
        _grid(_level3_rows(), plane=1),
    ),
    # Supplementary rows raise InvalidRegion and are skipped by the sweep.
    BlockDefinition(
        "jisx0213-level4",
        "JIS X 0213 - level 4 kanji",
        RecordSource.JIS_X0213,
        _grid(range(1, 95), plane=2),
    ),
    BlockDefinition(
        "jisx0213-combining",
        "JIS X 0213 - combining characters",
        RecordSource.COMBINING,
        tuple((cp,) for cp in COMBINING_CODE_POINTS),
    ),
    BlockDefinition(
        "jisx0212-nonkanji",
        "JIS X 0212 - non-kanji",
        RecordSource.JIS_X0212,
        _grid(row for row in range(2, 12) if is_supplementary_row(row)),
    ),
    BlockDefinition(
        "jisx0212-supplementary",
        "JIS X 0212 - supplementary kanji",
        RecordSource.JIS_X0212,
        _grid(range(16, 78)),
    ),
)

BLOCK_KEYS = tuple(block.key for block in BLOCKS)


def select_blocks(keys: Iterable[str] | None = None) -> tuple[BlockDefinition, ...]:
    """Return the blocks named by ``keys`` in sweep order, or all blocks.

    Raises:
        KeyError: If a key names no block.
    """

    if keys is None:
        return BLOCKS
    wanted = set(keys)
    unknown = sorted(wanted - set(BLOCK_KEYS))
    if unknown:
        raise KeyError(f"Unknown block(s): {', '.join(unknown)}")
    return tuple(block for block in BLOCKS if block.key in wanted)
