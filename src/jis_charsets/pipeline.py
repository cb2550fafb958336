"""Top-level orchestration of the sweep over the JIS index space."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from jis_charsets.blocks import BlockDefinition, RecordSource, select_blocks
from jis_charsets.charsets.destinations import EncodingSet, resolve_encodings
from jis_charsets.errors import InvalidRegion
from jis_charsets.models import MappingRecord, SweepBlock, SweepRow, VariantEntry
from jis_charsets.stages.stage1_records import (
    build_combining_record,
    build_jisx0212_record,
    build_jisx0213_record,
    build_single_byte_records,
    build_two_byte_records,
)
from jis_charsets.stages.stage2_fidelity import check_fidelity
from jis_charsets.stages.stage3_classify import ClassificationEngine, ClassificationPolicy
from jis_charsets.tables.repository import KanjiLevelRepository, VariantRepository
from jis_charsets.validation import validate_rows

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepResult:
    """Result bundle returned by :func:`run_pipeline`.

    Attributes:
        blocks: Swept blocks in output order.
        encodings: Destination encodings the run used, including unavailable ones.
    """

    blocks: tuple[SweepBlock, ...]
    encodings: EncodingSet

    @property
    def rows(self) -> tuple[SweepRow, ...]:
        return tuple(row for block in self.blocks for row in block.rows)


def build_records(
    source: RecordSource,
    position: tuple[int, ...],
    encodings: EncodingSet,
    variants: Mapping[str, VariantEntry],
) -> list[MappingRecord]:
    """Build the records of one position; reserved positions yield none."""

    try:
        if source is RecordSource.SINGLE_BYTE:
            return build_single_byte_records(*position, encodings, variants)
        if source is RecordSource.TWO_BYTE:
            return build_two_byte_records(*position, encodings, variants)
        if source is RecordSource.COMBINING:
            return [build_combining_record(*position, encodings, variants)]
        if source is RecordSource.JIS_X0213:
            record = build_jisx0213_record(*position, encodings, variants)
        else:
            record = build_jisx0212_record(*position, encodings, variants)
    except InvalidRegion as exc:
        logger.debug("Skipping %s position %s: %s", source.value, position, exc)
        return []
    return [] if record is None else [record]


def _to_row(
    block: BlockDefinition,
    record: MappingRecord,
    encodings: EncodingSet,
    engine: ClassificationEngine,
) -> SweepRow:
    return SweepRow(
        block=block.key,
        record=record,
        outcomes=check_fidelity(record, encodings),
        kubun=engine.classify(record),
    )


def sweep_blocks(
    blocks: Sequence[BlockDefinition],
    encodings: EncodingSet,
    variants: Mapping[str, VariantEntry],
    engine: ClassificationEngine,
) -> tuple[SweepBlock, ...]:
    """Evaluate every position of every block exactly once, in order.

    Extra records of a block that defers alternates open the next block; when
    no block follows, they close the deferring block instead.
    """

    swept: list[SweepBlock] = []
    deferred: list[MappingRecord] = []
    for block in blocks:
        rows = [_to_row(block, record, encodings, engine) for record in deferred]
        deferred = []
        for position in block.positions:
            records = build_records(block.source, position, encodings, variants)
            if block.defers_alternates:
                deferred.extend(records[1:])
                records = records[:1]
            rows.extend(_to_row(block, record, encodings, engine) for record in records)
        swept.append(SweepBlock(key=block.key, title=block.title, rows=tuple(rows)))

    if deferred and swept:
        last = swept[-1]
        block = blocks[-1]
        tail = tuple(_to_row(block, record, encodings, engine) for record in deferred)
        swept[-1] = SweepBlock(key=last.key, title=last.title, rows=last.rows + tail)
    return tuple(swept)


def run_pipeline(
    variants_path: Path | None = None,
    kanji_path: Path | None = None,
    codepage_tables: Mapping[str, Path] | None = None,
    policy: ClassificationPolicy | None = None,
    block_keys: Iterable[str] | None = None,
) -> SweepResult:
    """Execute the record, fidelity, and classification stages over all blocks.

    Args:
        variants_path: Variant table path, or ``None`` for an empty table.
        kanji_path: Kanji-usage table path, or ``None`` for an empty table.
        codepage_tables: Destination key -> mapping-table path for IBM code pages.
        policy: Classification options.
        block_keys: Restrict the sweep to these blocks; ``None`` sweeps all.

    Returns:
        ``SweepResult`` with the swept blocks and the encodings used.
    """

    encodings = resolve_encodings(codepage_tables)
    variants = VariantRepository(variants_path).entries
    kanji_levels = KanjiLevelRepository(kanji_path).levels
    engine = ClassificationEngine(
        kanji_levels=kanji_levels,
        encodings=encodings,
        policy=policy or ClassificationPolicy(),
    )

    blocks = sweep_blocks(select_blocks(block_keys), encodings, variants, engine)
    result = SweepResult(blocks=blocks, encodings=encodings)
    validate_rows(result.rows, encodings)
    logger.info("Swept %d blocks, %d rows", len(blocks), len(result.rows))
    return result
