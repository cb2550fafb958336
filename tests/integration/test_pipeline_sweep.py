"""Integration tests running the full sweep over selected blocks."""

from __future__ import annotations

from pathlib import Path

from jis_charsets.io.tsv_io import write_tsv
from jis_charsets.models import FidelityOutcome, RecordKind
from jis_charsets.pipeline import run_pipeline
from jis_charsets.reporting.report_md import build_report_md
from jis_charsets.stages.stage3_classify import ClassificationPolicy


def test_single_byte_sweep_is_deterministic() -> None:
    """Two sweeps of the single-byte blocks yield identical rows."""

    first = run_pipeline(block_keys=["ascii", "jisx0201"])
    second = run_pipeline(block_keys=["ascii", "jisx0201"])

    assert [block.key for block in first.blocks] == ["ascii", "jisx0201"]
    assert first.rows == second.rows
    assert len(first.rows) == 258


def test_level1_sweep_uses_exception_tables(tmp_path: Path) -> None:
    """The variant and kanji tables flow into level-1 rows."""

    variants = tmp_path / "variants.txt"
    variants.write_text("# variants\nU+4E9C U+4E9E old form\n", encoding="utf-8")
    kanji = tmp_path / "kanji.txt"
    kanji.write_text("1 亜\n", encoding="utf-8")

    result = run_pipeline(
        variants_path=variants, kanji_path=kanji, block_keys=["jisx0208-level1"]
    )

    rows = {row.record.canonical: row for row in result.rows}
    first = rows["亜"]
    assert first.kubun.code == "103131"
    assert first.record.variant is not None and first.record.variant.alternate == "亞"
    assert rows["唖"].kubun.kanji == "7"
    assert all(row.record.kind is RecordKind.WINDOWS_31J for row in result.rows)


def test_level4_kanji_sweep() -> None:
    """Level-4 kanji are plane-2 JIS X 0213 rows that Shift_JIS only decodes."""

    result = run_pipeline(block_keys=["jisx0213-level4"])

    assert result.rows
    for row in result.rows:
        assert row.record.kind is RecordKind.JIS_X0213
        assert row.record.coordinate.plane == 2
        assert (row.kubun.standard, row.kubun.level) == ("4", "4")
        assert row.record.sjis >= 0xF040
        assert row.outcomes["sjis"] is FidelityOutcome.DECODE_ONLY


def test_combining_block_and_artifacts(tmp_path: Path) -> None:
    """The combining block closes the sweep in the TSV and the report."""

    result = run_pipeline(
        block_keys=["jisx0208-differing", "jisx0213-combining"],
        policy=ClassificationPolicy(attribute_to_jisx0213=True),
    )

    (differing, combining) = result.blocks
    assert [row.kubun.code for row in combining.rows] == ["309090", "309090"]
    assert len(differing.rows) >= 7

    output = tmp_path / "encoding.tsv"
    write_tsv(result.rows, output)
    lines = output.read_text(encoding="utf-8").splitlines()
    assert len(lines) == len(result.rows) + 1
    assert lines[-1].split("\t")[:3] == ["jisx0213-combining", "U+309A", "309090"]

    report = build_report_md(result)
    assert "| jisx0213-combining | JIS X 0213 - combining characters | 2 |" in report
