"""Markdown report generation for sweep run summaries."""

from __future__ import annotations

from typing import Iterable, Sequence

from jis_charsets.models import FidelityOutcome
from jis_charsets.pipeline import SweepResult
from jis_charsets.reporting.cells import unicode_label
from jis_charsets.validation import (
    KUBUN_AXES,
    collect_block_counts,
    collect_kubun_digit_counts,
    collect_outcome_counts,
    differing_rows,
)


def _markdown_table(headers: Sequence[str], rows: Iterable[Sequence[str]]) -> str:
    """Render a deterministic GitHub-flavored markdown table.

    Args:
        headers: Table header labels.
        rows: Table body rows as string sequences.

    Returns:
        Markdown table text.
    """

    line_header = "| " + " | ".join(headers) + " |"
    line_sep = "| " + " | ".join("---" for _ in headers) + " |"
    body = ["| " + " | ".join(row) + " |" for row in rows]
    return "\n".join([line_header, line_sep, *body])


def build_report_md(result: SweepResult) -> str:
    """Build the markdown report for one sweep.

    Args:
        result: Sweep result from :func:`jis_charsets.pipeline.run_pipeline`.

    Returns:
        Full markdown content with summary tables.
    """

    rows = result.rows
    block_counts = collect_block_counts(rows)
    block_rows = [
        (block.key, block.title, str(block_counts.get(block.key, 0))) for block in result.blocks
    ]

    axis_rows = []
    for axis in KUBUN_AXES:
        counts = collect_kubun_digit_counts(rows, axis)
        summary = ", ".join(f"{digit}: {counts[digit]}" for digit in sorted(counts))
        axis_rows.append((axis, summary))

    outcome_counts = collect_outcome_counts(rows)
    outcome_rows = [
        (
            bound.destination.label,
            bound.source,
            *(
                str(outcome_counts.get(bound.key, {}).get(outcome, 0))
                for outcome in FidelityOutcome
            ),
        )
        for bound in result.encodings
    ]

    differing: dict[str, tuple[str, str, str, str]] = {}
    for row in differing_rows(rows):
        record = row.record
        differing.setdefault(
            record.position_label,
            (
                record.position_label,
                f"{unicode_label(record)} [{record.canonical}]",
                f"[{record.sjis_reading}]",
                row.kubun.code,
            ),
        )

    unavailable_rows = [
        (destination.label, destination.codec) for destination in result.encodings.unavailable
    ]

    sections = [
        "# Character Set Sweep Report",
        "",
        "## Rows per block",
        _markdown_table(["block", "title", "rows"], block_rows),
        "",
        "## Kubun digits per axis",
        _markdown_table(["axis", "digit counts"], axis_rows),
        "",
        "## Fidelity outcomes per destination",
        _markdown_table(
            ["destination", "codec", *(outcome.value for outcome in FidelityOutcome)],
            outcome_rows,
        ),
        "",
        "## Positions with differing Shift_JIS and Windows-31J readings",
        _markdown_table(
            ["position", "windows-31j", "shift_jis", "kubun"], differing.values()
        ),
        "",
        "## Unavailable destination encodings",
        _markdown_table(["destination", "codec"], unavailable_rows),
    ]

    return "\n".join(sections) + "\n"
