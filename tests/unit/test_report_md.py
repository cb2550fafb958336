"""Unit tests for markdown report generation."""

from __future__ import annotations

from jis_charsets.pipeline import run_pipeline
from jis_charsets.reporting.report_md import build_report_md


def test_build_report_md_contains_required_sections() -> None:
    """Report output should include all required summary sections."""

    result = run_pipeline(block_keys=["jisx0208-differing"])

    markdown = build_report_md(result)

    assert markdown.startswith("# Character Set Sweep Report\n")
    assert "## Rows per block" in markdown
    assert "## Kubun digits per axis" in markdown
    assert "## Fidelity outcomes per destination" in markdown
    assert "## Positions with differing Shift_JIS and Windows-31J readings" in markdown
    assert "## Unavailable destination encodings" in markdown
    assert "| block | title | rows |" in markdown
    assert (
        "| destination | codec | round-trips | encode-only | decode-only | undefined |"
        in markdown
    )
    assert "| I942 | ibm942 |" in markdown


def test_build_report_md_lists_differing_positions_once() -> None:
    """Each differing position appears once with both readings."""

    result = run_pipeline(block_keys=["jisx0208-differing"])

    markdown = build_report_md(result)

    assert markdown.count("| 02-44 |") == 1
    assert "| 02-44 | U+FFE2 [￢] | [¬] |" in markdown
    assert "| 01-33 | U+FF5E [～] | [〜] |" in markdown
