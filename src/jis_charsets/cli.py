"""CLI entrypoint for the JIS character-set sweep."""

from __future__ import annotations

import argparse
import codecs
import logging
from pathlib import Path
from typing import Sequence

from jis_charsets.blocks import BLOCK_KEYS
from jis_charsets.charsets.destinations import DEFAULT_DESTINATIONS, resolve_encodings
from jis_charsets.io.tsv_io import write_tsv
from jis_charsets.models import FidelityOutcome
from jis_charsets.pipeline import SweepResult, run_pipeline
from jis_charsets.reporting.report_md import build_report_md
from jis_charsets.stages.stage3_classify import ClassificationPolicy
from jis_charsets.validation import (
    collect_block_counts,
    collect_kubun_digit_counts,
    collect_outcome_counts,
)

DESTINATION_KEYS = tuple(destination.key for destination in DEFAULT_DESTINATIONS)


def _resolve_default_table_path(name: str) -> Path | None:
    """Resolve a default exception-table path from project layout.

    Args:
        name: Table file name such as ``variants.txt``.

    Returns:
        ``data/<name>`` when present, else ``<name>`` in the working
        directory when present, else ``None`` (no table).
    """

    cwd_data = Path("data") / name
    if cwd_data.exists():
        return cwd_data
    cwd = Path(name)
    if cwd.exists():
        return cwd
    return None


def _parse_codepage_table(value: str) -> tuple[str, Path]:
    """Parse a ``KEY=PATH`` mapping-table argument.

    Raises:
        argparse.ArgumentTypeError: If the value is malformed or names an
            unknown destination.
    """

    key, sep, path = value.partition("=")
    if not sep or not key or not path:
        raise argparse.ArgumentTypeError(f"expected KEY=PATH, got '{value}'")
    if key not in DESTINATION_KEYS:
        raise argparse.ArgumentTypeError(
            f"unknown destination '{key}' (choose from {', '.join(DESTINATION_KEYS)})"
        )
    return key, Path(path)


def _format_table(headers: Sequence[str], data_rows: Sequence[Sequence[str]]) -> str:
    """Format rows as an ASCII table for terminal output.

    Args:
        headers: Table headers.
        data_rows: Row values.

    Returns:
        Monospace table string.
    """

    widths = [len(header) for header in headers]
    for row in data_rows:
        for idx, value in enumerate(row):
            widths[idx] = max(widths[idx], len(value))

    header_line = " | ".join(header.ljust(widths[idx]) for idx, header in enumerate(headers))
    separator_line = "-+-".join("-" * width for width in widths)
    body_lines = [
        " | ".join(value.ljust(widths[idx]) for idx, value in enumerate(row)) for row in data_rows
    ]
    return "\n".join([header_line, separator_line, *body_lines])


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct CLI argument parser.

    Returns:
        Configured parser for the sweep command.
    """

    parser = argparse.ArgumentParser(
        description="Tabulate JIS code positions across Japanese legacy encodings."
    )
    parser.add_argument(
        "--output", type=Path, default=Path("encoding.tsv"), help="Destination TSV output path."
    )
    parser.add_argument(
        "--report",
        type=Path,
        default=None,
        help="Markdown report output path (default: report.md next to TSV).",
    )
    parser.add_argument(
        "--variants",
        type=Path,
        default=_resolve_default_table_path("variants.txt"),
        help="Path to the variant table (default: data/variants.txt or variants.txt if present).",
    )
    parser.add_argument(
        "--kanji",
        type=Path,
        default=_resolve_default_table_path("kanji.txt"),
        help="Path to the kanji-usage table (default: data/kanji.txt or kanji.txt if present).",
    )
    parser.add_argument(
        "--codepage-table",
        type=_parse_codepage_table,
        action="append",
        default=[],
        metavar="KEY=PATH",
        help="Mapping table for a destination without a Python codec, e.g. i943=IBM943.TXT.",
    )
    parser.add_argument(
        "--block",
        action="append",
        choices=BLOCK_KEYS,
        default=None,
        help="Sweep only this block (repeatable; default: all blocks).",
    )
    parser.add_argument(
        "--attribute-to-jisx0213",
        action="store_true",
        help="Attribute vendor characters covered by JIS X 0213/0212 to that standard.",
    )
    parser.add_argument(
        "--output-encoding", default="utf-8", help="Text encoding of the TSV output."
    )
    parser.add_argument("--no-header", action="store_true", help="Do not write TSV header.")
    parser.add_argument(
        "--list-encodings",
        action="store_true",
        help="List destination encodings and their codecs, then exit.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _print_encodings(tables: dict[str, Path]) -> None:
    encodings = resolve_encodings(tables)
    rows = [[bound.key, bound.destination.label, bound.source] for bound in encodings]
    rows.extend(
        [destination.key, destination.label, "unavailable"]
        for destination in encodings.unavailable
    )
    print(_format_table(["key", "label", "codec"], rows))


def _print_output_analysis(result: SweepResult) -> None:
    """Print block and classification summary tables for the sweep.

    Args:
        result: Sweep result.
    """

    rows = result.rows
    if not rows:
        print("No rows swept; skipping output analysis.")
        return

    block_counts = collect_block_counts(rows)
    block_rows = [[block.key, str(block_counts.get(block.key, 0))] for block in result.blocks]
    print("\nRows by block:")
    print(_format_table(["block", "rows"], block_rows))

    unicode_counts = collect_kubun_digit_counts(rows, "unicode")
    unicode_rows = [[digit, str(unicode_counts[digit])] for digit in sorted(unicode_counts)]
    print("\nRows by kubun unicode digit:")
    print(_format_table(["digit", "rows"], unicode_rows))

    outcome_counts = collect_outcome_counts(rows)
    outcome_rows = [
        [key, *(str(counts.get(outcome, 0)) for outcome in FidelityOutcome)]
        for key, counts in outcome_counts.items()
    ]
    print("\nFidelity outcomes by destination:")
    outcome_headers = ["destination", *(outcome.value for outcome in FidelityOutcome)]
    print(_format_table(outcome_headers, outcome_rows))

    if result.encodings.unavailable:
        labels = ", ".join(destination.label for destination in result.encodings.unavailable)
        print(f"\nWARNING: No codec for {labels}; their columns are empty.")


def main(argv: Sequence[str] | None = None) -> int:
    """Run CLI workflow from arguments through artifact generation.

    Args:
        argv: Command-line arguments; ``None`` reads ``sys.argv``.

    Returns:
        Zero exit status on success.
    """

    parser = build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        codecs.lookup(args.output_encoding)
    except LookupError:
        raise SystemExit(f"Unknown output encoding: {args.output_encoding}")

    tables = dict(args.codepage_table)
    for path in [args.variants, args.kanji, *tables.values()]:
        if path is not None and not path.exists():
            raise SystemExit(f"Input file not found: {path}")

    if args.list_encodings:
        _print_encodings(tables)
        return 0

    report_path = args.report if args.report is not None else args.output.parent / "report.md"

    result = run_pipeline(
        variants_path=args.variants,
        kanji_path=args.kanji,
        codepage_tables=tables,
        policy=ClassificationPolicy(attribute_to_jisx0213=args.attribute_to_jisx0213),
        block_keys=args.block,
    )

    write_tsv(
        result.rows,
        output_path=args.output,
        include_header=not args.no_header,
        encoding=args.output_encoding,
    )
    report_path.write_text(build_report_md(result), encoding="utf-8")

    print(f"Wrote {len(result.rows)} rows to {args.output}")
    print(f"Wrote report to {report_path}")
    _print_output_analysis(result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
