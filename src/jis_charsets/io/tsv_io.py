"""TSV write helpers for sweep output artifacts."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from jis_charsets.charsets.destinations import DEFAULT_DESTINATIONS, DestinationEncoding
from jis_charsets.models import SweepRow
from jis_charsets.reporting.cells import header, row_cells

TSV_HEADER = header()


def write_tsv(
    rows: Sequence[SweepRow],
    output_path: Path,
    include_header: bool = True,
    encoding: str = "utf-8",
    destinations: Sequence[DestinationEncoding] = DEFAULT_DESTINATIONS,
) -> None:
    """Write sweep rows to a TSV file using the canonical column order.

    Args:
        rows: Sweep rows to serialize.
        output_path: Destination TSV file path.
        include_header: Whether to include a header row.
        encoding: Text encoding of the file; characters it cannot represent
            are written as numeric character references.
        destinations: Destination columns, in order.
    """

    with output_path.open(
        "w", encoding=encoding, errors="xmlcharrefreplace", newline="\n"
    ) as handle:
        if include_header:
            handle.write("\t".join(header(destinations)))
            handle.write("\n")
        for row in rows:
            handle.write("\t".join(row_cells(row, destinations)))
            handle.write("\n")
