"""Validation helpers for sweep rows and summary counts."""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from jis_charsets.charsets.destinations import EncodingSet
from jis_charsets.models import UNDEFINED_KUBUN, FidelityOutcome, SweepRow
from jis_charsets.stages.stage2_fidelity import decodable, encodable

KUBUN_AXES = ("unicode", "normalization", "standard", "level", "vendor", "kanji")


def _raise_if_errors(errors: list[str], label: str) -> None:
    if errors:
        preview = "\n".join(f"- {item}" for item in errors[:25])
        rest = len(errors) - min(25, len(errors))
        more = f"\n- ... and {rest} more" if rest > 0 else ""
        raise ValueError(f"{label} validation failed with {len(errors)} errors:\n{preview}{more}")


def validate_rows(rows: Sequence[SweepRow], encodings: EncodingSet) -> None:
    """Validate sweep rows against the output invariants.

    Checks that every kubun is six digits, that undefined records classify
    as ``999999`` with no defined outcome, and that every round-trip outcome
    is both encodable and decodable.

    Args:
        rows: Sweep rows to validate.
        encodings: Encodings the rows were checked against.

    Raises:
        ValueError: If any row violates an invariant.
    """

    errors: list[str] = []
    for idx, row in enumerate(rows, start=1):
        label = f"Row {idx} ({row.block} {row.record.position_label})"
        code = row.kubun.code
        if len(code) != 6 or not code.isdigit():
            errors.append(f"{label}: invalid kubun '{code}'")

        if row.record.undefined:
            if row.kubun != UNDEFINED_KUBUN:
                errors.append(f"{label}: undefined record classified as '{code}'")
            defined = [
                key
                for key, outcome in row.outcomes.items()
                if outcome is not FidelityOutcome.UNDEFINED
            ]
            if defined:
                errors.append(f"{label}: undefined record has outcomes for {', '.join(defined)}")
            continue

        for bound in encodings:
            if row.outcomes.get(bound.key) is not FidelityOutcome.ROUND_TRIPS:
                continue
            if not (encodable(row.record, bound) and decodable(row.record, bound)):
                errors.append(f"{label}: {bound.key} round-trip is not encodable and decodable")

    _raise_if_errors(errors, "Sweep")


def collect_block_counts(rows: Sequence[SweepRow]) -> dict[str, int]:
    """Count rows per block key, in first-seen order."""

    counter: Counter[str] = Counter()
    for row in rows:
        counter[row.block] += 1
    return dict(counter)


def collect_kubun_digit_counts(rows: Sequence[SweepRow], axis: str) -> dict[str, int]:
    """Count rows by the digit on one kubun axis.

    Args:
        rows: Sweep rows.
        axis: One of :data:`KUBUN_AXES`.

    Returns:
        Dictionary of digit to row count.

    Raises:
        ValueError: If ``axis`` is not a kubun axis.
    """

    if axis not in KUBUN_AXES:
        raise ValueError(f"Unknown kubun axis: {axis}")
    counter: Counter[str] = Counter()
    for row in rows:
        counter[getattr(row.kubun, axis)] += 1
    return dict(counter)


def collect_outcome_counts(rows: Sequence[SweepRow]) -> dict[str, dict[FidelityOutcome, int]]:
    """Count fidelity outcomes per destination key.

    Args:
        rows: Sweep rows.

    Returns:
        Destination key -> outcome -> row count.
    """

    counts: dict[str, Counter[FidelityOutcome]] = {}
    for row in rows:
        for key, outcome in row.outcomes.items():
            counts.setdefault(key, Counter())[outcome] += 1
    return {key: dict(counter) for key, counter in counts.items()}


def differing_rows(rows: Sequence[SweepRow]) -> list[SweepRow]:
    """Return the Windows-31J rows whose Shift_JIS reading differs."""

    return [row for row in rows if row.record.show_sjis]
