"""Cross-encoding tables and classification for the JIS character sets."""

from .models import (
    Coordinate,
    FidelityOutcome,
    Kubun,
    MappingRecord,
    RecordKind,
    SweepBlock,
    SweepRow,
    VariantEntry,
)

__all__ = [
    "Coordinate",
    "RecordKind",
    "MappingRecord",
    "FidelityOutcome",
    "Kubun",
    "VariantEntry",
    "SweepRow",
    "SweepBlock",
]
