"""Stage 2: per-destination round-trip fidelity of mapping records."""

from __future__ import annotations

from jis_charsets.charsets.destinations import (
    CONTENT,
    POSITION,
    BoundEncoding,
    DestinationEncoding,
    EncodingSet,
)
from jis_charsets.charsets.hexfmt import is_ebcdic_kanji
from jis_charsets.models import FidelityOutcome, MappingRecord, RecordKind

ESCAPE = 0x1B

# Check method per destination key for record kinds that depart from the default.
CHECK_OVERRIDES: dict[RecordKind, dict[str, str]] = {
    RecordKind.JIS_X0212: {"euc": POSITION, "sjis2004": CONTENT, "w31j": CONTENT},
}

# Byte family of the defining bytes, keyed by the record's defining encoding.
DEFINING_FAMILIES = {"sjis": "sjis", "sjis2004": "sjis", "w31j": "sjis", "euc": "euc"}

# Characters that encode to the substitution byte legitimately.
_VACUOUS = {"jis": ("?", "？")}


def check_method(record: MappingRecord, destination: DestinationEncoding) -> str:
    return CHECK_OVERRIDES.get(record.kind, {}).get(destination.key, destination.check)


def encodable(record: MappingRecord, bound: BoundEncoding) -> bool:
    """Return whether ``record`` encodes into ``bound`` without loss.

    Position-checked destinations must reproduce the record's defining bytes.
    Content-checked destinations must not emit their substitution byte; an
    ISO-2022 sequence opened by an escape and an SO/SI-framed EBCDIC kanji
    are accepted as they are.
    """

    destination = bound.destination
    encoded = record.encoded[bound.key]
    if check_method(record, destination) == POSITION:
        return encoded == record.defining

    if record.canonical in _VACUOUS.get(destination.family, ("?",)):
        return True
    if destination.substitution not in encoded:
        return True
    if destination.family == "jis" and encoded[:1] == bytes([ESCAPE]):
        return True
    return destination.ebcdic and is_ebcdic_kanji(encoded)


def decodable(record: MappingRecord, bound: BoundEncoding) -> bool:
    """Return whether the encoded bytes decode back to the canonical string."""

    return bound.decode(record.encoded[bound.key]) == record.canonical


def _decodes_from_defining(record: MappingRecord, bound: BoundEncoding) -> bool:
    if DEFINING_FAMILIES.get(record.defining_encoding) != bound.destination.family:
        return False
    return bound.decode(record.defining) == record.canonical


def fidelity_outcome(record: MappingRecord, bound: BoundEncoding) -> FidelityOutcome:
    """Classify one record against one destination encoding.

    Args:
        record: Mapping record from stage 1.
        bound: Destination to check.

    Returns:
        The fidelity outcome.
    """

    if record.undefined or record.kind is RecordKind.COMBINING:
        return FidelityOutcome.UNDEFINED
    if encodable(record, bound):
        if decodable(record, bound):
            return FidelityOutcome.ROUND_TRIPS
        return FidelityOutcome.ENCODE_ONLY
    if _decodes_from_defining(record, bound):
        return FidelityOutcome.DECODE_ONLY
    return FidelityOutcome.UNDEFINED


def check_fidelity(record: MappingRecord, encodings: EncodingSet) -> dict[str, FidelityOutcome]:
    """Compute the outcome for every available destination, in column order."""

    return {bound.key: fidelity_outcome(record, bound) for bound in encodings}
