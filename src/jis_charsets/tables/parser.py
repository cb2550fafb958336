"""Parsing utilities for the variant table and the kanji-usage table."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator

import regex

from jis_charsets.errors import LookupParseSkipped
from jis_charsets.models import VariantEntry

logger = logging.getLogger(__name__)

VARIANT_LINE_RE = re.compile(r" *U\+(\S+) +U\+(\S+)(?: +U\+(\S+))?(?: +([^#\s]+))?.*")
KANJI_LINE_RE = re.compile(r"(\d) (\S+)")
GRAPHEME_RE = regex.compile(r"\X")

# Entries at this usage level replace any earlier entry for the same character.
OVERRIDING_LEVEL = "3"


def code_point_to_string(value: str) -> str:
    """Convert a hex code point such as ``4E9C`` to its one-character string.

    Raises:
        ValueError: If ``value`` is not a valid hex scalar value.
    """

    return chr(int(value, 16))


def parse_variant_line(line_number: int, line: str) -> tuple[str, VariantEntry]:
    """Parse one variant-table line.

    The line lists a key code point, one or two alternate code points that are
    concatenated (e.g. a base character plus a variation selector), and an
    optional annotation token; anything after that is ignored.

    Args:
        line_number: 1-based line number for diagnostics.
        line: Raw line without the trailing newline.

    Returns:
        ``(key, VariantEntry)`` pair.

    Raises:
        LookupParseSkipped: If the line does not describe a variant.
    """

    match = VARIANT_LINE_RE.fullmatch(line)
    if not match:
        raise LookupParseSkipped(line_number, line)
    key_cp, alt_cp, alt2_cp, note = match.groups()
    try:
        key = code_point_to_string(key_cp)
        alternate = code_point_to_string(alt_cp)
        if alt2_cp is not None:
            alternate += code_point_to_string(alt2_cp)
    except ValueError as exc:
        raise LookupParseSkipped(line_number, line) from exc
    return key, VariantEntry(alternate=alternate, note=note)


def parse_variant_lines(lines: Iterable[str]) -> dict[str, VariantEntry]:
    """Parse variant-table lines into a key -> entry mapping.

    Malformed lines are skipped; a later line for the same key replaces an
    earlier one.
    """

    mapping: dict[str, VariantEntry] = {}
    for line_number, line in enumerate(lines, start=1):
        try:
            key, entry = parse_variant_line(line_number, line.rstrip("\r\n"))
        except LookupParseSkipped as exc:
            logger.debug("Skipping variant table %s", exc)
            continue
        mapping[key] = entry
    return mapping


def split_graphemes(text: str) -> Iterator[str]:
    """Yield extended grapheme clusters, keeping ideographic variation sequences whole."""

    for match in GRAPHEME_RE.finditer(text):
        yield match.group(0)


def parse_kanji_level_lines(lines: Iterable[str]) -> dict[str, str]:
    """Parse kanji-usage lines of the form ``<digit> <characters>``.

    Each grapheme in ``<characters>`` is keyed to ``<digit>``. The first entry
    for a character wins, except that :data:`OVERRIDING_LEVEL` entries always
    replace what is already present.

    Args:
        lines: Raw table lines.

    Returns:
        Mapping of character (grapheme) to usage-level digit.
    """

    mapping: dict[str, str] = {}
    for line_number, line in enumerate(lines, start=1):
        line = line.rstrip("\r\n")
        match = KANJI_LINE_RE.fullmatch(line)
        if not match:
            logger.debug("Skipping kanji table %s", LookupParseSkipped(line_number, line))
            continue
        level, characters = match.groups()
        for grapheme in split_graphemes(characters):
            if level == OVERRIDING_LEVEL or grapheme not in mapping:
                mapping[grapheme] = level
    return mapping
