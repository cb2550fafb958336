"""Read-only repositories for the exception tables consumed by the sweep."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from jis_charsets.models import VariantEntry
from jis_charsets.tables.parser import parse_kanji_level_lines, parse_variant_lines


def _read_lines(path: Path, label: str) -> list[str]:
    if not path.exists():
        raise FileNotFoundError(f"{label} file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        return handle.readlines()


@dataclass(frozen=True)
class VariantRepository:
    """Character -> variant lookup loaded once from ``variants.txt``.

    A repository without a path is empty; a configured path must exist.
    """

    path: Path | None = None

    @cached_property
    def entries(self) -> Mapping[str, VariantEntry]:
        """Load and cache the variant table as an immutable mapping.

        Raises:
            FileNotFoundError: If the configured file does not exist.
        """

        if self.path is None:
            return MappingProxyType({})
        return MappingProxyType(parse_variant_lines(_read_lines(self.path, "Variant table")))


@dataclass(frozen=True)
class KanjiLevelRepository:
    """Character -> kanji-usage digit lookup loaded once from ``kanji.txt``."""

    path: Path | None = None

    @cached_property
    def levels(self) -> Mapping[str, str]:
        """Load and cache the kanji-usage table as an immutable mapping.

        Raises:
            FileNotFoundError: If the configured file does not exist.
        """

        if self.path is None:
            return MappingProxyType({})
        return MappingProxyType(parse_kanji_level_lines(_read_lines(self.path, "Kanji table")))
