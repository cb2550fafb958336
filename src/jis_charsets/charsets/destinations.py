"""Destination encodings and the codecs bound to them for one run.

Every record is encoded into each destination in :data:`DEFAULT_DESTINATIONS`
order. CPython codecs are used where one exists; IBM code pages are resolved
from mapping-table files when configured and are otherwise reported as
unavailable for the run.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from functools import cached_property
import logging
from pathlib import Path
from typing import Iterator, Mapping, Protocol, Sequence

from jis_charsets.charsets.kuten import kuten_to_sjis, word_to_bytes
from jis_charsets.charsets.table_codec import load_codepage_table
from jis_charsets.models import REPLACEMENT_CHARACTER

logger = logging.getLogger(__name__)

# Governing legacy decoders used to derive canonical strings.
SHIFT_JIS = "shift_jis"
SHIFT_JIS_2004 = "shift_jis_2004"
WINDOWS_31J = "cp932"
EUC_JP = "euc_jp"
ISO_2022_JP = "iso2022_jp_2"

ASCII_SUBSTITUTION = 0x3F
EBCDIC_SUBSTITUTION = 0x6F

POSITION = "position"
CONTENT = "content"


class Codec(Protocol):
    def encode(self, text: str) -> bytes: ...

    def decode(self, data: bytes) -> str: ...


@dataclass(frozen=True)
class PythonCodec:
    """Adapter over a registered Python codec with replacing error handlers."""

    name: str

    def encode(self, text: str) -> bytes:
        return text.encode(self.name, "replace")

    def decode(self, data: bytes) -> str:
        return data.decode(self.name, "replace")


# Rows of the IBM extension block (Shift_JIS FA40..FC4B).
IBM_EXTENSION_ROWS = range(115, 121)

# Lead bytes of the NEC-selected IBM extension rows (ED40..EEFC).
NEC_SELECTED_LEADS = (0xED, 0xEE)


@dataclass(frozen=True)
class Windows31JCodec(PythonCodec):
    """``cp932`` encoding characters duplicated in both IBM blocks the Windows way.

    Characters present both in the NEC-selected IBM extension rows and in the
    IBM extension rows encode to the IBM extension code. Decoding is plain
    ``cp932``.
    """

    name: str = WINDOWS_31J

    @cached_property
    def ibm_extension_codes(self) -> Mapping[str, bytes]:
        """Character -> IBM extension code for every NEC-selected duplicate."""

        preferred: dict[str, bytes] = {}
        for row in IBM_EXTENSION_ROWS:
            for col in range(1, 95):
                code = word_to_bytes(kuten_to_sjis(row, col), 2)
                text = code.decode(self.name, "replace")
                if len(text) != 1 or text == REPLACEMENT_CHARACTER or text in preferred:
                    continue
                if text.encode(self.name, "replace")[0] in NEC_SELECTED_LEADS:
                    preferred[text] = code
        return preferred

    def encode(self, text: str) -> bytes:
        code = self.ibm_extension_codes.get(text)
        if code is not None:
            return code
        return super().encode(text)


# Python codecs that need a dedicated adapter.
CODEC_ADAPTERS = {WINDOWS_31J: Windows31JCodec}


@dataclass(frozen=True)
class DestinationEncoding:
    """Static description of one destination encoding column.

    Attributes:
        key: Stable identifier used in outcome maps and CLI options.
        label: Column header in rendered reports.
        codec: Python codec name used for encoding (and decoding by default).
        check: ``position`` when encodability means reproducing the defining
            bytes, ``content`` when it means "no substitution byte".
        family: Byte family of the encoding; defining bytes of a record are only
            meaningful to destinations of the same family.
        decoder: Python codec name used for decoding when it differs.
        substitution: Substitution byte written for unmappable characters.
        ebcdic: Whether double-byte characters are framed by SO/SI.
    """

    key: str
    label: str
    codec: str
    check: str
    family: str
    decoder: str | None = None
    substitution: int = ASCII_SUBSTITUTION
    ebcdic: bool = False


DEFAULT_DESTINATIONS: tuple[DestinationEncoding, ...] = (
    DestinationEncoding("jis", "JIS2", ISO_2022_JP, CONTENT, "jis"),
    DestinationEncoding("euc", "EUC", EUC_JP, CONTENT, "euc"),
    # Shift_JIS output is read back with the JIS X 0213 decoder.
    DestinationEncoding("sjis", "SJIS", SHIFT_JIS, POSITION, "sjis", decoder=SHIFT_JIS_2004),
    DestinationEncoding("sjis2004", "2004", SHIFT_JIS_2004, POSITION, "sjis"),
    DestinationEncoding("w31j", "W31J", WINDOWS_31J, POSITION, "sjis"),
    DestinationEncoding("i942", "I942", "ibm942", CONTENT, "sjis"),
    DestinationEncoding("i943", "I943", "ibm943", CONTENT, "sjis"),
    DestinationEncoding(
        "i930", "I930", "ibm930", CONTENT, "ebcdic", substitution=EBCDIC_SUBSTITUTION, ebcdic=True
    ),
    DestinationEncoding(
        "i939", "I939", "ibm939", CONTENT, "ebcdic", substitution=EBCDIC_SUBSTITUTION, ebcdic=True
    ),
)


@dataclass(frozen=True)
class BoundEncoding:
    """A destination together with the codecs resolved for this run."""

    destination: DestinationEncoding
    encoder: Codec
    decoder: Codec
    source: str

    @property
    def key(self) -> str:
        return self.destination.key

    def encode(self, text: str) -> bytes:
        return self.encoder.encode(text)

    def decode(self, data: bytes) -> str:
        return self.decoder.decode(data)


@dataclass(frozen=True)
class EncodingSet:
    """Ordered destination encodings available for one run.

    Attributes:
        bound: Destinations with a resolved codec, in column order.
        unavailable: Destinations without any codec; rendered as empty columns.
    """

    bound: tuple[BoundEncoding, ...]
    unavailable: tuple[DestinationEncoding, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[BoundEncoding]:
        return iter(self.bound)

    def __contains__(self, key: object) -> bool:
        return any(item.key == key for item in self.bound)

    def get(self, key: str) -> BoundEncoding | None:
        for item in self.bound:
            if item.key == key:
                return item
        return None

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(item.key for item in self.bound)


def _python_codec_available(name: str) -> bool:
    try:
        codecs.lookup(name)
    except LookupError:
        return False
    return True


def _bind(destination: DestinationEncoding, table_path: Path | None) -> BoundEncoding | None:
    if table_path is not None:
        table = load_codepage_table(
            table_path,
            substitution=destination.substitution,
            shift_framing=destination.ebcdic,
        )
        return BoundEncoding(destination, encoder=table, decoder=table, source=str(table_path))

    if not _python_codec_available(destination.codec):
        return None
    decoder_name = destination.decoder or destination.codec
    adapter = CODEC_ADAPTERS.get(destination.codec, PythonCodec)
    return BoundEncoding(
        destination,
        encoder=adapter(destination.codec),
        decoder=PythonCodec(decoder_name),
        source=destination.codec,
    )


def resolve_encodings(
    tables: Mapping[str, Path] | None = None,
    destinations: Sequence[DestinationEncoding] = DEFAULT_DESTINATIONS,
) -> EncodingSet:
    """Bind each destination to a codec.

    Args:
        tables: Optional destination key -> mapping-table path; a table takes
            precedence over a Python codec of the same name.
        destinations: Destination encodings in column order.

    Returns:
        ``EncodingSet`` of bound and unavailable destinations.

    Raises:
        KeyError: If ``tables`` names an unknown destination key.
        FileNotFoundError: If a configured table file does not exist.
    """

    tables = dict(tables or {})
    known = {destination.key for destination in destinations}
    unknown = sorted(set(tables) - known)
    if unknown:
        raise KeyError(f"Unknown destination encoding(s): {', '.join(unknown)}")

    bound: list[BoundEncoding] = []
    unavailable: list[DestinationEncoding] = []
    for destination in destinations:
        item = _bind(destination, tables.get(destination.key))
        if item is None:
            logger.info(
                "No codec for %s (%s); column left empty", destination.label, destination.codec
            )
            unavailable.append(destination)
            continue
        bound.append(item)

    return EncodingSet(bound=tuple(bound), unavailable=tuple(unavailable))
