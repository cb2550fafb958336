"""Unit tests for destination encoding resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from jis_charsets.charsets.destinations import (
    CONTENT,
    DEFAULT_DESTINATIONS,
    DestinationEncoding,
    PythonCodec,
    Windows31JCodec,
    resolve_encodings,
)


def test_python_codecs_bind_and_ibm_pages_are_unavailable() -> None:
    """Without mapping tables only the CPython-backed destinations bind."""

    encodings = resolve_encodings()

    assert encodings.keys == ("jis", "euc", "sjis", "sjis2004", "w31j")
    assert [destination.key for destination in encodings.unavailable] == [
        "i942",
        "i943",
        "i930",
        "i939",
    ]
    assert "w31j" in encodings
    assert "i943" not in encodings
    assert encodings.get("i943") is None


def test_sjis_destination_decodes_with_jisx0213_decoder() -> None:
    """Shift_JIS output is read back with the Shift_JIS-2004 decoder."""

    sjis = resolve_encodings().get("sjis")
    assert sjis is not None
    assert sjis.encoder == PythonCodec("shift_jis")
    assert sjis.decoder == PythonCodec("shift_jis_2004")


def test_python_codec_replaces_unmappable_characters() -> None:
    codec = PythonCodec("shift_jis")
    assert codec.encode("亜") == b"\x88\x9f"
    assert codec.encode("\U00020089") == b"?"
    assert codec.decode(b"\x80") == "\ufffd"


def test_windows31j_codec_prefers_ibm_extension_codes() -> None:
    """Characters in both IBM blocks encode to the IBM extension code, not ED/EE."""

    codec = Windows31JCodec()

    assert codec.encode("纊") == b"\xfa\x5c"
    assert codec.encode("ⅰ") == b"\xfa\x40"
    assert codec.encode("亜") == b"\x88\x9f"
    assert codec.decode(b"\xed\x40") == "纊"
    assert all(code[0] in (0xFA, 0xFB, 0xFC) for code in codec.ibm_extension_codes.values())


def test_w31j_destination_binds_windows31j_codec() -> None:
    w31j = resolve_encodings().get("w31j")
    assert w31j is not None
    assert w31j.encoder == Windows31JCodec()
    assert w31j.decoder == PythonCodec("cp932")


def test_codepage_table_binds_unavailable_destination(tmp_path: Path) -> None:
    """A mapping table binds an IBM destination that has no CPython codec."""

    table = tmp_path / "ibm930.txt"
    table.write_text("0xC1 0x0041\n0x4550 0x4E9C\n", encoding="utf-8")

    encodings = resolve_encodings({"i930": table})

    i930 = encodings.get("i930")
    assert i930 is not None
    assert i930.source == str(table)
    assert i930.encode("A亜") == b"\xc1\x0e\x45\x50\x0f"
    assert i930.decode(b"\x0e\x45\x50\x0f") == "亜"
    assert "i930" not in [destination.key for destination in encodings.unavailable]


def test_unknown_table_key_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(KeyError):
        resolve_encodings({"ibm1047": tmp_path / "x.txt"})


def test_missing_table_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        resolve_encodings({"i943": tmp_path / "missing.txt"})


def test_custom_destinations_keep_order() -> None:
    destinations = (
        DestinationEncoding("ebcdic", "E037", "cp037", CONTENT, "ebcdic", substitution=0x6F),
        DEFAULT_DESTINATIONS[0],
    )
    encodings = resolve_encodings(destinations=destinations)
    assert encodings.keys == ("ebcdic", "jis")
    assert encodings.get("ebcdic").encode("?") == b"\x6f"
