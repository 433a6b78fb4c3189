"""Built-in signature catalog.

A starter set of well-known leading-byte signatures, used when no
configuration file is supplied (``magicverify --builtin``). Formats that
share a container signature (the Office Open XML family and ZIP, for
example) all map to the same bytes; reverse identification resolves such
ties to the entry listed first, so ``.zip`` is placed ahead of its
derivatives.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .core.signatures import SignatureTable, load_signature_table

__all__ = ["BUILTIN_SIGNATURES", "builtin_table"]

BUILTIN_SIGNATURES: Mapping[str, str] = MappingProxyType(
    {
        # Images
        ".png": "89504E470D0A1A0A",
        ".jpg": "FFD8FF",
        ".jpeg": "FFD8FF",
        ".gif": "47494638",
        ".bmp": "424D",
        ".tif": "49492A00",
        ".tiff": "49492A00",
        ".ico": "00000100",
        ".psd": "38425053",
        ".webp": "52494646",
        # Documents
        ".pdf": "255044462D",
        ".rtf": "7B5C72746631",
        ".doc": "D0CF11E0A1B11AE1",
        ".xls": "D0CF11E0A1B11AE1",
        ".ppt": "D0CF11E0A1B11AE1",
        # Archives
        ".zip": "504B0304",
        ".docx": "504B0304",
        ".xlsx": "504B0304",
        ".pptx": "504B0304",
        ".jar": "504B0304",
        ".gz": "1F8B",
        ".bz2": "425A68",
        ".xz": "FD377A585A00",
        ".7z": "377ABCAF271C",
        ".rar": "526172211A07",
        # Media
        ".mp3": "494433",
        ".flac": "664C6143",
        ".ogg": "4F676753",
        ".wav": "52494646",
        ".avi": "52494646",
        ".mkv": "1A45DFA3",
        # Executables and databases
        ".exe": "4D5A",
        ".dll": "4D5A",
        ".elf": "7F454C46",
        ".class": "CAFEBABE",
        ".sqlite": "53514C69746520666F726D6174203300",
        ".db": "53514C69746520666F726D6174203300",
    }
)


def builtin_table() -> SignatureTable:
    """Return the built-in catalog as a validated :class:`SignatureTable`."""

    return load_signature_table(BUILTIN_SIGNATURES)
