"""Signature table loading and validation.

The table maps lowercase extensions (with the leading dot) to the uppercase
hex signature expected at the start of matching files. It is validated once
when loaded and treated as read-only for the rest of the run.

Example
-------
>>> table = load_signature_table({".png": "89504e47", "jpg": "FF D8 FF"})
>>> table.lookup(".PNG")
'89504E47'
>>> table.lookup(".jpg")
'FFD8FF'
>>> table.max_signature_bytes
4
"""

from __future__ import annotations

import json
import logging
import re
import string
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from .types import ConfigError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_HEX_DIGITS = frozenset(string.hexdigits)


def normalise_extension(raw: str) -> str:
    """Return ``raw`` lowercased with a single leading dot.

    An empty string stays empty so extension-less files never match an entry.
    """

    text = raw.strip().lower()
    if not text:
        return ""
    if not text.startswith("."):
        text = f".{text}"
    return text


def _normalise_key(raw: object) -> str:
    if not isinstance(raw, str):
        raise ConfigError(f"Extension keys must be strings, got {type(raw).__name__}.")
    extension = normalise_extension(raw)
    if extension in ("", "."):
        raise ConfigError("Extension keys cannot be empty.")
    return extension


def _normalise_hex(extension: str, raw: object) -> str:
    if not isinstance(raw, str):
        raise ConfigError(
            f"Signature for {extension} must be a hex string, got {type(raw).__name__}."
        )
    collapsed = _WHITESPACE.sub("", raw)
    if not collapsed:
        raise ConfigError(f"Signature for {extension} cannot be empty.")
    if any(char not in _HEX_DIGITS for char in collapsed):
        raise ConfigError(f"Signature for {extension} is not hexadecimal: {raw!r}")
    if len(collapsed) % 2:
        raise ConfigError(
            f"Signature for {extension} must have an even number of hex digits: {raw!r}"
        )
    return collapsed.upper()


class SignatureTable:
    """Validated, immutable extension to signature mapping."""

    def __init__(self, entries: Sequence[Tuple[str, str]]) -> None:
        if not entries:
            raise ConfigError("Signature table must contain at least one entry.")
        hex_by_extension: Dict[str, str] = {}
        for extension, expected_hex in entries:
            if extension in hex_by_extension:
                raise ConfigError(f"Duplicate signature entry for {extension}.")
            hex_by_extension[extension] = expected_hex
        self._hex = hex_by_extension
        self._bytes = {
            extension: bytes.fromhex(expected_hex)
            for extension, expected_hex in hex_by_extension.items()
        }
        self._max_signature_bytes = max(len(value) for value in self._bytes.values())
        # Longest signature first; equal lengths keep insertion order.
        self._identification_order: Tuple[Tuple[str, bytes], ...] = tuple(
            sorted(self._bytes.items(), key=lambda item: -len(item[1]))
        )

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]]) -> "SignatureTable":
        if raw is None:
            raise ConfigError("No signature configuration was provided.")
        if not isinstance(raw, Mapping):
            raise ConfigError(
                "Signature configuration must be a mapping of extension to hex signature."
            )
        entries: List[Tuple[str, str]] = []
        for key, value in raw.items():
            extension = _normalise_key(key)
            entries.append((extension, _normalise_hex(extension, value)))
        return cls(entries)

    def lookup(self, extension: str) -> Optional[str]:
        return self._hex.get(normalise_extension(extension))

    def signature_bytes(self, extension: str) -> Optional[bytes]:
        return self._bytes.get(normalise_extension(extension))

    @property
    def max_signature_bytes(self) -> int:
        return self._max_signature_bytes

    def identification_order(self) -> Tuple[Tuple[str, bytes], ...]:
        """Return candidates in the order reverse identification tries them."""

        return self._identification_order

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self._hex.items())

    def to_dict(self) -> Dict[str, str]:
        return dict(self._hex)

    def __contains__(self, extension: object) -> bool:
        if not isinstance(extension, str):
            return False
        return normalise_extension(extension) in self._hex

    def __iter__(self) -> Iterator[str]:
        return iter(self._hex)

    def __len__(self) -> int:
        return len(self._hex)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return (
            f"SignatureTable(entries={len(self)}, "
            f"max_signature_bytes={self._max_signature_bytes})"
        )


def load_signature_table(raw: Optional[Mapping[str, Any]]) -> SignatureTable:
    """Validate ``raw`` and return a :class:`SignatureTable`."""

    table = SignatureTable.from_mapping(raw)
    logger.debug(
        "Loaded %s signature(s); reading %s header byte(s) per file",
        len(table),
        table.max_signature_bytes,
    )
    return table


def _reject_duplicate_keys(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {}
    for key, value in pairs:
        if key in payload:
            raise ConfigError(f"Duplicate key in signature configuration: {key!r}")
        payload[key] = value
    return payload


def load_signature_file(path: Path) -> SignatureTable:
    """Read a JSON object of extension to hex signature from ``path``."""

    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Signature configuration not found: {path}")
    try:
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Unable to read signature configuration {path}: {exc}") from exc
    try:
        payload = json.loads(text, object_pairs_hook=_reject_duplicate_keys)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError(f"{path} must contain a JSON object at the top level.")
    logger.info("Loading signature configuration from %s", path)
    return load_signature_table(payload)
