"""Signature matching and reverse type identification.

Examples
--------
>>> from pathlib import Path
>>> from magicverify.core.signatures import load_signature_table
>>> table = load_signature_table({".png": "89504E47", ".jpg": "FFD8FF"})
>>> ok = match_header(Path("a.png"), bytes.fromhex("89504E470D0A1A0A"), table)
>>> ok.passed, ok.actual_magic, ok.identified_extension
(True, '89504E47', '.png')
>>> renamed = match_header(Path("x.png"), bytes.fromhex("FFD8FF00"), table, identify=True)
>>> renamed.passed, renamed.identified_extension
(False, '.jpg')
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .signatures import SignatureTable
from .types import NOT_APPLICABLE, UNKNOWN_EXTENSION, MatchResult

logger = logging.getLogger(__name__)


def header_hex(sample: bytes, length: int) -> str:
    """Return the first ``length`` bytes of ``sample`` as uppercase hex.

    ``"N/A"`` is returned when ``sample`` is shorter than ``length``.
    """

    if length <= 0 or len(sample) < length:
        return NOT_APPLICABLE
    return sample[:length].hex().upper()


def identify_extension(sample: bytes, table: SignatureTable) -> Optional[str]:
    """Return the extension whose signature prefixes ``sample``, if any.

    Candidates are tried longest signature first, then in configuration
    order, so the outcome does not depend on incidental dict ordering.
    """

    for extension, signature in table.identification_order():
        if sample.startswith(signature):
            return extension
    return None


def match_header(
    path: Path,
    sample: bytes,
    table: SignatureTable,
    *,
    identify: bool = False,
    extension: Optional[str] = None,
) -> MatchResult:
    """Compare ``sample`` (the file's leading bytes) against ``table``.

    Args:
        path: File the sample was read from. Only used for reporting and,
            when ``extension`` is omitted, to derive the extension.
        sample: Leading bytes of the file. Callers read
            ``table.max_signature_bytes`` bytes so every comparison and every
            identification candidate can be evaluated.
        table: Validated signature table.
        identify: Attempt reverse identification when the file fails its
            expected signature or its extension is unlisted.
        extension: Explicit extension override.
    """

    path = Path(path)
    if extension is None:
        extension = path.suffix
    result = MatchResult(
        path=path,
        extension=extension,
        actual_magic=header_hex(sample, table.max_signature_bytes),
    )

    expected = table.lookup(extension)
    if expected is not None:
        result.expected_magic = expected
        signature = table.signature_bytes(extension)
        # A sample shorter than the signature can never match.
        result.passed = signature is not None and sample.startswith(signature)
        if result.passed:
            result.identified_extension = extension

    if identify and not result.passed:
        identified = identify_extension(sample, table)
        if identified is not None:
            result.identified_extension = identified

    logger.debug(
        "%s: expected=%s actual=%s pass=%s identified=%s",
        path,
        result.expected_magic,
        result.actual_magic,
        result.pass_label,
        result.identified_extension,
    )
    return result


class Matcher:
    """Binds a signature table and identification flag for repeated matching."""

    def __init__(self, table: SignatureTable, *, identify: bool = False) -> None:
        self._table = table
        self._identify = identify

    @property
    def table(self) -> SignatureTable:
        return self._table

    @property
    def identify(self) -> bool:
        return self._identify

    def needs_read(self, extension: str) -> bool:
        """Return ``True`` when matching ``extension`` requires header bytes."""

        return self._identify or extension in self._table

    def match(self, path: Path, sample: bytes, *, extension: Optional[str] = None) -> MatchResult:
        return match_header(
            path,
            sample,
            self._table,
            identify=self._identify,
            extension=extension,
        )

    def unread(self, path: Path, *, extension: Optional[str] = None) -> MatchResult:
        """Result for a file that is reported without touching the disk."""

        path = Path(path)
        return MatchResult(
            path=path,
            extension=path.suffix if extension is None else extension,
            identified_extension=UNKNOWN_EXTENSION,
        )
