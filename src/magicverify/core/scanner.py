"""Scan orchestration for magicverify.

The :class:`Scanner` walks a file or directory tree, reads only the header
bytes the signature table needs, runs the matcher and feeds a
:class:`~magicverify.reporting.sink.ResultSink`. Files are processed one at a
time in a deterministic order.

Examples
--------
>>> import tempfile
>>> from pathlib import Path
>>> from magicverify.core.signatures import load_signature_table
>>> root = Path(tempfile.mkdtemp())
>>> _ = (root / "a.png").write_bytes(bytes.fromhex("89504E470D0A1A0A"))
>>> scanner = Scanner(load_signature_table({".png": "89504E47"}))
>>> [result.passed for result in scanner.iter_results(root)]
[True]
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Union

from ..reporting.sink import DEFAULT_BATCH_SIZE, ResultSink, validate_batch_size
from ..reporting.summary import ScanSummary
from .matcher import Matcher
from .signatures import SignatureTable, load_signature_file, load_signature_table
from .types import (
    MagicVerifyError,
    MatchResult,
    PathNotFoundError,
    ReadError,
)

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[Path, ReadError], None]


class ScanState(str, enum.Enum):
    INIT = "init"
    LOADING_CONFIG = "loading-config"
    SCANNING = "scanning"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ScanOptions:
    """Flags controlling a scan.

    Attributes:
        recursive: Descend into subdirectories in tree mode.
        identify: Attempt reverse identification for failed or unlisted files.
        skip_unknown: Drop files whose extension is not in the table without
            reading them.
        batch_size: Results buffered before the sink flushes.
        append: Append to an existing report instead of replacing it.
        fail_fast: Abort the run on the first unreadable file instead of
            reporting it as an error row.
    """

    recursive: bool = False
    identify: bool = False
    skip_unknown: bool = False
    batch_size: int = DEFAULT_BATCH_SIZE
    append: bool = False
    fail_fast: bool = False

    def __post_init__(self) -> None:
        validate_batch_size(self.batch_size)


def _wrap_io_error(path: Path, exc: OSError) -> ReadError:
    """Convert an ``OSError`` into ``ReadError``."""

    return ReadError(path=Path(path), reason=exc.strerror or str(exc))


def iter_files(root: Path, *, recursive: bool = False) -> Iterator[Path]:
    """Lazily yield regular files below ``root``.

    Entries are sorted by name per directory and a directory's files come
    before its subdirectories. Symlinked directories are not followed.
    Subdirectories that cannot be listed are logged and skipped; an
    unreadable ``root`` raises :class:`ReadError`.
    """

    root = Path(root)
    try:
        entries = sorted(root.iterdir())
    except OSError as exc:
        raise _wrap_io_error(root, exc) from exc
    yield from _walk(entries, recursive=recursive)


def _walk(entries: list[Path], *, recursive: bool) -> Iterator[Path]:
    directories: list[Path] = []
    for entry in entries:
        try:
            if entry.is_file():
                yield entry
            elif recursive and entry.is_dir() and not entry.is_symlink():
                directories.append(entry)
        except OSError as exc:
            logger.warning("Unable to stat %s: %s", entry, exc)
    for directory in directories:
        try:
            children = sorted(directory.iterdir())
        except OSError as exc:
            logger.warning("Skipping unreadable directory %s: %s", directory, exc)
            continue
        yield from _walk(children, recursive=recursive)


class Scanner:
    """Drives a signature scan from path enumeration to batched output."""

    def __init__(
        self,
        signatures: Optional[SignatureTable] = None,
        options: Optional[ScanOptions] = None,
        *,
        on_error: Optional[ErrorHandler] = None,
    ) -> None:
        """Create a scanner.

        Args:
            signatures: Pre-loaded signature table. When omitted call
                :meth:`load_signatures` before scanning.
            options: Scan flags; defaults to :class:`ScanOptions()`.
            on_error: Optional callback invoked with ``(path, ReadError)``
                when a file cannot be read.
        """

        self._options = options or ScanOptions()
        self._on_error = on_error
        self._table: Optional[SignatureTable] = None
        self._matcher: Optional[Matcher] = None
        self.state = ScanState.INIT
        self.summary = ScanSummary()
        if signatures is not None:
            self._bind(signatures)

    @property
    def options(self) -> ScanOptions:
        return self._options

    @property
    def signatures(self) -> SignatureTable:
        if self._table is None:
            raise RuntimeError("Signature table has not been loaded")
        return self._table

    def _bind(self, table: SignatureTable) -> None:
        self._table = table
        self._matcher = Matcher(table, identify=self._options.identify)

    def _transition(self, state: ScanState) -> None:
        logger.info("Scan state %s -> %s", self.state.value, state.value)
        self.state = state

    def load_signatures(
        self, source: Union[Path, str, Mapping[str, Any], None]
    ) -> SignatureTable:
        """Load the signature table from a JSON file path or a mapping."""

        self._transition(ScanState.LOADING_CONFIG)
        try:
            if isinstance(source, (str, Path)):
                table = load_signature_file(Path(source))
            else:
                table = load_signature_table(source)
        except MagicVerifyError:
            self._transition(ScanState.FAILED)
            raise
        self._bind(table)
        return table

    def read_header(self, path: Path) -> bytes:
        """Return up to ``max_signature_bytes`` leading bytes of ``path``."""

        size = self.signatures.max_signature_bytes
        try:
            with Path(path).open("rb") as handle:
                return handle.read(size)
        except OSError as exc:
            raise _wrap_io_error(path, exc) from exc

    def _handle_error(self, path: Path, error: ReadError) -> None:
        if self._on_error is not None:
            try:
                self._on_error(path, error)
            except Exception:  # pragma: no cover - defensive
                logger.exception("on_error handler raised during scan")

    def scan_file(self, path: Path) -> MatchResult:
        """Match a single file, reading its header only when needed."""

        path = Path(path)
        matcher = self._matcher
        if matcher is None:
            raise RuntimeError("Signature table has not been loaded")
        if not matcher.needs_read(path.suffix):
            logger.debug("Unlisted extension, not reading %s", path)
            return matcher.unread(path)
        try:
            sample = self.read_header(path)
        except ReadError as error:
            self._handle_error(path, error)
            if self._options.fail_fast:
                raise
            logger.warning("Unable to read %s: %s", path, error.reason)
            result = matcher.unread(path)
            expected = self.signatures.lookup(path.suffix)
            if expected is not None:
                result.expected_magic = expected
            result.error = error.reason
            return result
        return matcher.match(path, sample)

    def _should_skip(self, path: Path) -> bool:
        return self._options.skip_unknown and path.suffix not in self.signatures

    def iter_results(
        self, root: Path, *, exclude: Iterable[Path] = ()
    ) -> Iterator[MatchResult]:
        """Yield one result per scanned file below ``root``.

        Files whose resolved path is in ``exclude`` are left out of tree
        scans. A root that is neither a file nor a directory raises
        :class:`ReadError`.
        """

        root = Path(root)
        if root.is_file():
            yield self.scan_file(root)
            return
        if not root.exists():
            raise PathNotFoundError(root)
        if not root.is_dir():
            raise ReadError(root, "Not a regular file or directory")
        excluded = {Path(path).resolve() for path in exclude}
        for path in iter_files(root, recursive=self._options.recursive):
            if excluded and path.resolve() in excluded:
                logger.debug("Skipping report file: %s", path)
                continue
            if self._should_skip(path):
                logger.debug("Skipping unlisted extension: %s", path)
                self.summary.record_skip()
                continue
            yield self.scan_file(path)

    def run(self, root: Path, sink: ResultSink) -> ScanSummary:
        """Scan ``root`` and feed every result into ``sink``.

        A single file is treated as a batch of one and finalised immediately.
        On failure the scanner ends in :attr:`ScanState.FAILED` and the error
        propagates.
        """

        root = Path(root)
        self.summary = ScanSummary()
        try:
            if not root.exists():
                raise PathNotFoundError(root)
            if self._matcher is None:
                raise RuntimeError("Signature table has not been loaded")
            self._transition(ScanState.SCANNING)
            logger.info("Scanning %s", root)
            report = Path(sink.writer.path)
            for result in self.iter_results(root, exclude=(report,)):
                self.summary.record(result)
                sink.offer(result)
                sink.flush_if_due()
            self._transition(ScanState.FINALIZING)
            sink.finalize()
        except BaseException:
            self._transition(ScanState.FAILED)
            raise
        self._transition(ScanState.DONE)
        logger.info("%s", self.summary.render())
        return self.summary


def scan_path(
    root: Path,
    signatures: Union[SignatureTable, Mapping[str, Any]],
    *,
    recursive: bool = False,
    identify: bool = False,
    skip_unknown: bool = False,
    on_error: Optional[ErrorHandler] = None,
) -> list[MatchResult]:
    """Convenience wrapper returning every result of a scan as a list."""

    table = (
        signatures
        if isinstance(signatures, SignatureTable)
        else load_signature_table(signatures)
    )
    scanner = Scanner(
        table,
        ScanOptions(recursive=recursive, identify=identify, skip_unknown=skip_unknown),
        on_error=on_error,
    )
    return list(scanner.iter_results(Path(root)))
