"""CSV table writer for signature reports.

Each call to :meth:`CsvTableWriter.write_batch` commits one batch of rows.
Overwrite batches go through a temporary file in the destination directory
that replaces the target only once fully written, and append batches are
rendered in memory before the target is opened, so a failure never leaves a
half-written batch behind.
"""

from __future__ import annotations

import csv
import io
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, Sequence

from ..core.types import REPORT_COLUMNS, MatchResult, WriteError

logger = logging.getLogger(__name__)

__all__ = ["CsvTableWriter", "render_csv"]


def render_csv(results: Iterable[MatchResult], *, include_header: bool) -> str:
    """Return ``results`` as CSV text."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    if include_header:
        writer.writerow(REPORT_COLUMNS)
    for result in results:
        writer.writerow(result.to_row())
    return buffer.getvalue()


def _needs_header(path: Path) -> bool:
    try:
        return path.stat().st_size == 0
    except FileNotFoundError:
        return True
    except OSError as exc:
        raise WriteError(path, str(exc)) from exc


def _target_mode(path: Path) -> int:
    """Mode the replaced file should carry: the existing target's, else umask default."""

    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def replace_atomically(path: Path, payload: str) -> None:
    """Write ``payload`` to a sibling temporary file and move it over ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _target_mode(path)
    fd, temp_name = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(payload)
        # mkstemp always creates 0600.
        os.chmod(temp_name, mode)
        os.replace(temp_name, path)
    except BaseException:
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        raise


class CsvTableWriter:
    """Persist match results as CSV with a single header row."""

    format_name = "csv"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def write_batch(self, results: Sequence[MatchResult], *, append: bool) -> None:
        """Write ``results``, appending to or replacing the target file."""

        try:
            if append:
                payload = render_csv(results, include_header=_needs_header(self.path))
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8", newline="") as handle:
                    handle.write(payload)
            else:
                replace_atomically(self.path, render_csv(results, include_header=True))
        except OSError as exc:
            raise WriteError(self.path, str(exc)) from exc
        logger.debug(
            "%s %s row(s) to %s",
            "Appended" if append else "Wrote",
            len(results),
            self.path,
        )
