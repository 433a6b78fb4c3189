"""Newline-delimited JSON writer for signature reports.

The JSON lines output mirrors the CSV columns but keeps native types, so
``passed`` is a boolean (or ``null`` for unlisted extensions) and unreadable
files carry their ``error`` reason. There is no header record; every line is
self-describing, which keeps appended batches valid.
"""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator, Sequence, TextIO

from ..core.types import MatchResult, WriteError
from .csv_table import replace_atomically

logger = logging.getLogger(__name__)

__all__ = ["JsonLinesWriter", "iter_json_records", "render_json_lines", "write_json_lines"]


def iter_json_records(results: Iterable[MatchResult]) -> Iterator[dict[str, Any]]:
    """Yield JSON-compatible records for ``results``."""

    for result in results:
        yield result.to_dict()


def render_json_lines(results: Iterable[MatchResult], *, sort_keys: bool = True) -> str:
    """Return newline-delimited JSON, one line per result, newline terminated."""

    buffer = io.StringIO()
    write_json_lines(results, buffer, sort_keys=sort_keys)
    return buffer.getvalue()


def write_json_lines(
    results: Iterable[MatchResult],
    stream: TextIO,
    *,
    sort_keys: bool = True,
) -> None:
    """Write newline-delimited JSON to ``stream``."""

    for record in iter_json_records(results):
        stream.write(json.dumps(record, ensure_ascii=False, sort_keys=sort_keys))
        stream.write("\n")


class JsonLinesWriter:
    """Persist match results as newline-delimited JSON."""

    format_name = "jsonl"

    def __init__(self, path: Path, *, sort_keys: bool = True) -> None:
        self.path = Path(path)
        self._sort_keys = sort_keys

    def write_batch(self, results: Sequence[MatchResult], *, append: bool) -> None:
        payload = render_json_lines(results, sort_keys=self._sort_keys)
        try:
            if append:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with self.path.open("a", encoding="utf-8") as handle:
                    handle.write(payload)
            else:
                replace_atomically(self.path, payload)
        except OSError as exc:
            raise WriteError(self.path, str(exc)) from exc
        logger.debug("Wrote %s JSON record(s) to %s", len(results), self.path)
