"""Batched result emission.

:class:`ResultSink` keeps at most ``batch_size`` results in memory and hands
full batches to a table writer. The first batch of a run replaces the target
(unless appending to an existing report was requested) and every later batch
appends, so the report carries exactly one header row no matter how many
flushes happen.

Example
-------
>>> class ListWriter:
...     path = "memory"
...     def __init__(self):
...         self.calls = []
...     def write_batch(self, results, *, append):
...         self.calls.append((len(results), append))
>>> writer = ListWriter()
>>> from pathlib import Path
>>> from magicverify.core.types import MatchResult
>>> with ResultSink(writer, batch_size=2) as sink:
...     for name in ("a", "b", "c"):
...         sink.offer(MatchResult(path=Path(name), extension=""))
...         _ = sink.flush_if_due()
>>> writer.calls
[(2, False), (1, True)]
"""

from __future__ import annotations

import logging
from pathlib import Path
from types import TracebackType
from typing import List, Optional, Protocol, Sequence, Type, Union

from ..core.types import MatchResult, WriteError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100

__all__ = ["DEFAULT_BATCH_SIZE", "ResultSink", "TableWriter", "validate_batch_size"]


class TableWriter(Protocol):
    """Protocol implemented by report writers."""

    path: Union[Path, str]

    def write_batch(self, results: Sequence[MatchResult], *, append: bool) -> None:
        ...


def validate_batch_size(batch_size: int) -> int:
    if isinstance(batch_size, bool) or not isinstance(batch_size, int) or batch_size <= 0:
        raise ValueError("batch_size must be a positive integer")
    return batch_size


class ResultSink:
    """Accumulates match results and flushes them to a writer in batches."""

    def __init__(
        self,
        writer: TableWriter,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        append: bool = False,
    ) -> None:
        """Create a sink.

        Args:
            writer: Destination for flushed batches.
            batch_size: Number of buffered results that triggers a flush.
            append: Append to an existing report instead of replacing it on
                the first flush of the run.
        """

        self._writer = writer
        self._batch_size = validate_batch_size(batch_size)
        self._append = append
        self._buffer: List[MatchResult] = []
        self._has_written = False
        self._flush_count = 0
        self._rows_written = 0

    @property
    def writer(self) -> TableWriter:
        return self._writer

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def pending(self) -> int:
        return len(self._buffer)

    @property
    def has_written(self) -> bool:
        return self._has_written

    @property
    def flush_count(self) -> int:
        return self._flush_count

    @property
    def rows_written(self) -> int:
        return self._rows_written

    def offer(self, result: MatchResult) -> None:
        self._buffer.append(result)

    def flush_if_due(self) -> bool:
        """Flush when the buffer reached ``batch_size``; return whether it did."""

        if len(self._buffer) < self._batch_size:
            return False
        self._flush()
        return True

    def finalize(self) -> None:
        """Flush any remaining results. An empty buffer writes nothing."""

        if self._buffer:
            self._flush()

    def _flush(self) -> None:
        append = self._append or self._has_written
        batch = list(self._buffer)
        # The buffer is only cleared once the writer accepted the batch.
        self._writer.write_batch(batch, append=append)
        self._has_written = True
        self._flush_count += 1
        self._rows_written += len(batch)
        self._buffer.clear()
        logger.debug(
            "Flushed batch %s (%s row(s), %s) to %s",
            self._flush_count,
            len(batch),
            "append" if append else "overwrite",
            self._writer.path,
        )

    def __enter__(self) -> "ResultSink":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        if exc is None:
            self.finalize()
            return
        if isinstance(exc, WriteError) or not self._buffer:
            return
        try:
            self.finalize()
        except WriteError:
            logger.exception(
                "Unable to flush %s buffered result(s) while aborting", len(self._buffer)
            )
        else:
            logger.warning("Flushed buffered results after interrupted scan")
