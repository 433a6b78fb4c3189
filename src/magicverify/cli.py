"""Command-line entry point for magicverify signature scans.

``python -m magicverify`` (or the ``magicverify`` console script) covers the
day-to-day workflow:

* Load the extension to signature mapping from a JSON file or the built-in
  catalog.
* Scan a single file or a directory tree, optionally recursing, skipping
  unlisted extensions and identifying mismatched files.
* Stream results into a CSV or JSON lines report in bounded batches.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .catalog import builtin_table
from .core.scanner import ScanOptions, Scanner
from .core.types import ConfigError, PathNotFoundError, ReadError, WriteError
from .reporting.csv_table import CsvTableWriter
from .reporting.json_lines import JsonLinesWriter
from .reporting.sink import DEFAULT_BATCH_SIZE, ResultSink, TableWriter

_DEFAULT_OUTPUT_STEM = "magic_report"
_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value!r}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="magicverify",
        description="Verify that files start with the magic number expected for their extension.",
    )
    parser.add_argument(
        "path",
        type=Path,
        help="File or directory to scan.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "-c",
        "--config",
        type=Path,
        help="JSON file mapping extensions (e.g. .png) to hex signatures.",
    )
    source.add_argument(
        "--builtin",
        action="store_true",
        help="Use the built-in signature catalog instead of a configuration file.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=None,
        help="Report destination (default: magic_report.csv or magic_report.jsonl).",
    )
    parser.add_argument(
        "--format",
        choices=("csv", "jsonl"),
        default="csv",
        help="Report format (default: csv).",
    )
    parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="Descend into subdirectories.",
    )
    parser.add_argument(
        "--identify",
        action="store_true",
        help="Identify the real type of files that fail or have unlisted extensions.",
    )
    parser.add_argument(
        "--skip-unknown",
        action="store_true",
        help="Leave files with unlisted extensions out of the report without reading them.",
    )
    parser.add_argument(
        "--batch-size",
        type=_positive_int,
        default=DEFAULT_BATCH_SIZE,
        help=f"Results buffered before each write (default: {DEFAULT_BATCH_SIZE}).",
    )
    parser.add_argument(
        "--append",
        action="store_true",
        help="Append to an existing report instead of replacing it.",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Abort on the first unreadable file instead of reporting it.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every file as it is checked.",
    )
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=_LOG_FORMAT,
        datefmt="%H:%M:%S",
    )


def _build_writer(fmt: str, output: Optional[Path]) -> TableWriter:
    if fmt == "jsonl":
        return JsonLinesWriter(output or Path(f"{_DEFAULT_OUTPUT_STEM}.jsonl"))
    return CsvTableWriter(output or Path(f"{_DEFAULT_OUTPUT_STEM}.csv"))


def main(argv: Sequence[str] | None = None) -> int:
    if argv is None:
        argv = list(sys.argv[1:])
    else:
        argv = list(argv)

    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    root: Path = args.path
    if not root.exists():
        parser.error(f"Path does not exist: {root}")
        return 2

    options = ScanOptions(
        recursive=args.recursive,
        identify=args.identify,
        skip_unknown=args.skip_unknown,
        batch_size=args.batch_size,
        append=args.append,
        fail_fast=args.fail_fast,
    )
    scanner = Scanner(options=options)
    try:
        if args.builtin:
            scanner.load_signatures(builtin_table().to_dict())
        else:
            scanner.load_signatures(args.config)
    except ConfigError as exc:
        parser.error(str(exc))
        return 2

    writer = _build_writer(args.format, args.output)
    try:
        with ResultSink(writer, batch_size=options.batch_size, append=options.append) as sink:
            summary = scanner.run(root, sink)
    except PathNotFoundError as exc:
        parser.error(str(exc))
        return 2
    except (ReadError, WriteError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 1

    sys.stdout.write(f"{summary.render()}\n")
    if sink.rows_written:
        sys.stdout.write(f"Report written to {writer.path}\n")
    else:
        sys.stdout.write("No files matched; report not written\n")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry
    sys.exit(main())


def console_main() -> None:
    """Entry point for ``magicverify`` console script."""

    sys.exit(main())
