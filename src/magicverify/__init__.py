"""magicverify package.

Checks that files start with the binary signature ("magic number") expected
for their extension and reports passes, failures and the identified real
type of mismatched files.
"""

from __future__ import annotations

from .core import (
    ConfigError,
    MagicVerifyError,
    MatchResult,
    Matcher,
    PathNotFoundError,
    ReadError,
    ScanOptions,
    ScanState,
    Scanner,
    SignatureTable,
    WriteError,
    iter_files,
    load_signature_file,
    load_signature_table,
    match_header,
    scan_path,
)
from .reporting import CsvTableWriter, JsonLinesWriter, ResultSink, ScanSummary
from .catalog import BUILTIN_SIGNATURES, builtin_table

__version__ = "0.1.0"

__all__ = [
    "BUILTIN_SIGNATURES",
    "ConfigError",
    "CsvTableWriter",
    "JsonLinesWriter",
    "MagicVerifyError",
    "MatchResult",
    "Matcher",
    "PathNotFoundError",
    "ReadError",
    "ResultSink",
    "ScanOptions",
    "ScanState",
    "ScanSummary",
    "Scanner",
    "SignatureTable",
    "WriteError",
    "builtin_table",
    "iter_files",
    "load_signature_file",
    "load_signature_table",
    "match_header",
    "scan_path",
]
