"""magicverify core module exports."""

from .types import (
    ConfigError,
    MagicVerifyError,
    MatchResult,
    PathNotFoundError,
    ReadError,
    WriteError,
)
from .signatures import SignatureTable, load_signature_file, load_signature_table
from .matcher import Matcher, header_hex, identify_extension, match_header
from .scanner import ScanOptions, ScanState, Scanner, iter_files, scan_path

__all__ = [
    "ConfigError",
    "MagicVerifyError",
    "MatchResult",
    "Matcher",
    "PathNotFoundError",
    "ReadError",
    "ScanOptions",
    "ScanState",
    "Scanner",
    "SignatureTable",
    "WriteError",
    "header_hex",
    "identify_extension",
    "iter_files",
    "load_signature_file",
    "load_signature_table",
    "match_header",
    "scan_path",
]
