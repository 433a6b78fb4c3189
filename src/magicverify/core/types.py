"""Shared data structures and error types for the magicverify core.

Example
-------
>>> from pathlib import Path
>>> result = MatchResult(path=Path("a.png"), extension=".png")
>>> result.to_row()
('a.png', '.png', 'N/A', 'N/A', 'N/A', 'Unknown')
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

NOT_APPLICABLE = "N/A"
UNKNOWN_EXTENSION = "Unknown"
ERROR_MARKER = "Error"

REPORT_COLUMNS: Tuple[str, ...] = (
    "FilePath",
    "Extension",
    "ExpectedMagic",
    "ActualMagic",
    "Pass",
    "IdentifiedExtension",
)


class MagicVerifyError(Exception):
    """Base class for all magicverify failures."""


class ConfigError(MagicVerifyError, ValueError):
    """Raised when the signature configuration is missing or malformed."""


class PathNotFoundError(MagicVerifyError, FileNotFoundError):
    """Raised when the scan target does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Path does not exist: {self.path}")


class ReadError(MagicVerifyError):
    """Represents an I/O failure while reading a file header."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {self.reason}")

    def __repr__(self) -> str:  # pragma: no cover - trivial wrapper
        return f"ReadError(path={str(self.path)!r}, reason={self.reason!r})"


class WriteError(MagicVerifyError):
    """Raised when the report artifact cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Unable to write {self.path}: {self.reason}")


@dataclass
class MatchResult:
    path: Path
    extension: str
    expected_magic: str = NOT_APPLICABLE
    actual_magic: str = NOT_APPLICABLE
    passed: Optional[bool] = None
    identified_extension: str = UNKNOWN_EXTENSION
    error: Optional[str] = None

    @property
    def pass_label(self) -> str:
        """Render ``passed`` the way the tabular report shows it."""

        if self.error is not None:
            return ERROR_MARKER
        if self.passed is None:
            return NOT_APPLICABLE
        return str(self.passed)

    def to_row(self) -> Tuple[str, ...]:
        return (
            str(self.path),
            self.extension,
            self.expected_magic,
            self.actual_magic,
            self.pass_label,
            self.identified_extension,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file_path": str(self.path),
            "extension": self.extension,
            "expected_magic": self.expected_magic,
            "actual_magic": self.actual_magic,
            "passed": self.passed,
            "identified_extension": self.identified_extension,
            "error": self.error,
        }
