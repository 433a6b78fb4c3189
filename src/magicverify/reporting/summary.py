"""Running counters describing a signature scan."""

from __future__ import annotations

from dataclasses import asdict, dataclass

from ..core.types import UNKNOWN_EXTENSION, MatchResult

__all__ = ["ScanSummary"]


@dataclass
class ScanSummary:
    scanned: int = 0
    passed: int = 0
    failed: int = 0
    not_applicable: int = 0
    errors: int = 0
    identified: int = 0
    skipped: int = 0

    def record(self, result: MatchResult) -> None:
        self.scanned += 1
        if result.error is not None:
            self.errors += 1
        elif result.passed is None:
            self.not_applicable += 1
        elif result.passed:
            self.passed += 1
        else:
            self.failed += 1
        if not result.passed and result.identified_extension != UNKNOWN_EXTENSION:
            self.identified += 1

    def record_skip(self) -> None:
        self.skipped += 1

    def to_dict(self) -> dict[str, int]:
        return asdict(self)

    def render(self) -> str:
        text = (
            f"Scanned {self.scanned} file(s): {self.passed} passed, "
            f"{self.failed} failed, {self.not_applicable} unlisted"
        )
        if self.errors:
            text += f", {self.errors} unreadable"
        if self.identified:
            text += f", {self.identified} identified"
        if self.skipped:
            text += f" ({self.skipped} skipped)"
        return text
