from __future__ import annotations

from pathlib import Path

from magicverify.core.types import MatchResult
from magicverify.reporting.summary import ScanSummary


def test_summary_counts_each_outcome() -> None:
    summary = ScanSummary()
    summary.record(MatchResult(path=Path("a.png"), extension=".png", passed=True,
                               identified_extension=".png"))
    summary.record(MatchResult(path=Path("b.png"), extension=".png", passed=False,
                               identified_extension=".jpg"))
    summary.record(MatchResult(path=Path("c.png"), extension=".png", passed=False))
    summary.record(MatchResult(path=Path("d.txt"), extension=".txt"))
    summary.record(MatchResult(path=Path("e.png"), extension=".png", error="denied"))
    summary.record_skip()

    assert summary.to_dict() == {
        "scanned": 5,
        "passed": 1,
        "failed": 2,
        "not_applicable": 1,
        "errors": 1,
        "identified": 1,
        "skipped": 1,
    }
    assert summary.render() == (
        "Scanned 5 file(s): 1 passed, 2 failed, 1 unlisted, 1 unreadable,"
        " 1 identified (1 skipped)"
    )


def test_summary_render_omits_zero_extras() -> None:
    assert ScanSummary().render() == "Scanned 0 file(s): 0 passed, 0 failed, 0 unlisted"
